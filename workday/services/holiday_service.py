"""
Holiday service - feed download, parsing and store replacement.

A refresh either replaces the whole holiday set or leaves it untouched.
Only one refresh runs at a time; overlapping requests fail immediately.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from workday.constants import (
    FEED_TIMEOUT_SECONDS,
    HOLIDAY_FEED_URLS,
    HOLIDAY_PREFERENCE_NONE,
    HOLIDAY_PREFERENCE_NAMES,
)
from workday.exceptions import FeedFetchException, FeedParseException, FetchInProgressException
from workday.records import HolidayRecord
from workday.repositories.holiday_repository import HolidayRepository
from workday.repositories.settings_repository import SettingsRepository
from workday.services.feed_parser import CalendarFeedParser
from workday.services.holiday_store import HolidayStore

logger = logging.getLogger("workday.holidays")

_refresh_lock = threading.Lock()


@dataclass
class FetchResult:
    success: bool
    record_count: int = 0
    error: Optional[str] = None


class FeedTransport:
    """Downloads feed documents over HTTP"""

    def __init__(self, timeout: float = FEED_TIMEOUT_SECONDS, client: Optional[httpx.Client] = None):
        self.timeout = timeout
        self.client = client

    def fetch(self, url: str) -> bytes:
        """
        Download a feed.

        Raises:
            FeedFetchException: On connectivity errors, timeouts or non-200 responses
        """
        try:
            if self.client is not None:
                response = self.client.get(url, timeout=self.timeout)
            else:
                with httpx.Client(follow_redirects=True) as client:
                    response = client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise FeedFetchException(url, f"timeout ({e})") from e
        except httpx.HTTPError as e:
            raise FeedFetchException(url, str(e)) from e

        if response.status_code != 200:
            raise FeedFetchException(url, f"HTTP {response.status_code}")

        logger.info(f"Holiday data received from {url} - size: {len(response.content)} bytes")
        return response.content


def log_holiday_summary(records: List[HolidayRecord]) -> None:
    """Log the work days and rest days found in a refresh"""
    work_days = sorted((r for r in records if r.is_work_day), key=lambda r: r.date)
    rest_days = sorted((r for r in records if not r.is_work_day), key=lambda r: r.date)

    logger.info(f"Holiday refresh summary: {len(records)} records")
    logger.info(f"Work days ({len(work_days)}): " + (
        ", ".join(f"{r.date.isoformat()} {r.name}" for r in work_days) or "none"
    ))
    logger.info(f"Rest days ({len(rest_days)}): " + (
        ", ".join(f"{r.date.isoformat()} {r.name}" for r in rest_days) or "none"
    ))


class HolidayService:
    """Service for keeping the holiday store in sync with the selected feed"""

    def __init__(self, db: Session, store: HolidayStore, transport: Optional[FeedTransport] = None):
        self.db = db
        self.store = store
        self.transport = transport or FeedTransport()

    def load(self) -> HolidayStore:
        """Fill the store from the persisted snapshot"""
        records = HolidayRepository.load(self.db)
        self.store.upsert_all(records)
        logger.info(f"Loaded {len(records)} stored holiday records")
        return self.store

    def current_preference(self) -> int:
        return SettingsRepository.get(self.db).holiday_preference or HOLIDAY_PREFERENCE_NONE

    def set_preference(
        self,
        preference: int,
        completion: Optional[Callable[[bool], None]] = None
    ) -> FetchResult:
        """Store a new holiday source and refresh the holiday set for it"""
        settings = SettingsRepository.get(self.db)
        settings.holiday_preference = preference
        SettingsRepository.update(self.db, settings)
        logger.info(f"Holiday preference set to {HOLIDAY_PREFERENCE_NAMES.get(preference, preference)}")
        return self.refresh(completion)

    def refresh(self, completion: Optional[Callable[[bool], None]] = None) -> FetchResult:
        """
        Fetch, parse and store holidays for the current preference.

        Failures leave stored holidays unchanged. The optional completion
        callback receives the success flag.
        """
        try:
            result = self._refresh_single_flight()
        except FetchInProgressException as e:
            logger.warning(str(e))
            result = FetchResult(success=False, error=str(e))

        if completion is not None:
            completion(result.success)
        return result

    def _refresh_single_flight(self) -> FetchResult:
        if not _refresh_lock.acquire(blocking=False):
            raise FetchInProgressException()
        try:
            return self._refresh()
        finally:
            _refresh_lock.release()

    def _refresh(self) -> FetchResult:
        preference = self.current_preference()
        logger.info(f"Holiday refresh started - preference: {HOLIDAY_PREFERENCE_NAMES.get(preference, preference)}")

        if preference == HOLIDAY_PREFERENCE_NONE:
            HolidayRepository.clear(self.db)
            self.store.clear()
            SettingsRepository.mark_data_changed(self.db)
            logger.info("No holiday preference selected, holidays cleared")
            return FetchResult(success=True)

        url = HOLIDAY_FEED_URLS.get(preference)
        if not url:
            logger.error(f"No calendar URL for holiday preference {preference}")
            return FetchResult(success=False, error=f"Unknown holiday preference {preference}")

        try:
            payload = self.transport.fetch(url)
            records = CalendarFeedParser.for_preference(preference).parse_bytes(payload)
        except (FeedFetchException, FeedParseException) as e:
            logger.error(f"Holiday refresh failed: {e}")
            return FetchResult(success=False, error=str(e))

        try:
            count = HolidayRepository.replace_all(self.db, records)
        except SQLAlchemyError as e:
            logger.error(f"Saving holiday data failed: {e}")
            return FetchResult(success=False, error=f"Saving holiday data failed: {e}")

        self.store.upsert_all(records)

        settings = SettingsRepository.get(self.db)
        settings.last_holiday_fetch = datetime.now()
        SettingsRepository.update(self.db, settings)
        SettingsRepository.mark_data_changed(self.db)

        log_holiday_summary(records)
        logger.info(f"Holiday refresh completed successfully: {count} records")
        return FetchResult(success=True, record_count=count)
