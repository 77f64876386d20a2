"""
Holiday feed parser.
Turns an iCalendar document into HolidayRecords without touching the
network or the database.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from icalendar import Calendar
from icalendar.cal import Component

from workday.constants import (
    FEED_NAME_MAX_LENGTH,
    FEED_SUMMARY_LANGUAGE,
    FEED_METADATA_MARKERS,
    FEED_TAG_ALTERNATE_WORKDAY,
    FEED_TAG_WORK_HOLIDAY,
    HOLIDAY_TYPE_HOLIDAY,
    HOLIDAY_TYPE_WORK,
    TAGGED_HOLIDAY_PREFERENCES,
)
from workday.exceptions import FeedParseException
from workday.records import HolidayRecord

logger = logging.getLogger("workday.feed_parser")


def property_values(component: Component, name: str) -> list:
    """All values of a property; icalendar returns a list only for repeated properties"""
    values = component.get(name)
    if values is None:
        return []
    if isinstance(values, list):
        return values
    return [values]


def event_date(component: Component, name: str) -> Optional[date]:
    """
    Calendar day of a DTSTART/DTEND property.

    Date-times keep the day written in the feed, without timezone conversion.
    Values icalendar could not decode give None.
    """
    prop = component.get(name)
    value = getattr(prop, "dt", None)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def clean_name(raw: str) -> str:
    """
    Trim, truncate and strip trailing feed metadata from a summary value.
    """
    name = raw.strip()
    if len(name) > FEED_NAME_MAX_LENGTH:
        name = name[:FEED_NAME_MAX_LENGTH]
    for marker in FEED_METADATA_MARKERS:
        position = name.find(marker)
        if position != -1:
            name = name[:position].strip()
    return name


class CalendarFeedParser:
    """
    Parser for holiday calendar feeds.

    Tagged feeds mark each event with an X-APPLE-SPECIAL-DAY property:
    ALTERNATE-WORKDAY events become work days, WORK-HOLIDAY events become
    rest days and untagged events are ignored. In untagged feeds every event
    is a rest day.
    """

    def __init__(self, tagged: bool = False, summary_language: str = FEED_SUMMARY_LANGUAGE):
        self.tagged = tagged
        self.summary_language = summary_language

    @classmethod
    def for_preference(cls, preference: int) -> "CalendarFeedParser":
        return cls(tagged=preference in TAGGED_HOLIDAY_PREFERENCES)

    def parse_bytes(self, payload: bytes) -> List[HolidayRecord]:
        """
        Decode a UTF-8 payload and parse it.

        Raises:
            FeedParseException: If the payload is not valid UTF-8 or not a calendar
        """
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FeedParseException(f"payload is not UTF-8 ({e})") from e
        return self.parse(text)

    def load_calendar(self, text: str) -> Component:
        """
        Read the document as a single VCALENDAR.

        Raises:
            FeedParseException: For anything else (HTML error pages, truncated
                downloads, empty bodies)
        """
        try:
            calendar = Calendar.from_ical(text)
        except (ValueError, IndexError) as e:
            raise FeedParseException(f"not an iCalendar document ({e})") from e
        if calendar.name != "VCALENDAR":
            raise FeedParseException(f"expected VCALENDAR, got {calendar.name}")
        return calendar

    def parse(self, text: str) -> List[HolidayRecord]:
        """
        Parse a feed document into records, in order of appearance.

        A valid calendar without events gives an empty list.
        """
        calendar = self.load_calendar(text)
        records: List[HolidayRecord] = []
        events = calendar.walk("VEVENT")
        logger.debug(f"Found {len(events)} events in feed")

        for index, event in enumerate(events):
            is_work_day = self._classify(event)
            if is_work_day is None:
                continue
            event_records = self._extract(event, is_work_day)
            if not event_records:
                logger.debug(f"Skipping malformed event #{index}")
            records.extend(event_records)

        return records

    def _classify(self, event: Component) -> Optional[bool]:
        """Work/rest flag for an event; None when a tagged feed event carries no tag"""
        if not self.tagged:
            return False
        for value in property_values(event, "X-APPLE-SPECIAL-DAY"):
            tag = str(value).strip().upper()
            if tag == FEED_TAG_ALTERNATE_WORKDAY:
                return True
            if tag == FEED_TAG_WORK_HOLIDAY:
                return False
        return None

    def _summary(self, event: Component) -> str:
        language_summary = None
        plain_summary = None
        for prop in property_values(event, "SUMMARY"):
            language = prop.params.get("LANGUAGE")
            if language is None:
                if plain_summary is None:
                    plain_summary = str(prop)
            elif language == self.summary_language and language_summary is None:
                language_summary = str(prop)
        raw = language_summary if language_summary is not None else plain_summary
        return clean_name(raw) if raw is not None else ""

    def _extract(self, event: Component, is_work_day: bool) -> List[HolidayRecord]:
        start = event_date(event, "DTSTART")
        end = event_date(event, "DTEND")
        name = self._summary(event)
        if start is None or not name:
            return []

        holiday_type = HOLIDAY_TYPE_WORK if is_work_day else HOLIDAY_TYPE_HOLIDAY
        if end is None or end <= start:
            return [HolidayRecord(date=start, name=name, is_work_day=is_work_day, type=holiday_type)]

        # DTEND is exclusive
        days = (end - start).days
        return [
            HolidayRecord(
                date=start + timedelta(days=offset),
                name=name,
                is_work_day=is_work_day,
                type=holiday_type,
            )
            for offset in range(days)
        ]
