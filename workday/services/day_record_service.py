"""
Day record service - edits of explicit per-day records.

This is the edit boundary: note length and shift ids are validated here,
and records that stop carrying information are removed.
"""
import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from workday.constants import NOTE_MAX_LENGTH
from workday.exceptions import DayRecordNotFoundException, ValidationException
from workday.records import DayRecord, DayStatus, Unset, UserRest, UserWork, UserPartial
from workday.repositories.day_record_repository import DayRecordRepository
from workday.repositories.settings_repository import SettingsRepository
from workday.services.day_status_service import DayStatusResolver, DayStatusResult

logger = logging.getLogger("workday.day_records")

STATUS_NAMES = {
    Unset: "unset",
    UserRest: "rest",
    UserWork: "work",
    UserPartial: "partial",
}


def status_name(status: DayStatus) -> str:
    return STATUS_NAMES[type(status)]


def normalize_note(note: Optional[str]) -> Optional[str]:
    """Strip a note and enforce its maximum length; blank notes become None"""
    if note is None:
        return None
    note = note.strip()
    if len(note) > NOTE_MAX_LENGTH:
        raise ValidationException("note", f"must be at most {NOTE_MAX_LENGTH} characters")
    return note or None


class DayRecordService:
    """Service for creating, toggling and annotating explicit day records"""

    def __init__(self, db: Session, resolver: DayStatusResolver):
        self.db = db
        self.resolver = resolver

    def get(self, day: date) -> Optional[DayRecord]:
        return DayRecordRepository.get(self.db, day)

    def _save(self, record: DayRecord) -> Optional[DayRecord]:
        stored = DayRecordRepository.upsert(self.db, record)
        SettingsRepository.mark_data_changed(self.db)
        return stored

    def _validate_shifts(self, shifts: Iterable[int]) -> frozenset:
        requested = frozenset(shifts)
        full = self.resolver.engine.full_shifts
        invalid = requested - full
        if invalid:
            raise ValidationException(
                "shifts",
                f"{sorted(invalid)} not valid for {self.resolver.engine.config.number_of_shift_slots} shift slots"
            )
        return requested

    def _status_for_shifts(self, shifts: frozenset) -> DayStatus:
        if not shifts:
            return UserRest()
        if shifts == self.resolver.engine.full_shifts:
            return UserWork()
        return UserPartial(shifts)

    def set_status(
        self,
        day: date,
        name: str,
        note: Optional[str] = None,
        shifts: Optional[Iterable[int]] = None
    ) -> Optional[DayRecord]:
        """
        Replace the record for a day.

        Args:
            day: Calendar day
            name: "unset", "rest", "work" or "partial"
            note: Optional note (at most NOTE_MAX_LENGTH characters)
            shifts: Shift ids, required for "partial"; no shifts is a rest day
                and all shifts a full work day

        Returns:
            Stored record, or None when the result carries no information
        """
        note = normalize_note(note)
        if name == "rest":
            status = UserRest()
        elif name == "work":
            status = UserWork()
        elif name == "partial":
            if shifts is None:
                raise ValidationException("shifts", "required for partial days")
            status = self._status_for_shifts(self._validate_shifts(shifts))
        elif name == "unset":
            status = Unset()
        else:
            raise ValidationException("status", f"unknown status {name!r}")

        logger.info(f"Day {day}: status set to {name}")
        return self._save(DayRecord(date=day, status=status, note=note))

    def toggle(self, day: date) -> DayStatusResult:
        """
        Flip a day between work and rest.

        An existing work/rest record is flipped and keeps its note. Days
        without a status override get the opposite of what they currently
        resolve to.
        """
        record = self.get(day)
        if record is not None and isinstance(record.status, UserRest):
            status = UserWork()
        elif record is not None and isinstance(record.status, (UserWork, UserPartial)):
            status = UserRest()
        else:
            current = self.resolver.resolve(day)
            status = UserRest() if current.is_work_day else UserWork()

        note = record.note if record else None
        self._save(DayRecord(date=day, status=status, note=note))
        logger.info(f"Day {day}: toggled to {status_name(status)}")
        return self.resolver.resolve(day)

    def save_note(self, day: date, note: Optional[str]) -> Optional[DayRecord]:
        """
        Set or clear the note of a day without changing its status.

        Clearing the note removes the record when its status adds nothing
        to what holidays and the pattern already give.
        """
        note = normalize_note(note)
        record = self.get(day)

        if record is None:
            if note is None:
                return None
            return self._save(DayRecord(date=day, status=Unset(), note=note))

        status = record.status
        if note is None and isinstance(status, (UserRest, UserWork)):
            expected = self.resolver.resolve_without_record(day)
            if isinstance(status, UserWork) == expected.is_work_day:
                status = Unset()

        return self._save(DayRecord(date=day, status=status, note=note))

    def set_shifts(self, day: date, shifts: Iterable[int]) -> Optional[DayRecord]:
        """Mark the active shifts of a day; empty means rest, all means work"""
        status = self._status_for_shifts(self._validate_shifts(shifts))
        record = self.get(day)
        note = record.note if record else None
        return self._save(DayRecord(date=day, status=status, note=note))

    def delete(self, day: date) -> None:
        """
        Remove the explicit record of a day.

        Raises:
            DayRecordNotFoundException: If the day has no record
        """
        if not DayRecordRepository.delete(self.db, day):
            raise DayRecordNotFoundException(day)
        SettingsRepository.mark_data_changed(self.db)
        logger.info(f"Day {day}: explicit record removed")
