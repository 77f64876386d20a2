"""
Day status resolution.

Three tiers, each consulted only when the previous one has no answer:
1. explicit user record with a status other than Unset
2. holiday override
3. default pattern
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, FrozenSet, List, Optional

from workday.constants import SOURCE_EXPLICIT, SOURCE_HOLIDAY, SOURCE_PATTERN
from workday.records import DayRecord, UserWork, UserPartial
from workday.services.holiday_store import HolidayStore
from workday.services.pattern_service import PatternEngine

RecordLookup = Callable[[date], Optional[DayRecord]]


@dataclass(frozen=True)
class DayStatusResult:
    date: date
    is_work_day: bool
    shifts: FrozenSet[int]
    source: str
    note: Optional[str] = None
    holiday_name: Optional[str] = None


def resolve_day_status(
    day: date,
    record: Optional[DayRecord],
    holidays: HolidayStore,
    engine: PatternEngine,
) -> DayStatusResult:
    """
    Resolve one day from already looked-up inputs.

    An Unset record with a note does not decide the status, but its note is
    still returned.
    """
    note = record.note if record else None
    holiday = holidays.lookup(day)
    holiday_name = holiday.name if holiday else None

    if record is not None and record.overrides_status:
        status = record.status
        if isinstance(status, UserPartial):
            shifts = status.shifts
        elif isinstance(status, UserWork):
            shifts = engine.full_shifts
        else:
            shifts = frozenset()
        return DayStatusResult(
            date=day,
            is_work_day=isinstance(status, (UserWork, UserPartial)),
            shifts=shifts,
            source=SOURCE_EXPLICIT,
            note=note,
            holiday_name=holiday_name,
        )

    if holiday is not None:
        return DayStatusResult(
            date=day,
            is_work_day=holiday.is_work_day,
            shifts=engine.shifts_for(holiday.is_work_day),
            source=SOURCE_HOLIDAY,
            note=note,
            holiday_name=holiday_name,
        )

    return DayStatusResult(
        date=day,
        is_work_day=engine.is_work_day(day),
        shifts=engine.default_shifts(day),
        source=SOURCE_PATTERN,
        note=note,
    )


class DayStatusResolver:
    """Resolver bound to a record lookup, a holiday store and a pattern engine"""

    def __init__(self, record_lookup: RecordLookup, holidays: HolidayStore, engine: PatternEngine):
        self.record_lookup = record_lookup
        self.holidays = holidays
        self.engine = engine

    def resolve(self, day: date) -> DayStatusResult:
        if isinstance(day, datetime):
            day = day.date()
        return resolve_day_status(day, self.record_lookup(day), self.holidays, self.engine)

    def is_work_day(self, day: date) -> bool:
        return self.resolve(day).is_work_day

    def resolve_without_record(self, day: date) -> DayStatusResult:
        """Status the day would have if it had no explicit record"""
        return resolve_day_status(day, None, self.holidays, self.engine)

    def resolve_range(self, start: date, end: date) -> List[DayStatusResult]:
        """Resolve every day in [start, end] inclusive"""
        days = (end - start).days
        return [self.resolve(start + timedelta(days=offset)) for offset in range(days + 1)]
