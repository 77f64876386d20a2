"""
Plain domain records shared by the resolver, the feed parser and the stores.

A day's explicit status is a tagged variant: Unset, UserRest, UserWork or
UserPartial(shifts). The integer codes only exist at the storage boundary.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Optional, Union

from workday.constants import (
    STATUS_UNSET, STATUS_USER_REST, STATUS_USER_WORK, STATUS_USER_PARTIAL,
    HOLIDAY_TYPE_HOLIDAY, HOLIDAY_TYPE_REST, HOLIDAY_TYPE_WORK,
)


@dataclass(frozen=True)
class Unset:
    """No explicit status; lower tiers decide."""
    code = STATUS_UNSET


@dataclass(frozen=True)
class UserRest:
    code = STATUS_USER_REST


@dataclass(frozen=True)
class UserWork:
    code = STATUS_USER_WORK


@dataclass(frozen=True)
class UserPartial:
    """Work day limited to the given shift identifiers."""
    shifts: FrozenSet[int] = frozenset()
    code = STATUS_USER_PARTIAL


DayStatus = Union[Unset, UserRest, UserWork, UserPartial]


def status_from_code(code: Optional[int], shifts=None) -> DayStatus:
    """Build a status variant from its storage code; unknown codes are Unset."""
    if code == STATUS_USER_REST:
        return UserRest()
    if code == STATUS_USER_WORK:
        return UserWork()
    if code == STATUS_USER_PARTIAL:
        return UserPartial(frozenset(shifts or ()))
    return Unset()


@dataclass(frozen=True)
class DayRecord:
    """User-owned explicit record for one calendar day."""
    date: date
    status: DayStatus = field(default_factory=Unset)
    note: Optional[str] = None

    @property
    def overrides_status(self) -> bool:
        return not isinstance(self.status, Unset)

    @property
    def carries_information(self) -> bool:
        """False for Unset records without a note; such records are never stored."""
        return self.overrides_status or bool(self.note)

    @property
    def shifts(self) -> FrozenSet[int]:
        if isinstance(self.status, UserPartial):
            return self.status.shifts
        return frozenset()


@dataclass(frozen=True)
class HolidayRecord:
    """System-owned override derived from a holiday feed."""
    date: date
    name: str
    is_work_day: bool
    type: str = HOLIDAY_TYPE_HOLIDAY

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "name": self.name,
            "isWorkDay": self.is_work_day,
            "type": self.type,
        }


HOLIDAY_TYPES = (HOLIDAY_TYPE_HOLIDAY, HOLIDAY_TYPE_REST, HOLIDAY_TYPE_WORK)
