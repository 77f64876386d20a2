"""
Default work/rest pattern generation.
Computes the status of a day that has neither an explicit record nor a
holiday override.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, List, Optional, Sequence

from workday.constants import (
    MODE_STANDARD_WEEKDAY, MODE_CUSTOM_WEEKLY, MODE_SHIFT_CYCLE,
    SHIFT_SLOTS, DEFAULT_SHIFT_SLOTS,
    DEFAULT_WEEKLY_PATTERN, DEFAULT_SHIFT_CYCLE_PATTERN, DEFAULT_PARTIAL_SHIFT_PATTERN,
)

PATTERN_MODES = (MODE_STANDARD_WEEKDAY, MODE_CUSTOM_WEEKLY, MODE_SHIFT_CYCLE)


def valid_shifts(number_of_shift_slots: int) -> FrozenSet[int]:
    """Shift identifiers usable with the given slot count (2 slots for unknown counts)"""
    return frozenset(SHIFT_SLOTS.get(number_of_shift_slots, SHIFT_SLOTS[DEFAULT_SHIFT_SLOTS]))


def weekday_index(day: date) -> int:
    """Weekday number with Sunday=0 ... Saturday=6"""
    return (day.weekday() + 1) % 7


def cycle_index(anchor: date, target: date, length: int) -> int:
    """
    Position of target within a cycle of the given length anchored at anchor.

    Dates before the anchor wrap around, so the result is always in [0, length).
    """
    days_since_start = (target - anchor).days
    return days_since_start % length


@dataclass
class PatternConfig:
    """User-configurable default pattern (singleton, replaced wholesale on edit)"""
    mode: int = MODE_STANDARD_WEEKDAY
    weekly_pattern: List[bool] = field(default_factory=lambda: list(DEFAULT_WEEKLY_PATTERN))
    shift_cycle_pattern: List[bool] = field(default_factory=lambda: list(DEFAULT_SHIFT_CYCLE_PATTERN))
    cycle_start_date: date = field(default_factory=date.today)
    number_of_shift_slots: int = DEFAULT_SHIFT_SLOTS
    partial_shift_cycle_pattern: List[List[int]] = field(
        default_factory=lambda: [list(shifts) for shifts in DEFAULT_PARTIAL_SHIFT_PATTERN]
    )
    partial_day_enabled: bool = False

    def __post_init__(self):
        if self.number_of_shift_slots not in SHIFT_SLOTS:
            self.number_of_shift_slots = DEFAULT_SHIFT_SLOTS

    def to_dict(self) -> dict:
        """Flat settings blob, JSON-encodable"""
        return {
            "mode": self.mode,
            "weekly_pattern": list(self.weekly_pattern),
            "shift_cycle_pattern": list(self.shift_cycle_pattern),
            "cycle_start_date": self.cycle_start_date.isoformat(),
            "number_of_shift_slots": self.number_of_shift_slots,
            "partial_shift_cycle_pattern": [sorted(shifts) for shifts in self.partial_shift_cycle_pattern],
            "partial_day_enabled": self.partial_day_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PatternConfig":
        config = cls()
        if "mode" in data:
            mode = int(data["mode"])
            config.mode = mode if mode in PATTERN_MODES else MODE_STANDARD_WEEKDAY
        if data.get("weekly_pattern") is not None:
            config.weekly_pattern = [bool(v) for v in data["weekly_pattern"]]
        if data.get("shift_cycle_pattern") is not None:
            config.shift_cycle_pattern = [bool(v) for v in data["shift_cycle_pattern"]]
        if data.get("cycle_start_date"):
            start = data["cycle_start_date"]
            config.cycle_start_date = start if isinstance(start, date) else date.fromisoformat(start)
        if "number_of_shift_slots" in data:
            slots = int(data["number_of_shift_slots"])
            config.number_of_shift_slots = slots if slots in SHIFT_SLOTS else DEFAULT_SHIFT_SLOTS
        if data.get("partial_shift_cycle_pattern") is not None:
            config.partial_shift_cycle_pattern = [
                [int(s) for s in shifts] for shifts in data["partial_shift_cycle_pattern"]
            ]
        if "partial_day_enabled" in data:
            config.partial_day_enabled = bool(data["partial_day_enabled"])
        return config


class PatternEngine:
    """
    Default status computation for one PatternConfig.

    Degenerate configurations (empty or wrongly sized patterns, unknown mode)
    silently fall back to the standard Monday-Friday week.
    """

    def __init__(self, config: Optional[PatternConfig] = None):
        self.config = config or PatternConfig()

    @property
    def full_shifts(self) -> FrozenSet[int]:
        return valid_shifts(self.config.number_of_shift_slots)

    def shifts_for(self, is_work_day: bool) -> FrozenSet[int]:
        """Full shift set for a work day, empty set for a rest day"""
        return self.full_shifts if is_work_day else frozenset()

    @staticmethod
    def standard_weekday(day: date) -> bool:
        """Monday to Friday are work days"""
        return 1 <= weekday_index(day) <= 5

    def partial_pattern_mismatch(self) -> bool:
        """Partial days enabled with a partial pattern that does not fit the shift cycle"""
        return (
            self.config.partial_day_enabled
            and len(self.config.partial_shift_cycle_pattern) != len(self.config.shift_cycle_pattern)
        )

    def is_work_day(self, day: date) -> bool:
        """Default work/rest flag for a day"""
        mode = self.config.mode

        if mode == MODE_CUSTOM_WEEKLY:
            pattern = self.config.weekly_pattern
            if len(pattern) != 7:
                return self.standard_weekday(day)
            return bool(pattern[weekday_index(day)])

        if mode == MODE_SHIFT_CYCLE:
            pattern = self.config.shift_cycle_pattern
            if not pattern or self.partial_pattern_mismatch():
                return self.standard_weekday(day)
            index = cycle_index(self.config.cycle_start_date, day, len(pattern))
            return bool(pattern[index])

        return self.standard_weekday(day)

    def partial_shifts(self, day: date) -> FrozenSet[int]:
        """
        Default shift set for a day when the partial-day feature is enabled.

        Only shift-cycle mode has a sub-pattern. Other modes get the full/empty
        set of their own flag; a partial pattern that does not match the cycle
        length gets the full/empty set of the standard week.
        """
        cycle = self.config.shift_cycle_pattern
        partial = self.config.partial_shift_cycle_pattern
        if self.config.mode != MODE_SHIFT_CYCLE or not cycle:
            return self.shifts_for(self.is_work_day(day))
        if len(partial) != len(cycle):
            return self.shifts_for(self.standard_weekday(day))

        index = cycle_index(self.config.cycle_start_date, day, len(partial))
        return frozenset(partial[index])

    def default_shifts(self, day: date) -> FrozenSet[int]:
        """Shift set for the pattern tier, honouring the partial-day flag"""
        if self.config.partial_day_enabled:
            return self.partial_shifts(day)
        return self.shifts_for(self.is_work_day(day))


def resize_partial_pattern(
    partial: Sequence[Sequence[int]],
    length: int,
    full: FrozenSet[int],
    cycle: Sequence[bool] = (),
) -> List[List[int]]:
    """
    Fit a partial-shift pattern to a new cycle length.

    Existing entries are kept; new positions get the full set for work days
    in the cycle and the empty set otherwise.
    """
    resized = [sorted(set(shifts) & full) for shifts in list(partial)[:length]]
    for index in range(len(resized), length):
        is_work = bool(cycle[index]) if index < len(cycle) else False
        resized.append(sorted(full) if is_work else [])
    return resized
