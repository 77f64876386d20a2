"""
Tests for the default pattern engine.

Tests cover:
1. Standard weekday mode
2. Custom weekly mode
3. Shift cycle mode and the modulo law for dates before the anchor
4. Fallback for degenerate configurations
5. Shift sets and partial-day patterns
"""
import pytest
from datetime import date, timedelta

from workday.constants import MODE_STANDARD_WEEKDAY, MODE_CUSTOM_WEEKLY, MODE_SHIFT_CYCLE
from workday.services.pattern_service import (
    PatternConfig, PatternEngine, valid_shifts, weekday_index, cycle_index, resize_partial_pattern,
)

ANCHOR = date(2025, 1, 1)


def engine(**kwargs) -> PatternEngine:
    kwargs.setdefault("cycle_start_date", ANCHOR)
    return PatternEngine(PatternConfig(**kwargs))


class TestStandardWeekday:
    """Monday-Friday work week"""

    def test_saturday_is_rest(self, saturday):
        assert engine().is_work_day(saturday) is False

    def test_sunday_is_rest(self, sunday):
        assert engine().is_work_day(sunday) is False

    def test_tuesday_is_work(self, tuesday):
        assert engine().is_work_day(tuesday) is True

    def test_full_week(self):
        week = [engine().is_work_day(date(2025, 1, 5) + timedelta(days=i)) for i in range(7)]

        assert week == [False, True, True, True, True, True, False]

    def test_unknown_mode_is_standard(self, saturday, tuesday):
        pattern = engine(mode=42)

        assert pattern.is_work_day(saturday) is False
        assert pattern.is_work_day(tuesday) is True


class TestCustomWeekly:
    """Seven-entry pattern indexed Sunday=0"""

    def test_weekend_worker(self, saturday, wednesday):
        pattern = engine(mode=MODE_CUSTOM_WEEKLY, weekly_pattern=[True, False, False, False, False, False, True])

        assert pattern.is_work_day(wednesday) is False
        assert pattern.is_work_day(saturday) is True

    def test_wrong_length_falls_back(self, saturday, tuesday):
        pattern = engine(mode=MODE_CUSTOM_WEEKLY, weekly_pattern=[True, True, True])

        assert pattern.is_work_day(saturday) is False
        assert pattern.is_work_day(tuesday) is True

    def test_weekday_index_sunday_first(self, sunday, saturday):
        assert weekday_index(sunday) == 0
        assert weekday_index(saturday) == 6


class TestShiftCycle:
    """Cycle anchored at cycle_start_date"""

    CYCLE = [True, True, False]

    def test_anchor_is_position_zero(self):
        pattern = engine(mode=MODE_SHIFT_CYCLE, shift_cycle_pattern=self.CYCLE)

        assert [pattern.is_work_day(ANCHOR + timedelta(days=i)) for i in range(6)] == [
            True, True, False, True, True, False
        ]

    def test_day_before_anchor_wraps_to_last_position(self):
        pattern = engine(mode=MODE_SHIFT_CYCLE, shift_cycle_pattern=self.CYCLE)

        assert pattern.is_work_day(ANCHOR - timedelta(days=1)) is False
        assert cycle_index(ANCHOR, ANCHOR - timedelta(days=1), 3) == 2

    @pytest.mark.parametrize("offset", [-400, -7, -3, -1, 0, 1, 2, 365, 1000])
    def test_modulo_law(self, offset):
        """Day at A + k*L + i has the status of position i"""
        cycle = [True, False, False, True, True]
        pattern = engine(mode=MODE_SHIFT_CYCLE, shift_cycle_pattern=cycle)
        day = ANCHOR + timedelta(days=offset)

        assert pattern.is_work_day(day) == cycle[offset % len(cycle)]
        assert pattern.is_work_day(day) == pattern.is_work_day(day + timedelta(days=len(cycle)))

    def test_cycle_index_always_in_range(self):
        for offset in range(-30, 30):
            assert 0 <= cycle_index(ANCHOR, ANCHOR + timedelta(days=offset), 7) < 7

    def test_empty_cycle_falls_back(self, saturday, tuesday):
        pattern = engine(mode=MODE_SHIFT_CYCLE, shift_cycle_pattern=[])

        assert pattern.is_work_day(saturday) is False
        assert pattern.is_work_day(tuesday) is True


class TestShiftSets:
    """Shift identifiers per slot count"""

    def test_valid_shifts_mapping(self):
        assert valid_shifts(2) == {2, 4}
        assert valid_shifts(3) == {2, 3, 4}
        assert valid_shifts(4) == {1, 2, 3, 4}

    def test_unknown_slot_count_uses_two(self):
        assert valid_shifts(7) == {2, 4}
        assert PatternConfig(number_of_shift_slots=9).number_of_shift_slots == 2

    def test_shifts_for(self):
        pattern = engine(number_of_shift_slots=3)

        assert pattern.shifts_for(True) == {2, 3, 4}
        assert pattern.shifts_for(False) == frozenset()

    def test_default_shifts_without_partial_days(self, saturday, tuesday):
        pattern = engine()

        assert pattern.default_shifts(tuesday) == {2, 4}
        assert pattern.default_shifts(saturday) == frozenset()


class TestPartialShifts:
    """Partial-day sub-pattern in shift cycle mode"""

    def test_partial_pattern_entry_by_cycle_position(self):
        pattern = engine(
            mode=MODE_SHIFT_CYCLE,
            shift_cycle_pattern=[True, True, False],
            partial_shift_cycle_pattern=[[2, 4], [3], []],
            number_of_shift_slots=3,
            partial_day_enabled=True,
        )

        assert pattern.default_shifts(ANCHOR) == {2, 4}
        assert pattern.default_shifts(ANCHOR + timedelta(days=1)) == {3}
        assert pattern.default_shifts(ANCHOR + timedelta(days=2)) == frozenset()
        assert pattern.default_shifts(ANCHOR - timedelta(days=2)) == {3}

    def test_length_mismatch_uses_full_set(self, saturday, tuesday):
        """A partial pattern that does not fit the cycle falls back to Mon-Fri"""
        pattern = engine(
            mode=MODE_SHIFT_CYCLE,
            shift_cycle_pattern=[True, True, False],
            partial_shift_cycle_pattern=[[2]],
            partial_day_enabled=True,
        )

        assert pattern.is_work_day(saturday) is False
        assert pattern.default_shifts(saturday) == frozenset()
        assert pattern.is_work_day(tuesday) is True
        assert pattern.default_shifts(tuesday) == {2, 4}

    def test_length_mismatch_ignored_without_partial_days(self, saturday):
        """With partial days off the cycle alone decides"""
        pattern = engine(
            mode=MODE_SHIFT_CYCLE,
            shift_cycle_pattern=[True, True, False],
            partial_shift_cycle_pattern=[[2]],
        )

        # 2025-01-04 is cycle position 0
        assert pattern.is_work_day(saturday) is True
        assert pattern.default_shifts(saturday) == {2, 4}

    def test_default_config_is_not_degenerate(self):
        """Default partial pattern lines up with the default 4-on/3-off cycle"""
        pattern = engine(mode=MODE_SHIFT_CYCLE, partial_day_enabled=True)

        assert pattern.partial_pattern_mismatch() is False
        assert [pattern.default_shifts(ANCHOR + timedelta(days=i)) for i in range(7)] == [
            {2, 4}, {2, 4}, {2, 4}, {2, 4}, frozenset(), frozenset(), frozenset()
        ]

    def test_other_modes_ignore_partial_pattern(self, tuesday, saturday):
        pattern = engine(mode=MODE_STANDARD_WEEKDAY, partial_day_enabled=True)

        assert pattern.default_shifts(tuesday) == {2, 4}
        assert pattern.default_shifts(saturday) == frozenset()

    def test_resize_keeps_entries_and_pads(self):
        resized = resize_partial_pattern(
            [[2, 4], [3, 1]], 4, frozenset({2, 4}), cycle=[True, True, True, False]
        )

        assert resized == [[2, 4], [], [2, 4], []]

    def test_resize_truncates(self):
        assert resize_partial_pattern([[2], [4], [2, 4]], 1, frozenset({2, 4})) == [[2]]


class TestConfigSerialization:

    def test_dict_round_trip(self):
        config = PatternConfig(
            mode=MODE_SHIFT_CYCLE,
            shift_cycle_pattern=[True, False],
            cycle_start_date=date(2024, 6, 1),
            number_of_shift_slots=4,
            partial_shift_cycle_pattern=[[1, 3], []],
            partial_day_enabled=True,
        )

        assert PatternConfig.from_dict(config.to_dict()) == config

    def test_unknown_mode_normalized(self):
        assert PatternConfig.from_dict({"mode": 7}).mode == MODE_STANDARD_WEEKDAY
        assert PatternConfig.from_dict({"mode": MODE_CUSTOM_WEEKLY}).mode == MODE_CUSTOM_WEEKLY
