"""
Tests for SettingsService and the settings row <-> PatternConfig mapping.
"""
from datetime import date
import json

from workday.constants import MODE_SHIFT_CYCLE, MODE_STANDARD_WEEKDAY
from workday.models import Settings
from workday.schemas import SettingsUpdate
from workday.services.settings_service import (
    SettingsService, decode_bool_pattern, encode_bool_pattern, decode_partial_pattern,
    pattern_config_from_settings,
)


class TestPatternEncoding:

    def test_bool_pattern_round_trip(self):
        assert decode_bool_pattern("0111110") == [False, True, True, True, True, True, False]
        assert encode_bool_pattern([True, False, True]) == "101"

    def test_empty_bool_pattern(self):
        assert decode_bool_pattern(None) == []

    def test_unreadable_partial_pattern_uses_default(self):
        assert decode_partial_pattern("not json") == [[2, 4], [2, 4], [2, 4], [2, 4], [], [], []]

    def test_config_from_default_row(self, default_settings):
        config = pattern_config_from_settings(default_settings)

        assert config.mode == MODE_STANDARD_WEEKDAY
        assert config.cycle_start_date == date(2025, 1, 1)
        assert config.shift_cycle_pattern == [True, True, True, True, False, False, False]
        assert config.number_of_shift_slots == 2

    def test_unknown_slot_count_normalized(self, default_settings):
        default_settings.number_of_shifts = 6

        assert pattern_config_from_settings(default_settings).number_of_shift_slots == 2


class TestSettingsUpdate:

    def test_update_replaces_configuration(self, db_session, default_settings):
        service = SettingsService(db_session)

        service.update(SettingsUpdate(
            workday_mode=MODE_SHIFT_CYCLE,
            shift_pattern=[True, True, False],
            shift_start_date=date(2025, 3, 1),
            number_of_shifts=3,
        ))

        config = service.get_pattern_config()
        assert config.mode == MODE_SHIFT_CYCLE
        assert config.shift_cycle_pattern == [True, True, False]
        assert config.cycle_start_date == date(2025, 3, 1)
        assert config.number_of_shift_slots == 3

    def test_partial_pattern_follows_cycle_length(self, db_session, default_settings):
        service = SettingsService(db_session)

        settings = service.update(SettingsUpdate(
            workday_mode=MODE_SHIFT_CYCLE,
            shift_pattern=[True, False, True, True, False],
            partial_day_pattern=[[2, 4], [3]],
            number_of_shifts=2,
        ))

        assert json.loads(settings.partial_day_pattern) == [[2, 4], [], [2, 4], [2, 4], []]

    def test_missing_start_date_keeps_stored_one(self, db_session, default_settings):
        service = SettingsService(db_session)

        service.update(SettingsUpdate(workday_mode=MODE_SHIFT_CYCLE))

        assert service.get_pattern_config().cycle_start_date == date(2025, 1, 1)

    def test_update_marks_data_changed(self, db_session, default_settings):
        SettingsService(db_session).update(SettingsUpdate())

        assert db_session.query(Settings).first().last_data_update > 0

    def test_response_repairs_bad_weekly_pattern(self, db_session, default_settings):
        default_settings.weekly_pattern = "01"
        service = SettingsService(db_session)

        response = service.to_response(default_settings)

        assert response.weekly_pattern == [False, True, True, True, True, True, False]
        assert response.holiday_preference == 0
