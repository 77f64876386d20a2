"""
Settings service - pattern configuration persistence.
Maps the flat settings row to a PatternConfig and back.
"""
import json
import logging
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from workday.constants import (
    DEFAULT_PARTIAL_SHIFT_PATTERN, DEFAULT_WEEKLY_PATTERN, SHIFT_SLOTS, DEFAULT_SHIFT_SLOTS,
)
from workday.models import Settings
from workday.repositories.settings_repository import SettingsRepository
from workday.schemas import SettingsUpdate, SettingsResponse
from workday.services.pattern_service import PatternConfig, resize_partial_pattern, valid_shifts

logger = logging.getLogger("workday.settings")


def decode_bool_pattern(value: str) -> List[bool]:
    """'0111110' -> [False, True, True, True, True, True, False]"""
    return [char == "1" for char in (value or "")]


def encode_bool_pattern(pattern: List[bool]) -> str:
    return "".join("1" if flag else "0" for flag in pattern)


def decode_partial_pattern(value: str) -> List[List[int]]:
    try:
        data = json.loads(value) if value else []
        return [[int(s) for s in shifts] for shifts in data]
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.warning(f"Unreadable partial day pattern {value!r}, using default")
        return [list(shifts) for shifts in DEFAULT_PARTIAL_SHIFT_PATTERN]


def pattern_config_from_settings(settings: Settings) -> PatternConfig:
    """Build a PatternConfig from the stored settings row"""
    slots = settings.number_of_shifts
    if slots not in SHIFT_SLOTS:
        slots = DEFAULT_SHIFT_SLOTS
    return PatternConfig(
        mode=settings.workday_mode or 0,
        weekly_pattern=decode_bool_pattern(settings.weekly_pattern),
        shift_cycle_pattern=decode_bool_pattern(settings.shift_pattern),
        cycle_start_date=settings.shift_start_date or date.today(),
        number_of_shift_slots=slots,
        partial_shift_cycle_pattern=decode_partial_pattern(settings.partial_day_pattern),
        partial_day_enabled=bool(settings.partial_day_enabled),
    )


class SettingsService:
    """Service for reading and replacing the pattern configuration"""

    def __init__(self, db: Session):
        self.db = db

    def get(self) -> Settings:
        return SettingsRepository.get(self.db)

    def get_pattern_config(self) -> PatternConfig:
        return pattern_config_from_settings(self.get())

    def update(self, update: SettingsUpdate) -> Settings:
        """
        Replace the pattern configuration.

        The partial-shift pattern is resized to the shift cycle length and
        filtered to the shift ids valid for the slot count, so both cycles
        always have the same length.
        """
        settings = self.get()
        full = valid_shifts(update.number_of_shifts)

        settings.workday_mode = update.workday_mode
        settings.weekly_pattern = encode_bool_pattern(update.weekly_pattern)
        settings.shift_pattern = encode_bool_pattern(update.shift_pattern)
        settings.shift_start_date = update.shift_start_date or settings.shift_start_date or date.today()
        settings.number_of_shifts = update.number_of_shifts
        settings.partial_day_enabled = update.partial_day_enabled
        settings.partial_day_pattern = json.dumps(
            resize_partial_pattern(
                update.partial_day_pattern,
                len(update.shift_pattern),
                full,
                update.shift_pattern,
            )
        )

        SettingsRepository.update(self.db, settings)
        SettingsRepository.mark_data_changed(self.db)
        logger.info(
            f"Pattern settings updated: mode={settings.workday_mode}, "
            f"cycle={settings.shift_pattern}, shifts={settings.number_of_shifts}"
        )
        return settings

    def to_response(self, settings: Settings) -> SettingsResponse:
        config = pattern_config_from_settings(settings)
        return SettingsResponse(
            workday_mode=config.mode,
            weekly_pattern=(
                config.weekly_pattern if len(config.weekly_pattern) == 7 else list(DEFAULT_WEEKLY_PATTERN)
            ),
            shift_pattern=config.shift_cycle_pattern or [True],
            shift_start_date=config.cycle_start_date,
            number_of_shifts=config.number_of_shift_slots,
            partial_day_enabled=config.partial_day_enabled,
            partial_day_pattern=config.partial_shift_cycle_pattern,
            holiday_preference=settings.holiday_preference or 0,
            last_holiday_fetch=settings.last_holiday_fetch,
            last_data_update=settings.last_data_update or 0.0,
            updated_at=settings.updated_at,
        )
