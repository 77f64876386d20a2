from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from typing import List, Optional

from workday.constants import DEFAULT_PARTIAL_SHIFT_PATTERN

STATUS_PATTERN = "^(unset|rest|work|partial)$"


# Day record schemas
class DayRecordUpdate(BaseModel):
    status: str = Field(..., pattern=STATUS_PATTERN)
    note: Optional[str] = None  # Stripped and length-checked by the record service
    shifts: Optional[List[int]] = None  # Only used for partial days

    @field_validator("shifts")
    @classmethod
    def shifts_in_range(cls, value):
        if value is not None and any(s < 1 or s > 4 for s in value):
            raise ValueError("shift ids must be between 1 and 4")
        return value


class NoteUpdate(BaseModel):
    note: Optional[str] = None  # Stripped and length-checked by the record service


class ShiftsUpdate(BaseModel):
    shifts: List[int] = Field(default_factory=list)


class DayRecordResponse(BaseModel):
    date: date
    status: str
    note: Optional[str] = None
    shifts: List[int] = []


class DayStatusResponse(BaseModel):
    date: date
    is_work_day: bool
    shifts: List[int] = []
    source: str  # explicit, holiday or pattern
    note: Optional[str] = None
    holiday_name: Optional[str] = None


# Holiday schemas
class HolidayResponse(BaseModel):
    date: date
    name: str
    is_work_day: bool
    type: str

    class Config:
        from_attributes = True


class HolidayPreferenceUpdate(BaseModel):
    preference: int = Field(..., ge=0, le=2)  # 0 = none, 1 = Chinese, 2 = US


class HolidayRefreshResponse(BaseModel):
    success: bool
    record_count: int = 0
    error: Optional[str] = None
    last_holiday_fetch: Optional[datetime] = None


# Settings schemas
class SettingsBase(BaseModel):
    workday_mode: int = Field(default=0, ge=0, le=2)  # 0 = Mon-Fri, 1 = custom week, 2 = shift cycle
    weekly_pattern: List[bool] = Field(
        default=[False, True, True, True, True, True, False], min_length=7, max_length=7
    )
    shift_pattern: List[bool] = Field(
        default=[True, True, True, True, False, False, False], min_length=1, max_length=90
    )
    shift_start_date: Optional[date] = None
    number_of_shifts: int = Field(default=2, ge=2, le=4)
    partial_day_enabled: bool = False
    partial_day_pattern: List[List[int]] = Field(default_factory=lambda: [list(s) for s in DEFAULT_PARTIAL_SHIFT_PATTERN])

    @field_validator("partial_day_pattern")
    @classmethod
    def partial_shifts_in_range(cls, value):
        for shifts in value:
            if any(s < 1 or s > 4 for s in shifts):
                raise ValueError("shift ids must be between 1 and 4")
        return value


class SettingsUpdate(SettingsBase):
    pass


class SettingsResponse(SettingsBase):
    holiday_preference: int = 0
    last_holiday_fetch: Optional[datetime] = None
    last_data_update: float = 0.0
    updated_at: Optional[datetime] = None


class LastUpdateResponse(BaseModel):
    last_data_update: float
