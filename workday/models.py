from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Date
from datetime import datetime, date
from workday.database import Base


class WorkDay(Base):
    __tablename__ = "day_records"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, unique=True, index=True)
    # 0 = unset (follow holidays/pattern), 1 = user rest, 2 = user work, 3 = user partial
    day_status = Column(Integer, default=0)
    note = Column(String, nullable=True)
    shifts = Column(String, nullable=True)  # JSON array of shift ids, only for partial days
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class Holiday(Base):
    __tablename__ = "holidays"

    id = Column(Integer, primary_key=True, index=True)
    position = Column(Integer, nullable=False)  # Order of appearance in the feed
    date = Column(Date, nullable=False, index=True)
    name = Column(String, nullable=False)
    is_work_day = Column(Boolean, default=False)
    type = Column(String, default="holiday")  # holiday, rest, work


class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)

    # Holiday source: 0 = none, 1 = Chinese holidays, 2 = US federal holidays
    holiday_preference = Column(Integer, default=0)
    last_holiday_fetch = Column(DateTime, nullable=True)  # Last successful feed refresh

    # Default pattern: 0 = Mon-Fri, 1 = custom week, 2 = shift cycle
    workday_mode = Column(Integer, default=0)
    weekly_pattern = Column(String, default="0111110")  # Sun..Sat, "1" = work
    shift_pattern = Column(String, default="1111000")   # Cycle days from shift_start_date
    shift_start_date = Column(Date, default=date.today)
    number_of_shifts = Column(Integer, default=2)       # 2, 3 or 4 shift slots

    # Partial day (shift) tracking
    partial_day_enabled = Column(Boolean, default=False)
    partial_day_pattern = Column(String, default="[[2, 4], [2, 4], [2, 4], [2, 4], [], [], []]")  # JSON 2-D array, one entry per cycle day

    # Change signal for clients (epoch seconds of the last data write)
    last_data_update = Column(Float, default=0.0)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
