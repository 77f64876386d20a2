"""
Shared fixtures: in-memory database, settings, holiday store and fixed dates.

Reference week (January 2025):
    Wed 01  Thu 02  Fri 03  Sat 04  Sun 05  Mon 06  Tue 07  Wed 08
"""
import pytest
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from workday.database import Base
from workday import models  # noqa: F401  (register tables)
from workday.models import Settings
from workday.records import DayRecord
from workday.repositories.day_record_repository import DayRecordRepository
from workday.services.day_status_service import DayStatusResolver
from workday.services.holiday_store import HolidayStore
from workday.services.pattern_service import PatternConfig, PatternEngine


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def default_settings(db_session):
    settings = Settings(shift_start_date=date(2025, 1, 1))
    db_session.add(settings)
    db_session.commit()
    db_session.refresh(settings)
    return settings


@pytest.fixture
def holiday_store():
    return HolidayStore()


@pytest.fixture
def anchor():
    """Wednesday 2025-01-01, used as shift cycle start"""
    return date(2025, 1, 1)


@pytest.fixture
def saturday():
    return date(2025, 1, 4)


@pytest.fixture
def sunday():
    return date(2025, 1, 5)


@pytest.fixture
def tuesday():
    return date(2025, 1, 7)


@pytest.fixture
def wednesday():
    return date(2025, 1, 8)


def make_resolver(records=None, store=None, config=None):
    """Resolver over an in-memory dict of DayRecords"""
    records = records or {}
    return DayStatusResolver(
        records.get,
        store if store is not None else HolidayStore(),
        PatternEngine(config or PatternConfig(cycle_start_date=date(2025, 1, 1))),
    )


def make_db_resolver(db_session, store=None, config=None):
    """Resolver reading explicit records from the test database"""
    return DayStatusResolver(
        DayRecordRepository.lookup(db_session),
        store if store is not None else HolidayStore(),
        PatternEngine(config or PatternConfig(cycle_start_date=date(2025, 1, 1))),
    )


def record_map(*records: DayRecord) -> dict:
    return {record.date: record for record in records}
