"""
Day record repository - Data access layer for explicit per-day records.
Converts between WorkDay rows and DayRecord values.
"""
import json
from datetime import date
from typing import Callable, List, Optional
from sqlalchemy.orm import Session

from workday.models import WorkDay
from workday.records import DayRecord, status_from_code, UserPartial


def to_record(row: WorkDay) -> DayRecord:
    """Convert a database row into a DayRecord"""
    shifts = json.loads(row.shifts) if row.shifts else []
    return DayRecord(
        date=row.date,
        status=status_from_code(row.day_status, shifts),
        note=row.note or None,
    )


class DayRecordRepository:
    """Repository for explicit day records, keyed by calendar day"""

    @staticmethod
    def get_row(db: Session, day: date) -> Optional[WorkDay]:
        return db.query(WorkDay).filter(WorkDay.date == day).first()

    @staticmethod
    def get(db: Session, day: date) -> Optional[DayRecord]:
        """Get the explicit record for a day"""
        row = DayRecordRepository.get_row(db, day)
        return to_record(row) if row else None

    @staticmethod
    def list_range(db: Session, start: date, end: date) -> List[DayRecord]:
        """Get records for days in [start, end] ordered by date"""
        rows = db.query(WorkDay).filter(
            WorkDay.date >= start,
            WorkDay.date <= end
        ).order_by(WorkDay.date).all()
        return [to_record(row) for row in rows]

    @staticmethod
    def list_all(db: Session) -> List[DayRecord]:
        return [to_record(row) for row in db.query(WorkDay).order_by(WorkDay.date).all()]

    @staticmethod
    def upsert(db: Session, record: DayRecord) -> Optional[DayRecord]:
        """
        Create or replace the record for record.date.

        Records without information (Unset, no note) are not stored; any
        existing row for that day is removed instead.

        Returns:
            The stored record, or None when nothing is stored
        """
        if not record.carries_information:
            DayRecordRepository.delete(db, record.date)
            return None

        row = DayRecordRepository.get_row(db, record.date)
        if row is None:
            row = WorkDay(date=record.date)
            db.add(row)

        row.day_status = record.status.code
        row.note = record.note or None
        if isinstance(record.status, UserPartial):
            row.shifts = json.dumps(sorted(record.status.shifts))
        else:
            row.shifts = None

        db.commit()
        db.refresh(row)
        return to_record(row)

    @staticmethod
    def delete(db: Session, day: date) -> bool:
        row = DayRecordRepository.get_row(db, day)
        if not row:
            return False
        db.delete(row)
        db.commit()
        return True

    @staticmethod
    def lookup(db: Session) -> Callable[[date], Optional[DayRecord]]:
        """Record lookup function bound to a session, for the resolver"""
        return lambda day: DayRecordRepository.get(db, day)
