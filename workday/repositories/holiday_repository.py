"""
Holiday repository - Persisted snapshot of the holiday override set.
"""
from typing import Iterable, List
from sqlalchemy.orm import Session

from workday.models import Holiday
from workday.records import HolidayRecord


class HolidayRepository:
    """Repository for Holiday data access"""

    @staticmethod
    def load(db: Session) -> List[HolidayRecord]:
        """Get all stored holidays in feed order"""
        rows = db.query(Holiday).order_by(Holiday.position).all()
        return [
            HolidayRecord(
                date=row.date,
                name=row.name,
                is_work_day=bool(row.is_work_day),
                type=row.type,
            )
            for row in rows
        ]

    @staticmethod
    def replace_all(db: Session, records: Iterable[HolidayRecord]) -> int:
        """
        Replace the stored set in a single transaction.

        Returns:
            Number of stored records
        """
        try:
            db.query(Holiday).delete()
            count = 0
            for position, record in enumerate(records):
                db.add(Holiday(
                    position=position,
                    date=record.date,
                    name=record.name,
                    is_work_day=record.is_work_day,
                    type=record.type,
                ))
                count += 1
            db.commit()
            return count
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def clear(db: Session) -> None:
        db.query(Holiday).delete()
        db.commit()
