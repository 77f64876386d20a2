"""
Settings repository - the single settings row.
Holds the pattern configuration, the holiday preference and the change
timestamp clients poll.
"""
import time
from datetime import date

from sqlalchemy.orm import Session

from workday.models import Settings


class SettingsRepository:
    """Repository for the settings singleton"""

    @staticmethod
    def get(db: Session) -> Settings:
        """
        Get the settings row, creating it with defaults on first use.

        A new row anchors the shift cycle at today's date.
        """
        settings = db.query(Settings).order_by(Settings.id).first()
        if settings is None:
            settings = Settings(shift_start_date=date.today())
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings: Settings) -> Settings:
        """Commit changes made to the settings row"""
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def mark_data_changed(db: Session) -> float:
        """
        Record that user-visible data changed so clients re-render.

        Returns:
            The new change timestamp (epoch seconds)
        """
        settings = SettingsRepository.get(db)
        settings.last_data_update = time.time()
        db.commit()
        return settings.last_data_update
