"""
In-memory holiday override set.
Persistence is handled by HolidayRepository; this module only defines the
lookup contract and the JSON snapshot shape.
"""
import json
import threading
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from workday.constants import HOLIDAY_TYPE_HOLIDAY, HOLIDAY_TYPE_WORK
from workday.records import HolidayRecord, HOLIDAY_TYPES


def _parse_snapshot_date(value) -> date:
    """Snapshot dates are ISO strings or epoch timestamps"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value).date()
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Unsupported holiday date value: {value!r}")


def record_from_dict(data: dict) -> HolidayRecord:
    """Build a HolidayRecord from one snapshot object"""
    is_work_day = bool(data["isWorkDay"])
    holiday_type = data.get("type")
    if holiday_type not in HOLIDAY_TYPES:
        holiday_type = HOLIDAY_TYPE_WORK if is_work_day else HOLIDAY_TYPE_HOLIDAY
    return HolidayRecord(
        date=_parse_snapshot_date(data["date"]),
        name=str(data["name"]),
        is_work_day=is_work_day,
        type=holiday_type,
    )


class HolidayStore:
    """
    Holiday records queryable by calendar day.

    Writers build the new collection first and swap it in under a lock, so
    concurrent readers see either the old or the new complete set. When
    several records share a date the first one wins.
    """

    def __init__(self, records: Iterable[HolidayRecord] = ()):
        self._lock = threading.Lock()
        self._snapshot: Tuple[Tuple[HolidayRecord, ...], Dict[date, HolidayRecord]] = ((), {})
        self.upsert_all(records)

    @staticmethod
    def _build(records: Iterable[HolidayRecord]) -> Tuple[Tuple[HolidayRecord, ...], Dict[date, HolidayRecord]]:
        ordered = tuple(records)
        index: Dict[date, HolidayRecord] = {}
        for record in ordered:
            index.setdefault(record.date, record)
        return ordered, index

    def upsert_all(self, records: Iterable[HolidayRecord]) -> None:
        """Replace the whole set atomically"""
        snapshot = self._build(records)
        with self._lock:
            self._snapshot = snapshot

    def clear(self) -> None:
        with self._lock:
            self._snapshot = ((), {})

    def lookup(self, day: date) -> Optional[HolidayRecord]:
        if isinstance(day, datetime):
            day = day.date()
        with self._lock:
            _, index = self._snapshot
        return index.get(day)

    @property
    def records(self) -> List[HolidayRecord]:
        with self._lock:
            ordered, _ = self._snapshot
        return list(ordered)

    def __len__(self) -> int:
        return len(self.records)

    def to_json(self) -> str:
        """Serialize as a JSON array of flat objects"""
        return json.dumps([record.to_dict() for record in self.records], ensure_ascii=False)

    @classmethod
    def from_json(cls, payload: str) -> "HolidayStore":
        data = json.loads(payload) if payload else []
        return cls(record_from_dict(item) for item in data)
