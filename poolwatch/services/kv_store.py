# poolwatch/services/kv_store.py
from __future__ import annotations

from typing import Any, Dict, Optional

from loguru import logger
from sqlalchemy.orm import Session

from poolwatch.db.models import KVEntry

# 원격 저장소 논리 키 (값은 불투명한 JSON blob)
DAILY_KEY = "pool-daily-readings"
WEEKLY_KEYS = {
    "sunday": "pool-weekly-readings-sunday",
    "wednesday": "pool-weekly-readings-wednesday",
}


def kv_get(db: Session, key: str) -> Optional[Any]:
    row = db.get(KVEntry, key)
    return row.value if row is not None else None


def kv_set(db: Session, key: str, value: Any) -> None:
    """단순 upsert. 검증/병합 없음 (last write wins)."""
    row = db.get(KVEntry, key)
    if row is None:
        row = KVEntry(key=key, value=value)
    else:
        row.value = value
    db.add(row)
    db.commit()
    logger.debug(f"[kv] set {key} ({type(value).__name__})")


def _or_empty(value: Any) -> Any:
    # 값이 없거나 null / false / 0 / "" 이면 빈 목록. 빈 리스트 / 빈 객체는 그대로 반환
    if value is None or (not value and not isinstance(value, (list, dict))):
        return []
    return value


def get_daily(db: Session) -> Any:
    return _or_empty(kv_get(db, DAILY_KEY))


def get_weekly(db: Session) -> Dict[str, Any]:
    return {day: _or_empty(kv_get(db, key)) for day, key in WEEKLY_KEYS.items()}
