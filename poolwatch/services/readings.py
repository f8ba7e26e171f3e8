# poolwatch/services/readings.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence

# =========================================================
# 유닛(방갈로) 구성 & 기본 데이터셋
# =========================================================
WeeklyDay = Literal["sunday", "wednesday"]
WEEKLY_DAYS: tuple[WeeklyDay, ...] = ("sunday", "wednesday")

DAILY_FIELDS = ("chlorineLevel", "pH", "temperature", "flow")
DAILY_FLAGS = ("acidReplace", "chlorineReplace")
WEEKLY_FIELDS = ("alkalinity", "calciumHardness", "tds")


def unit_name(unit_id: int) -> str:
    return f"Bungalow {unit_id:02d}"


def day_unit_range(day: str, unit_count: int = 20) -> range:
    """Sunday: 앞쪽 절반 (1-10), Wednesday: 뒤쪽 절반 (11-20)."""
    half = unit_count // 2
    if day == "sunday":
        return range(1, half + 1)
    if day == "wednesday":
        return range(half + 1, unit_count + 1)
    raise ValueError(f"unknown weekly day: {day!r}")


def default_daily_readings(unit_count: int = 20) -> List[Dict[str, Any]]:
    return [
        {
            "id": i,
            "name": unit_name(i),
            "acidReplace": False,
            "chlorineReplace": False,
            "chlorineLevel": "",
            "pH": "",
            "temperature": "",
            "flow": "",
        }
        for i in range(1, unit_count + 1)
    ]


def default_weekly_readings(day: str, unit_count: int = 20) -> List[Dict[str, Any]]:
    return [
        {
            "id": i,
            "name": unit_name(i),
            "alkalinity": "",
            "calciumHardness": "",
            "tds": "",
        }
        for i in day_unit_range(day, unit_count)
    ]


def find_unit(readings: Sequence[Mapping[str, Any]], unit_id: int) -> Optional[Mapping[str, Any]]:
    for r in readings:
        if r.get("id") == unit_id:
            return r
    return None


def daily_reference(
    daily_readings: Sequence[Mapping[str, Any]], unit_id: int
) -> Optional[Dict[str, Any]]:
    """주간 LSI 계산용: 같은 유닛의 일일 pH / 온도만 추출 (읽기 전용 사본)."""
    daily = find_unit(daily_readings, unit_id)
    if daily is None:
        return None
    return {"pH": daily.get("pH"), "temperature": daily.get("temperature")}


def page_chunks(rows: Sequence[Any], first_page: int = 6) -> List[Sequence[Any]]:
    """인쇄 레이아웃: 하루치 10개 유닛을 6개 / 나머지로 나눔."""
    if len(rows) <= first_page:
        return [rows]
    return [rows[:first_page], rows[first_page:]]
