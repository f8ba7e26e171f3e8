# poolwatch/schemas/readings.py
# =============================================================================
# Readings 스키마
#
# - Wire format(JSON blob)은 원본 폼 상태 그대로: camelCase 키, 수치는 "문자열" 보관.
# - 서버(Key-Value)는 검증하지 않고 통과시키며, 이 모델은 클라이언트 측 정규화에만 사용.
# =============================================================================
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .common import AppBaseModel


def _as_form_text(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, bool):
        return ""
    if isinstance(v, (int, float)):
        return f"{v}"
    return str(v)


class DailyReading(AppBaseModel):
    id: int
    name: str = ""
    acid_replace: bool = Field(default=False, alias="acidReplace")
    chlorine_replace: bool = Field(default=False, alias="chlorineReplace")
    chlorine_level: str = Field(default="", alias="chlorineLevel")
    ph: str = Field(default="", alias="pH")
    temperature: str = ""
    flow: str = ""

    @field_validator("chlorine_level", "ph", "temperature", "flow", mode="before")
    @classmethod
    def _form_text(cls, v: Any) -> str:
        return _as_form_text(v)

    @field_validator("acid_replace", "chlorine_replace", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return bool(v) if v is not None else False


class WeeklyReading(AppBaseModel):
    id: int
    name: str = ""
    alkalinity: str = ""
    calcium_hardness: str = Field(default="", alias="calciumHardness")
    tds: str = ""

    @field_validator("alkalinity", "calcium_hardness", "tds", mode="before")
    @classmethod
    def _form_text(cls, v: Any) -> str:
        return _as_form_text(v)


# -----------------------------------------------------------------------------
# Key-Value API 요청/응답
# -----------------------------------------------------------------------------
class DailyReadingsSaveIn(AppBaseModel):
    """data 는 검증 없이 그대로 저장 (리스트가 아니어도 됨)."""

    data: Any = None


class WeeklyReadingsSaveIn(AppBaseModel):
    """보낸 쪽(sunday/wednesday)만 저장. 빈 리스트도 그대로 저장, 키가 없으면(None) 유지."""

    sunday: Optional[Any] = None
    wednesday: Optional[Any] = None


class ApiEnvelope(AppBaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


class WeeklyData(AppBaseModel):
    sunday: Any = Field(default_factory=list)
    wednesday: Any = Field(default_factory=list)


def normalize_daily(items: Any) -> List[Dict[str, Any]]:
    """원격/미러에서 읽은 목록을 wire format으로 정규화. 형식이 깨진 항목은 버림."""
    out: List[Dict[str, Any]] = []
    if not isinstance(items, list):
        return out
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            out.append(DailyReading.model_validate(item).model_dump(by_alias=True))
        except ValueError:
            continue
    return out


def normalize_weekly(items: Any) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    if not isinstance(items, list):
        return out
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            out.append(WeeklyReading.model_validate(item).model_dump(by_alias=True))
        except ValueError:
            continue
    return out
