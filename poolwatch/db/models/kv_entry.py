# poolwatch/db/models/kv_entry.py
from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from .base import Base, TimestampMixin


class KVEntry(TimestampMixin, Base):
    """원격 Key-Value 저장소 한 칸. value는 클라이언트가 보낸 JSON 그대로(검증 없음)."""

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(120), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
