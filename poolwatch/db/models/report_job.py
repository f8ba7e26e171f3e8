# poolwatch/db/models/report_job.py
from __future__ import annotations
from enum import Enum
from typing import Optional
from datetime import datetime

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, UUIDMixin, TimestampMixin


class ReportStatus(str, Enum):
    queued = "queued"
    started = "started"
    succeeded = "succeeded"
    failed = "failed"


class ReportKind(str, Enum):
    daily = "daily"
    weekly = "weekly"
    treatment = "treatment"


class ReportJob(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "report_job"

    kind: Mapped[ReportKind] = mapped_column(default=ReportKind.daily)
    # weekly / treatment 리포트에서 특정 요일만 (None이면 sunday + wednesday 모두)
    day: Mapped[Optional[str]] = mapped_column(String(16))
    status: Mapped[ReportStatus] = mapped_column(default=ReportStatus.queued)
    queue: Mapped[str] = mapped_column(String(40), default="inproc")
    error_message: Mapped[Optional[str]] = mapped_column(Text())
    artifact_path: Mapped[Optional[str]] = mapped_column(String(500))
    enqueued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    finished_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
