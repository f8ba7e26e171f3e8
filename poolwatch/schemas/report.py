# poolwatch/schemas/report.py
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field

from .common import AppBaseModel, WeeklyDayName

ReportStatusUI = Literal["queued", "started", "succeeded", "failed"]
ReportExecMode = Literal["rq", "inproc", "unknown"]
ReportKindName = Literal["daily", "weekly", "treatment"]


class EnqueueReportIn(AppBaseModel):
    """
    리포트 생성 요청
    - kind: daily | weekly | treatment
    - day: weekly/treatment에서 특정 요일만 (생략 시 양쪽 모두)
    """

    kind: ReportKindName = Field(..., examples=["treatment"])
    day: Optional[WeeklyDayName] = Field(default=None, examples=["sunday"])


class EnqueueReportOut(AppBaseModel):
    job_id: UUID = Field(..., description="Report job UUID")
    mode: ReportExecMode = Field(
        default="unknown",
        description='Execution mode: "rq" | "inproc" | "unknown"',
    )


class ReportStatusOut(AppBaseModel):
    job_id: UUID
    kind: ReportKindName
    day: Optional[WeeklyDayName] = None
    status: ReportStatusUI

    artifact_path: Optional[str] = Field(default=None, description="PDF path on server disk")
    artifact_exists: bool = False
    error_message: Optional[str] = None

    enqueued_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    mode: ReportExecMode = "unknown"
