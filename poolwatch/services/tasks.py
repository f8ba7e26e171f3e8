# poolwatch/services/tasks.py
from __future__ import annotations

from pathlib import Path
from uuid import UUID
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from rq import get_current_job

from poolwatch.core.config import settings
from poolwatch.core.fs import ensure_dirs, report_output_path
from poolwatch.db.session import SessionLocal
from poolwatch.db.models.report_job import ReportJob, ReportStatus
from poolwatch.reports.templates.cover import draw_cover
from poolwatch.reports.templates.daily import draw_daily_page
from poolwatch.reports.templates.treatment import draw_treatment_day
from poolwatch.reports.templates.weekly import draw_weekly_day
from poolwatch.schemas.readings import normalize_daily, normalize_weekly
from poolwatch.services import kv_store
from poolwatch.services.readings import (
    WEEKLY_DAYS,
    default_daily_readings,
    default_weekly_readings,
)

REPORT_TITLES = {
    "daily": "Daily Readings Report",
    "weekly": "Weekly Pool Readings",
    "treatment": "Water Treatment Recommendations",
}


# =========================================================
# Rendering (DB 비의존: CLI / 워커 공용)
# =========================================================


def render_report(
    pdf_path: Path,
    kind: str,
    daily: Sequence[Dict[str, Any]],
    weekly: Dict[str, Sequence[Dict[str, Any]]],
    day: Optional[str] = None,
) -> Path:
    """
    kind: daily | weekly | treatment
    day: weekly / treatment 에서 특정 요일만 (None이면 sunday, wednesday 순서로 모두)
    """
    if kind not in REPORT_TITLES:
        raise ValueError(f"unknown report kind: {kind!r}")

    days: List[str] = [day] if day else list(WEEKLY_DAYS)
    pdf_path.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(str(pdf_path), pagesize=A4)
    draw_cover(c, title=REPORT_TITLES[kind])

    if kind == "daily":
        draw_daily_page(c, daily)
    elif kind == "weekly":
        for d in days:
            draw_weekly_day(c, d, weekly.get(d) or [], daily)
    else:
        for d in days:
            draw_treatment_day(c, d, weekly.get(d) or [])

    c.save()
    return pdf_path


def load_report_data(db) -> tuple[List[Dict[str, Any]], Dict[str, List[Dict[str, Any]]]]:
    """서버 Key-Value 저장소에서 리포트용 데이터 로드 (비어있으면 기본 유닛 목록)."""
    daily = normalize_daily(kv_store.get_daily(db)) or default_daily_readings(settings.UNIT_COUNT)
    raw_weekly = kv_store.get_weekly(db)
    weekly = {
        d: normalize_weekly(raw_weekly.get(d) or []) or default_weekly_readings(d, settings.UNIT_COUNT)
        for d in WEEKLY_DAYS
    }
    return daily, weekly


def _update_job(job_uuid: UUID, **fields: Any) -> Optional[ReportJob]:
    db = SessionLocal()
    try:
        job = db.get(ReportJob, job_uuid)
        if not job:
            return None
        for k, v in fields.items():
            setattr(job, k, v)
        db.add(job)
        db.commit()
        return job
    finally:
        db.close()


# =========================================================
# Main Task (in-proc BackgroundTasks / RQ 공용)
# =========================================================


def task_generate_report(job_id: str) -> Dict[str, Any]:
    job_uuid = UUID(str(job_id))
    logger.info(f"[JOB={job_uuid}] Starting report generation")
    ensure_dirs()

    db = SessionLocal()
    try:
        job = db.get(ReportJob, job_uuid)
        if not job:
            logger.warning(f"[JOB={job_uuid}] Not found in DB")
            return {"error": "Job not found"}
        kind, day = job.kind.value, job.day
        daily, weekly = load_report_data(db)
    finally:
        db.close()

    _update_job(
        job_uuid,
        status=ReportStatus.started,
        started_at=datetime.now(timezone.utc),
        error_message=None,
    )

    pdf_path = report_output_path(str(job_uuid))
    try:
        render_report(pdf_path, kind, daily, weekly, day=day)
        logger.info(f"[JOB={job_uuid}] PDF saved at {pdf_path}")

        _update_job(
            job_uuid,
            status=ReportStatus.succeeded,
            artifact_path=str(pdf_path.resolve()),
            finished_at=datetime.now(timezone.utc),
        )
        return {"artifact_path": str(pdf_path)}

    except Exception as e:
        logger.exception(f"[JOB={job_uuid}] Failed: {e}")
        err_msg = str(e)[:500]

        _update_job(
            job_uuid,
            status=ReportStatus.failed,
            error_message=err_msg,
            finished_at=datetime.now(timezone.utc),
        )

        # RQ 로 실행 중이면 job meta에도 기록
        rq_job = get_current_job()
        if rq_job is not None:
            rq_job.meta["error_message"] = err_msg
            rq_job.save_meta()

        raise
