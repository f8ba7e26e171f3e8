# poolwatch/api/v1/endpoints/reports.py
from __future__ import annotations

import uuid
from pathlib import Path
from typing import Optional

import redis
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import FileResponse
from loguru import logger
from redis.exceptions import RedisError
from rq import Queue, Retry, Worker
from sqlalchemy.orm import Session

from poolwatch.core.config import settings
from poolwatch.core.fs import find_report_pdf
from poolwatch.db.models import ReportJob, ReportKind, ReportStatus
from poolwatch.db.session import get_db
from poolwatch.schemas.report import EnqueueReportIn, EnqueueReportOut, ReportStatusOut
from poolwatch.services.tasks import task_generate_report

router = APIRouter()


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _exec_mode(job_row: ReportJob) -> str:
    q = str(job_row.queue or "").strip().lower()
    if q.startswith("rq:"):
        return "rq"
    if q == "inproc":
        return "inproc"
    return "unknown"


def _resolve_pdf_path(job_row: ReportJob) -> Optional[Path]:
    """우선순위: DB artifact_path → REPORT_DIR 안의 report_<job_id>.pdf"""
    if job_row.artifact_path:
        p = Path(job_row.artifact_path)
        if p.is_file():
            return p.resolve()
    return find_report_pdf(str(job_row.id))


def _rq_has_worker_for_queue(r, queue_name: str) -> bool:
    for w in Worker.all(connection=r):
        if queue_name in w.queue_names():
            return True
    return False


def _run_report_inproc_background(job_id_str: str) -> None:
    # task_generate_report 가 job 상태를 failed 로 확정하므로 여기서는 기록만
    try:
        task_generate_report(job_id_str)
    except Exception:
        logger.exception(f"[JOB={job_id_str}] In-process report generation crashed.")


# -----------------------------------------------------------------------------
# Endpoint: POST /reports/enqueue
# -----------------------------------------------------------------------------
@router.post("/enqueue", response_model=EnqueueReportOut)
def enqueue_report(
    payload: EnqueueReportIn,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    기본: in-process background.
    REPORTS_USE_RQ=true 이고 'reports' 큐를 듣는 RQ 워커가 있으면 RQ 로 보냄.
    """
    day = payload.day if payload.kind != "daily" else None
    job_row = ReportJob(
        kind=ReportKind(payload.kind),
        day=day,
        status=ReportStatus.queued,
        queue="inproc",
    )
    db.add(job_row)
    db.commit()
    db.refresh(job_row)

    if settings.REPORTS_USE_RQ:
        try:
            r = redis.from_url(settings.REDIS_URL)
            if not r.ping():
                raise RuntimeError("Redis ping failed")
            if not _rq_has_worker_for_queue(r, settings.REPORT_QUEUE):
                raise RuntimeError(f"No RQ worker listening to '{settings.REPORT_QUEUE}' queue")

            job_row.queue = f"rq:{settings.REPORT_QUEUE}"
            db.commit()

            Queue(settings.REPORT_QUEUE, connection=r).enqueue(
                task_generate_report,
                str(job_row.id),
                job_id=str(job_row.id),
                retry=Retry(max=3, interval=10),
                ttl=600,
                result_ttl=86400,
            )
            return EnqueueReportOut(job_id=job_row.id, mode="rq")

        except (RedisError, RuntimeError) as e:
            logger.warning(
                f"Redis/RQ not usable ({e}). Falling back to in-process background execution."
            )

    background_tasks.add_task(_run_report_inproc_background, str(job_row.id))
    return EnqueueReportOut(job_id=job_row.id, mode="inproc")


# -----------------------------------------------------------------------------
# Endpoint: GET /reports/{job_id}
# -----------------------------------------------------------------------------
@router.get("/{job_id}", response_model=ReportStatusOut)
def get_report_status(job_id: uuid.UUID, db: Session = Depends(get_db)):
    job_row = db.get(ReportJob, job_id)
    if not job_row:
        raise HTTPException(status_code=404, detail="Report job not found")

    resolved = _resolve_pdf_path(job_row)

    return ReportStatusOut(
        job_id=job_row.id,
        kind=job_row.kind.value,
        day=job_row.day,
        status=job_row.status.value,
        artifact_path=str(resolved) if resolved else job_row.artifact_path,
        artifact_exists=resolved is not None,
        error_message=job_row.error_message,
        enqueued_at=job_row.enqueued_at,
        started_at=job_row.started_at,
        finished_at=job_row.finished_at,
        mode=_exec_mode(job_row),
    )


# -----------------------------------------------------------------------------
# Endpoint: GET /reports/{job_id}/download
# -----------------------------------------------------------------------------
@router.get("/{job_id}/download")
def download_report(job_id: uuid.UUID, db: Session = Depends(get_db)):
    job_row = db.get(ReportJob, job_id)
    if not job_row:
        raise HTTPException(status_code=404, detail="Report job not found")

    if job_row.status == ReportStatus.failed:
        raise HTTPException(
            status_code=409, detail=f"Report generation failed: {job_row.error_message}"
        )

    if job_row.status != ReportStatus.succeeded:
        raise HTTPException(
            status_code=409,
            detail=f"Report is not ready. Status: {job_row.status.value}",
        )

    resolved = _resolve_pdf_path(job_row)
    if resolved is None:
        raise HTTPException(
            status_code=404,
            detail="Report generation finished but PDF file was not found on disk.",
        )

    return FileResponse(
        path=str(resolved),
        media_type="application/pdf",
        filename=f"PoolWatch_{job_row.kind.value}_{job_id}.pdf",
    )
