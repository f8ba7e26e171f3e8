# poolwatch/core/fs.py

from pathlib import Path

from poolwatch.core.config import settings


def ensure_dirs() -> None:
    """리포트 출력 / 로컬 미러 디렉터리 생성."""
    for d in (Path(settings.REPORT_DIR_ABS), settings.mirror_dir_path):
        d.mkdir(parents=True, exist_ok=True)


def report_output_path(job_id: str) -> Path:
    return Path(settings.REPORT_DIR_ABS) / f"report_{job_id}.pdf"


def find_report_pdf(job_id: str) -> Path | None:
    """report_<id>.pdf 우선, 수동으로 옮겨진 <id>.pdf 도 인정."""
    for c in (report_output_path(job_id), Path(settings.REPORT_DIR_ABS) / f"{job_id}.pdf"):
        if c.is_file():
            return c
    return None
