# poolwatch/db/session.py
from __future__ import annotations

from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from poolwatch.core.config import settings
from poolwatch.core.fs import ensure_dirs
from poolwatch.db.models import Base

ensure_dirs()

_url = make_url(settings.DB_URL)
_is_sqlite = _url.get_backend_name() == "sqlite"

# 파일 기반 sqlite 는 상위 폴더가 있어야 함 (:memory: 제외)
if _is_sqlite and _url.database and _url.database != ":memory:":
    Path(_url.database).parent.mkdir(parents=True, exist_ok=True)

# API 스레드 + 리포트 BackgroundTasks 가 같은 sqlite 파일을 공유
engine = create_engine(
    _url,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    pool_pre_ping=not _is_sqlite,
)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


def init_db() -> None:
    """kv_store / report_job 테이블이 없으면 생성."""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
