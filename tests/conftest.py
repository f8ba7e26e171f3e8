# tests/conftest.py
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# poolwatch 설정은 import 시점에 한 번 읽히므로, 앱 import 전에 격리된 경로를 지정
_TMP_ROOT = Path(tempfile.mkdtemp(prefix="poolwatch-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["DB_URL"] = f"sqlite:///{(_TMP_ROOT / 'poolwatch.db').as_posix()}"
os.environ["REPORT_DIR"] = str(_TMP_ROOT / "reports")
os.environ["MIRROR_DIR"] = str(_TMP_ROOT / "mirror")
os.environ["REPORTS_USE_RQ"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from poolwatch.db.models import KVEntry, ReportJob  # noqa: E402
from poolwatch.db.session import SessionLocal, init_db  # noqa: E402
from poolwatch.main import app  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    # Register markers so pytest doesn't warn
    config.addinivalue_line(
        "markers", "reports: tests that generate PDF/report artifacts"
    )


@pytest.fixture(scope="session", autouse=True)
def _schema() -> None:
    init_db()


@pytest.fixture()
def db_session():
    """
    테스트마다 kv_store / report_job 을 비운 세션.
    """
    db = SessionLocal()
    db.query(KVEntry).delete()
    db.query(ReportJob).delete()
    db.commit()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db_session):
    with TestClient(app) as c:
        yield c


# -----------------------------------------------------------------------------
# Client-side fakes
# -----------------------------------------------------------------------------
class FakeRemote:
    """
    RemoteClient 와 같은 인터페이스의 메모리 저장소.
    online=False 이면 load 는 None, save 는 False (네트워크 실패와 동일).
    """

    def __init__(self, online: bool = True) -> None:
        self.online = online
        self.daily: List[Any] = []
        self.weekly: Dict[str, List[Any]] = {"sunday": [], "wednesday": []}
        self.daily_saves: List[List[Any]] = []
        self.weekly_saves: List[Dict[str, Optional[List[Any]]]] = []
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def load_daily_readings(self) -> Optional[List[Any]]:
        return list(self.daily) if self.online else None

    def save_daily_readings(self, readings: List[Any]) -> bool:
        if not self.online:
            return False
        self.daily_saves.append(readings)
        self.daily = readings
        return True

    def load_weekly_readings(self) -> Optional[Dict[str, List[Any]]]:
        if not self.online:
            return None
        return {k: list(v) for k, v in self.weekly.items()}

    def save_weekly_readings(self, sunday=None, wednesday=None) -> bool:
        if not self.online:
            return False
        self.weekly_saves.append({"sunday": sunday, "wednesday": wednesday})
        if sunday:
            self.weekly["sunday"] = sunday
        if wednesday:
            self.weekly["wednesday"] = wednesday
        return True


@pytest.fixture()
def fake_remote() -> FakeRemote:
    return FakeRemote()
