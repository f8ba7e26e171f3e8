# poolwatch/workers/report_worker.py
# PDF 리포트 전용 RQ 워커: python -m poolwatch.workers.report_worker
from __future__ import annotations

import os
from typing import List

import redis
from loguru import logger
from redis.exceptions import RedisError
from rq import Queue, Worker
from rq.worker import SimpleWorker

from poolwatch.core.config import settings
from poolwatch.core.fs import ensure_dirs
from poolwatch.core.logger import setup_logging
from poolwatch.db.session import init_db


def worker_queues() -> List[str]:
    """WORKER_QUEUES="reports,low" 형태. 비어 있으면 리포트 큐 하나."""
    names = [q.strip() for q in settings.WORKER_QUEUES.split(",") if q.strip()]
    return names or [settings.REPORT_QUEUE]


def main() -> int:
    setup_logging()
    ensure_dirs()
    # 워커는 API 서버 없이 단독 기동될 수 있으므로 테이블 보장
    init_db()

    queues = worker_queues()
    logger.info(
        f"[worker] queues={queues} burst={settings.WORKER_BURST} "
        f"scheduler={settings.WORKER_WITH_SCHEDULER} redis={settings.REDIS_URL}"
    )

    conn = redis.from_url(settings.REDIS_URL)
    try:
        conn.ping()
    except RedisError as e:
        logger.error(f"[worker] Redis unreachable: {e}")
        return 1

    # Windows(nt)는 fork 가 없으므로 SimpleWorker
    worker_cls = SimpleWorker if os.name == "nt" else Worker
    worker = worker_cls([Queue(q, connection=conn) for q in queues], connection=conn)
    worker.work(with_scheduler=settings.WORKER_WITH_SCHEDULER, burst=settings.WORKER_BURST)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
