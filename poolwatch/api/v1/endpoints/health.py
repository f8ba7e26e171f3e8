# poolwatch/api/v1/endpoints/health.py
from __future__ import annotations
from fastapi import APIRouter
from pydantic import BaseModel
import redis
from redis.exceptions import RedisError
from rq import Queue
from poolwatch.core.config import settings

router = APIRouter(prefix="/health")


class HealthOut(BaseModel):
    status: str
    env: str
    redis_ping: bool | None = None
    reports_queue_len: int | None = None


@router.get("", response_model=dict)
def health_simple():
    return {"status": "ok", "env": settings.APP_ENV}


@router.get("/extended", response_model=HealthOut)
def health_extended():
    try:
        r = redis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
        ping = bool(r.ping())
        q = Queue(settings.REPORT_QUEUE, connection=r)
        return HealthOut(status="ok", env=settings.APP_ENV,
                         redis_ping=ping, reports_queue_len=q.count)
    except RedisError:
        return HealthOut(status="degraded", env=settings.APP_ENV,
                         redis_ping=False, reports_queue_len=None)
