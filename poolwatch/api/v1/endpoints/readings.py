# poolwatch/api/v1/endpoints/readings.py
# Key-Value pass-through: 검증/비즈니스 로직 없이 JSON blob을 그대로 저장/조회.
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poolwatch.db.session import get_db
from poolwatch.schemas.readings import (
    ApiEnvelope,
    DailyReadingsSaveIn,
    WeeklyData,
    WeeklyReadingsSaveIn,
)
from poolwatch.services import kv_store

router = APIRouter()


# blob 안의 null 값까지 그대로 돌려주기 위해 response_model 필터링 없이 dict 반환
def _ok(**extra: Any) -> Dict[str, Any]:
    return {"success": True, **extra}


def _failure(e: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ApiEnvelope(success=False, error=f"{type(e).__name__}: {e}").model_dump(
            exclude_none=True
        ),
    )


@router.get("/daily-readings", response_model=None)
def get_daily_readings(db: Session = Depends(get_db)):
    try:
        return _ok(data=kv_store.get_daily(db))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching daily readings: {e}")
        return _failure(e)


@router.post("/daily-readings", response_model=None)
def save_daily_readings(payload: DailyReadingsSaveIn, db: Session = Depends(get_db)):
    try:
        kv_store.kv_set(db, kv_store.DAILY_KEY, payload.data)
        return _ok()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving daily readings: {e}")
        return _failure(e)


@router.get("/weekly-readings", response_model=None)
def get_weekly_readings(db: Session = Depends(get_db)):
    try:
        data = WeeklyData(**kv_store.get_weekly(db))
        return _ok(data=data.model_dump())
    except SQLAlchemyError as e:
        logger.error(f"Error fetching weekly readings: {e}")
        return _failure(e)


@router.post("/weekly-readings", response_model=None)
def save_weekly_readings(payload: WeeklyReadingsSaveIn, db: Session = Depends(get_db)):
    try:
        # 보낸 쪽만 덮어씀 (빈 리스트도 저장, 키가 없으면 기존 값 유지)
        if payload.sunday is not None:
            kv_store.kv_set(db, kv_store.WEEKLY_KEYS["sunday"], payload.sunday)
        if payload.wednesday is not None:
            kv_store.kv_set(db, kv_store.WEEKLY_KEYS["wednesday"], payload.wednesday)
        return _ok()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving weekly readings: {e}")
        return _failure(e)
