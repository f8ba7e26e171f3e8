# poolwatch/api/v1/endpoints/chemistry.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from poolwatch.core.config import settings
from poolwatch.db.session import get_db
from poolwatch.schemas.chemistry import (
    LSIIn,
    LSIOut,
    SafetyIn,
    SafetyOut,
    TreatmentIn,
    TreatmentOut,
    WeeklyEvaluationOut,
    WeeklyUnitOut,
)
from poolwatch.schemas.common import WeeklyDayName
from poolwatch.schemas.readings import normalize_daily, normalize_weekly
from poolwatch.services import kv_store
from poolwatch.services.readings import daily_reference, default_weekly_readings
from poolwatch.services.water_chemistry import (
    evaluate_lsi,
    evaluate_weekly_unit,
    recommend_treatment,
    safety_flags,
)

router = APIRouter()


# ==============================================================================
# 1. 단건 평가 (순수 함수 래핑)
# ==============================================================================
@router.post("/lsi", response_model=LSIOut)
def calculate_lsi(payload: LSIIn):
    r = evaluate_lsi(
        payload.ph,
        payload.temperature_f,
        payload.alkalinity,
        payload.calcium_hardness,
        payload.tds,
    )
    return LSIOut.from_result(r)


@router.post("/treatment", response_model=TreatmentOut)
def calculate_treatment(payload: TreatmentIn):
    return TreatmentOut.from_recommendation(
        recommend_treatment(payload.alkalinity, payload.calcium_hardness)
    )


@router.post("/safety", response_model=SafetyOut)
def check_safety(payload: SafetyIn):
    return SafetyOut.from_flags(safety_flags(payload.chlorine, payload.ph))


# ==============================================================================
# 2. 저장된 주간 측정값 전체 평가 (일일 pH / 온도 참조)
# ==============================================================================
@router.get("/weekly/{day}", response_model=WeeklyEvaluationOut)
def evaluate_weekly(day: WeeklyDayName, db: Session = Depends(get_db)):
    weekly = normalize_weekly(kv_store.get_weekly(db)[day]) or default_weekly_readings(
        day, settings.UNIT_COUNT
    )
    daily = normalize_daily(kv_store.get_daily(db))

    units = []
    for w in weekly:
        ref = daily_reference(daily, w["id"])
        t = recommend_treatment(
            w.get("alkalinity"), w.get("calciumHardness"), unit_id=w["id"], name=w.get("name")
        )
        units.append(
            WeeklyUnitOut(
                unit_id=w["id"],
                name=w.get("name") or "",
                daily_ph=(ref or {}).get("pH") or None,
                daily_temperature=(ref or {}).get("temperature") or None,
                lsi=LSIOut.from_result(evaluate_weekly_unit(w, ref)),
                treatment=TreatmentOut.from_recommendation(t),
            )
        )

    return WeeklyEvaluationOut(
        day=day,
        treatment_count=sum(1 for u in units if u.treatment.needs_treatment),
        units=units,
    )
