# poolwatch/api/v1/api.py
from fastapi import APIRouter

from poolwatch.api.v1.endpoints import (
    readings,
    chemistry,
    health,
    reports,
)

api_router = APIRouter()

# ==============================================================================
# 1. Key-Value 저장소 (daily / weekly readings)
# ==============================================================================
api_router.include_router(readings.router, tags=["Readings"])

# ==============================================================================
# 2. Water Chemistry (LSI / 처방 / 안전 범위)
# ==============================================================================
api_router.include_router(chemistry.router, prefix="/chemistry", tags=["Chemistry"])

# ==============================================================================
# 3. 리포트 (PDF)
# ==============================================================================
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])

# ==============================================================================
# 4. System (헬스 체크)
# ==============================================================================
api_router.include_router(health.router, tags=["Health"])
