# poolwatch/core/errors.py
from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

__all__ = ["register_exception_handlers", "ERROR_CODES"]

PROBLEM_MEDIA_TYPE = "application/problem+json"

# HTTP status → 응답 code (목록에 없으면 HTTP_ERROR)
ERROR_CODES: dict[int, str] = {
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "INVALID_INPUT",
    500: "INTERNAL_SERVER_ERROR",
    503: "STORAGE_UNAVAILABLE",
}


def problem(status_code: int, message: str, detail: Any | None = None) -> JSONResponse:
    """공통 에러 응답: {code, message, detail?}"""
    payload: dict[str, Any] = {
        "code": ERROR_CODES.get(status_code, "HTTP_ERROR"),
        "message": message,
    }
    if detail is not None:
        payload["detail"] = detail
    return JSONResponse(status_code=status_code, content=payload, media_type=PROBLEM_MEDIA_TYPE)


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # loc 예: ("body", "calciumHardness") → "body.calciumHardness"
    return [
        {
            "field": ".".join(str(p) for p in e.get("loc", ())),
            "msg": e.get("msg"),
            "type": e.get("type"),
        }
        for e in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """
    - RequestValidationError → 422 INVALID_INPUT (필드별 detail)
    - HTTPException → 해당 status (404 NOT_FOUND, 409 CONFLICT ...)
    - SQLAlchemyError → 503 (엔드포인트에서 처리하지 못한 저장소 오류)
    - 그 외 → 500

    /daily-readings, /weekly-readings 는 저장소 오류를 직접 {success, error} 로 응답합니다.
    """

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _field_errors(exc)
        logger.info(f"Invalid input: {request.method} {request.url.path} ({len(errors)} errors)")
        return problem(422, "Input validation failed", errors)

    @app.exception_handler(StarletteHTTPException)
    async def on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} ({exc.detail})")
        return problem(exc.status_code, str(exc.detail) if exc.detail else "HTTP error")

    @app.exception_handler(SQLAlchemyError)
    async def on_storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(f"Storage error: {request.method} {request.url.path}: {exc}")
        return problem(503, "Storage is unavailable.")

    @app.exception_handler(Exception)
    async def on_unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error(f"Unhandled exception: {request.method} {request.url.path}")
        return problem(500, "An unexpected error occurred.")
