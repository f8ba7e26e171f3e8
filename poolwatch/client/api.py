# poolwatch/client/api.py
# 원격 Key-Value 서버 클라이언트.
# 실패(네트워크 / 비정상 응답 / success=false)는 로그만 남기고 None / False 로 반환.
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from poolwatch.core.config import settings


class RemoteClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        token = token if token is not None else settings.REMOTE_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=(base_url or settings.REMOTE_BASE_URL).rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout_s if timeout_s is not None else settings.REMOTE_TIMEOUT_S),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RemoteClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # 공통 요청
    # -------------------------------------------------------------------------
    def _call(self, method: str, path: str, what: str, body: Any = None) -> Optional[Dict[str, Any]]:
        try:
            resp = self._client.request(method, path, json=body)
            result = resp.json()
        except httpx.HTTPError as e:
            logger.error(f"Network error {what}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Invalid response {what}: {e}")
            return None

        if not isinstance(result, dict) or not result.get("success"):
            err = result.get("error") if isinstance(result, dict) else result
            logger.error(f"Error {what}: {err} (HTTP {resp.status_code})")
            return None
        return result

    # -------------------------------------------------------------------------
    # Daily readings
    # -------------------------------------------------------------------------
    def load_daily_readings(self) -> Optional[List[Any]]:
        result = self._call("GET", "/daily-readings", "fetching daily readings")
        if result is None:
            return None
        return result.get("data") or []

    def save_daily_readings(self, readings: List[Any]) -> bool:
        return self._call("POST", "/daily-readings", "saving daily readings", {"data": readings}) is not None

    # -------------------------------------------------------------------------
    # Weekly readings
    # -------------------------------------------------------------------------
    def load_weekly_readings(self) -> Optional[Dict[str, List[Any]]]:
        result = self._call("GET", "/weekly-readings", "fetching weekly readings")
        if result is None:
            return None
        data = result.get("data") or {}
        return {
            "sunday": data.get("sunday") or [],
            "wednesday": data.get("wednesday") or [],
        }

    def save_weekly_readings(
        self, sunday: Optional[List[Any]] = None, wednesday: Optional[List[Any]] = None
    ) -> bool:
        body: Dict[str, Any] = {}
        if sunday is not None:
            body["sunday"] = sunday
        if wednesday is not None:
            body["wednesday"] = wednesday
        return self._call("POST", "/weekly-readings", "saving weekly readings", body) is not None
