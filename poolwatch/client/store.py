# poolwatch/client/store.py
from __future__ import annotations

import copy
from typing import Any, Dict, List, Tuple

from loguru import logger

from poolwatch.client.api import RemoteClient
from poolwatch.client.mirror import DAILY_MIRROR_KEY, WEEKLY_MIRROR_KEY, LocalMirror
from poolwatch.client.sync import PersistenceWorker, SyncResult
from poolwatch.schemas.readings import normalize_daily, normalize_weekly
from poolwatch.services.readings import (
    DAILY_FIELDS,
    DAILY_FLAGS,
    WEEKLY_DAYS,
    WEEKLY_FIELDS,
    daily_reference,
    default_daily_readings,
    default_weekly_readings,
)
from poolwatch.services.water_chemistry import (
    LSIResult,
    SafetyFlags,
    TreatmentRecommendation,
    calculate_treatments,
    evaluate_weekly_unit,
    safety_flags,
)

SAVE_OK_MESSAGE = "Data saved to cloud successfully!"
SAVE_OFFLINE_MESSAGE = "Saved locally, but cloud sync failed. Will retry automatically."


class ReadingStore:
    """
    애플리케이션 셸이 소유하는 측정값 상태 저장소.

    - 모든 변경은 이 객체를 통해서만 (update_daily / update_weekly).
    - 변경 직후: 로컬 미러 기록 → PersistenceWorker 에 원격 저장 요청.
    - 평가(LSI / 처방 / 안전 범위)는 현재 값을 읽기 전용으로 넘겨 순수 함수로 재계산.
    """

    def __init__(
        self,
        mirror: LocalMirror,
        remote: RemoteClient,
        *,
        unit_count: int = 20,
        debounce_s: float = 0.5,
        autostart: bool = True,
    ) -> None:
        self.mirror = mirror
        self.remote = remote
        self.unit_count = unit_count

        self._daily: List[Dict[str, Any]] = default_daily_readings(unit_count)
        self._weekly: Dict[str, List[Dict[str, Any]]] = {
            d: default_weekly_readings(d, unit_count) for d in WEEKLY_DAYS
        }

        self.worker = PersistenceWorker(
            {
                "daily": self.remote.save_daily_readings,
                "weekly": lambda p: self.remote.save_weekly_readings(p["sunday"], p["wednesday"]),
            },
            debounce_s=debounce_s,
        )
        if autostart:
            self.worker.start()

    # =========================================================================
    # 1. 로드 (미러 → 원격)
    # =========================================================================
    def load(self) -> bool:
        """시작 시 1회: 미러 값으로 채운 뒤 원격 값이 있으면 덮어씀. 원격 성공 여부 반환."""
        self.load_local()
        return self.refresh_from_remote()

    def load_local(self) -> None:
        daily = self.mirror.read(DAILY_MIRROR_KEY)
        if isinstance(daily, list):
            self._daily = normalize_daily(daily) or self._daily

        weekly = self.mirror.read(WEEKLY_MIRROR_KEY)
        if isinstance(weekly, dict):
            for d in WEEKLY_DAYS:
                self._weekly[d] = normalize_weekly(weekly.get(d) or []) or self._weekly[d]

    def refresh_from_remote(self) -> bool:
        ok = True

        daily = self.remote.load_daily_readings()
        if daily is None:
            ok = False
        elif daily:
            self._daily = normalize_daily(daily) or self._daily
            self.mirror.write(DAILY_MIRROR_KEY, self._daily)

        weekly = self.remote.load_weekly_readings()
        if weekly is None:
            ok = False
        else:
            for d in WEEKLY_DAYS:
                if weekly.get(d):
                    self._weekly[d] = normalize_weekly(weekly[d]) or self._weekly[d]
            self.mirror.write(WEEKLY_MIRROR_KEY, self._weekly_payload())

        if not ok:
            logger.warning("Remote store unreachable on load; using local data")
        return ok

    # =========================================================================
    # 2. 조회 (사본 반환)
    # =========================================================================
    @property
    def daily_readings(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._daily)

    def weekly_readings(self, day: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._weekly_day(day))

    def _weekly_day(self, day: str) -> List[Dict[str, Any]]:
        if day not in self._weekly:
            raise ValueError(f"unknown weekly day: {day!r}")
        return self._weekly[day]

    def _weekly_payload(self) -> Dict[str, List[Dict[str, Any]]]:
        return {d: copy.deepcopy(self._weekly[d]) for d in WEEKLY_DAYS}

    # =========================================================================
    # 3. 변경
    # =========================================================================
    def update_daily(self, unit_id: int, field: str, value: Any) -> None:
        if field in DAILY_FLAGS:
            value = bool(value)
        elif field in DAILY_FIELDS:
            value = "" if value is None else str(value)
        else:
            raise ValueError(f"unknown daily field: {field!r}")

        _find(self._daily, unit_id)[field] = value
        self.mirror.write(DAILY_MIRROR_KEY, self._daily)
        self.worker.submit("daily", copy.deepcopy(self._daily))

    def update_weekly(self, day: str, unit_id: int, field: str, value: Any) -> None:
        if field not in WEEKLY_FIELDS:
            raise ValueError(f"unknown weekly field: {field!r}")

        _find(self._weekly_day(day), unit_id)[field] = "" if value is None else str(value)
        payload = self._weekly_payload()
        self.mirror.write(WEEKLY_MIRROR_KEY, payload)
        self.worker.submit("weekly", payload)

    def save_now(self) -> Tuple[bool, str]:
        """수동 Save: 미러 기록 + 두 데이터셋 모두 즉시 원격 저장."""
        self.mirror.write(DAILY_MIRROR_KEY, self._daily)
        self.mirror.write(WEEKLY_MIRROR_KEY, self._weekly_payload())
        self.worker.submit("daily", copy.deepcopy(self._daily))
        self.worker.submit("weekly", self._weekly_payload())
        results = self.worker.flush()
        ok = all(r.ok for r in results)
        return ok, SAVE_OK_MESSAGE if ok else SAVE_OFFLINE_MESSAGE

    # =========================================================================
    # 4. 동기화 상태
    # =========================================================================
    @property
    def sync_status(self) -> Dict[str, SyncResult]:
        return self.worker.last_results

    @property
    def online(self) -> bool:
        """마지막 저장 결과 기준. 아직 저장 시도가 없으면 True."""
        return all(r.ok for r in self.worker.last_results.values())

    # =========================================================================
    # 5. 평가 (순수 함수 호출)
    # =========================================================================
    def safety(self, unit_id: int) -> SafetyFlags:
        r = _find(self._daily, unit_id)
        return safety_flags(r.get("chlorineLevel"), r.get("pH"))

    def treatments(self, day: str) -> List[TreatmentRecommendation]:
        return calculate_treatments(self._weekly_day(day))

    def weekly_lsi(self, day: str) -> List[Tuple[Dict[str, Any], LSIResult]]:
        out = []
        for w in self._weekly_day(day):
            ref = daily_reference(self._daily, w["id"])
            out.append((dict(w), evaluate_weekly_unit(w, ref)))
        return out

    def close(self) -> None:
        self.worker.stop(flush=True)


def _find(readings: List[Dict[str, Any]], unit_id: int) -> Dict[str, Any]:
    for r in readings:
        if r.get("id") == unit_id:
            return r
    raise KeyError(f"unknown unit: {unit_id}")
