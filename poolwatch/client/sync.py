# poolwatch/client/sync.py
# 편집 이벤트와 분리된 원격 저장 워커 (debounce + 데이터셋별 last-write-wins).
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

Saver = Callable[[Any], bool]
ResultListener = Callable[["SyncResult"], None]


@dataclass(frozen=True)
class SyncResult:
    dataset: str
    ok: bool
    error: Optional[str] = None
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class PersistenceWorker:
    """
    submit() 는 즉시 반환. 같은 데이터셋의 대기 중 payload 는 최신 값으로 교체되고,
    마지막 submit 후 debounce_s 가 지나면 백그라운드 스레드가 저장합니다.
    flush() 는 대기 중인 전부를 호출 스레드에서 바로 저장 (수동 Save).
    재시도 / backoff 없음: 실패 결과만 보고하고 다음 편집 때 다시 시도.
    """

    def __init__(
        self,
        savers: Dict[str, Saver],
        debounce_s: float = 0.5,
        on_result: Optional[ResultListener] = None,
    ) -> None:
        self._savers = dict(savers)
        self._debounce_s = max(0.0, float(debounce_s))
        self._on_result = on_result

        self._cond = threading.Condition()
        # 저장 순서 보장: 꺼내기 + 저장을 한 번에 한 쪽만
        self._save_lock = threading.Lock()
        self._pending: Dict[str, Tuple[Any, float]] = {}
        self._last: Dict[str, SyncResult] = {}
        self._stopping = False
        self._thread: Optional[threading.Thread] = None

    # -------------------------------------------------------------------------
    # lifecycle
    # -------------------------------------------------------------------------
    def start(self) -> "PersistenceWorker":
        with self._cond:
            if self._thread is not None:
                return self
            self._stopping = False
            self._thread = threading.Thread(
                target=self._run, name="poolwatch-persistence", daemon=True
            )
            self._thread.start()
        return self

    def stop(self, flush: bool = True) -> List[SyncResult]:
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
            thread, self._thread = self._thread, None
        if thread is not None:
            thread.join()
        return self.flush() if flush else []

    # -------------------------------------------------------------------------
    # API
    # -------------------------------------------------------------------------
    def submit(self, dataset: str, payload: Any) -> None:
        if dataset not in self._savers:
            raise KeyError(f"unknown dataset: {dataset!r}")
        with self._cond:
            self._pending[dataset] = (payload, time.monotonic() + self._debounce_s)
            self._cond.notify_all()

    def flush(self) -> List[SyncResult]:
        with self._save_lock:
            with self._cond:
                items = [(k, v[0]) for k, v in self._pending.items()]
                self._pending.clear()
            return [self._save(k, p) for k, p in items]

    @property
    def pending(self) -> List[str]:
        with self._cond:
            return list(self._pending)

    @property
    def last_results(self) -> Dict[str, SyncResult]:
        with self._cond:
            return dict(self._last)

    # -------------------------------------------------------------------------
    # internals
    # -------------------------------------------------------------------------
    def _save(self, dataset: str, payload: Any) -> SyncResult:
        try:
            ok = bool(self._savers[dataset](payload))
            result = SyncResult(dataset=dataset, ok=ok, error=None if ok else "remote save failed")
        except Exception as e:
            logger.exception(f"[sync] saver for {dataset} raised")
            result = SyncResult(dataset=dataset, ok=False, error=f"{type(e).__name__}: {e}")

        if result.ok:
            logger.debug(f"[sync] {dataset} saved to remote")
        else:
            logger.warning(f"[sync] {dataset} kept locally only ({result.error})")

        with self._cond:
            self._last[dataset] = result
        if self._on_result is not None:
            self._on_result(result)
        return result

    def _next_due(self) -> Optional[float]:
        if not self._pending:
            return None
        return min(due for _, due in self._pending.values())

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._stopping:
                    due = self._next_due()
                    now = time.monotonic()
                    if due is not None and due <= now:
                        break
                    self._cond.wait(timeout=None if due is None else due - now)
                if self._stopping:
                    return

            with self._save_lock:
                with self._cond:
                    now = time.monotonic()
                    ready = [k for k, (_, due) in self._pending.items() if due <= now]
                    items = [(k, self._pending.pop(k)[0]) for k in ready]
                for k, p in items:
                    self._save(k, p)
