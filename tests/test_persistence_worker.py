# ./tests/test_persistence_worker.py
import threading

import pytest

from poolwatch.client.sync import PersistenceWorker


class Recorder:
    def __init__(self, ok: bool = True) -> None:
        self.ok = ok
        self.calls = []
        self.saved = threading.Event()

    def __call__(self, payload) -> bool:
        self.calls.append(payload)
        self.saved.set()
        return self.ok


def test_submit_coalesces_to_last_payload():
    rec = Recorder()
    w = PersistenceWorker({"daily": rec}, debounce_s=60)

    for i in range(5):
        w.submit("daily", {"rev": i})
    assert w.pending == ["daily"]

    results = w.flush()
    assert rec.calls == [{"rev": 4}]
    assert [r.ok for r in results] == [True]
    assert w.pending == []


def test_datasets_are_independent():
    daily, weekly = Recorder(), Recorder(ok=False)
    seen = []
    w = PersistenceWorker({"daily": daily, "weekly": weekly}, debounce_s=60, on_result=seen.append)

    w.submit("daily", [1])
    w.submit("weekly", {"sunday": []})
    w.flush()

    assert w.last_results["daily"].ok is True
    assert w.last_results["weekly"].ok is False
    assert w.last_results["weekly"].error == "remote save failed"
    assert sorted(r.dataset for r in seen) == ["daily", "weekly"]


def test_saver_exception_becomes_failed_result():
    def boom(payload):
        raise RuntimeError("socket closed")

    w = PersistenceWorker({"daily": boom}, debounce_s=60)
    w.submit("daily", [])
    (result,) = w.flush()

    assert result.ok is False
    assert "RuntimeError" in result.error


def test_unknown_dataset_rejected():
    w = PersistenceWorker({"daily": Recorder()})
    with pytest.raises(KeyError):
        w.submit("monthly", [])


def test_background_thread_saves_after_debounce():
    rec = Recorder()
    w = PersistenceWorker({"daily": rec}, debounce_s=0.05).start()
    try:
        w.submit("daily", ["a"])
        w.submit("daily", ["b"])
        assert rec.saved.wait(timeout=5)
    finally:
        w.stop()

    assert rec.calls == [["b"]]


def test_stop_flushes_pending():
    rec = Recorder()
    w = PersistenceWorker({"daily": rec}, debounce_s=60).start()
    w.submit("daily", ["last"])

    results = w.stop(flush=True)
    assert rec.calls == [["last"]]
    assert results[0].ok is True
