# poolwatch/cli.py

from __future__ import annotations
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from poolwatch.client.api import RemoteClient
from poolwatch.client.mirror import LocalMirror
from poolwatch.client.store import ReadingStore
from poolwatch.core.config import settings
from poolwatch.core.logger import setup_logging
from poolwatch.schemas.chemistry import LSIOut, SafetyOut, TreatmentOut
from poolwatch.services.readings import WEEKLY_DAYS
from poolwatch.services.water_chemistry import (
    evaluate_lsi,
    recommend_treatment,
    safety_flags,
)

app = typer.Typer(help="Pool unit chemistry logging, evaluation and reports.")


def _print(model) -> None:
    print(model.model_dump_json(indent=2))


@contextmanager
def _open_store(offline: bool) -> Iterator[ReadingStore]:
    """명령 하나 동안만 쓰는 저장소. 종료 시 대기 중 저장 flush + HTTP 연결 정리."""
    remote = RemoteClient()
    store = ReadingStore(
        LocalMirror(settings.mirror_dir_path),
        remote,
        unit_count=settings.UNIT_COUNT,
        debounce_s=settings.SAVE_DEBOUNCE_S,
        autostart=False,
    )
    try:
        if offline:
            store.load_local()
        else:
            store.load()
        yield store
    finally:
        store.close()
        remote.close()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")):
    setup_logging("DEBUG" if verbose else "WARNING")


# ==============================================================================
# 1. Chemistry
# ==============================================================================
@app.command("lsi")
def lsi(
    ph: Optional[str] = typer.Option(None, "--ph"),
    temp: Optional[str] = typer.Option(None, "--temp", help="Temperature (F)"),
    alk: Optional[str] = typer.Option(None, "--alk", help="Alkalinity (ppm)"),
    ca: Optional[str] = typer.Option(None, "--ca", help="Calcium hardness (ppm)"),
    tds: Optional[str] = typer.Option(None, "--tds", help="TDS (ppm)"),
):
    _print(LSIOut.from_result(evaluate_lsi(ph, temp, alk, ca, tds)))


@app.command("treatment")
def treatment(
    alk: Optional[str] = typer.Option(None, "--alk"),
    ca: Optional[str] = typer.Option(None, "--ca"),
):
    _print(TreatmentOut.from_recommendation(recommend_treatment(alk, ca)))


@app.command("safety")
def safety(
    chlorine: Optional[str] = typer.Option(None, "--chlorine"),
    ph: Optional[str] = typer.Option(None, "--ph"),
):
    _print(SafetyOut.from_flags(safety_flags(chlorine, ph)))


# ==============================================================================
# 2. Sync (원격 <-> 로컬 미러)
# ==============================================================================
@app.command("pull")
def pull():
    """원격 값을 받아 로컬 미러 갱신."""
    with _open_store(offline=True) as store:
        ok = store.refresh_from_remote()
    status = "Cloud Connected" if ok else "Offline Mode (data saved locally)"
    print(json.dumps({"status": status, "mirror": str(settings.mirror_dir_path)}, indent=2))
    raise typer.Exit(code=0 if ok else 1)


@app.command("push")
def push():
    """로컬 미러 값을 원격으로 저장."""
    with _open_store(offline=True) as store:
        ok, message = store.save_now()
    print(message)
    raise typer.Exit(code=0 if ok else 1)


# ==============================================================================
# 3. Report
# ==============================================================================
@app.command("report")
def report(
    kind: str = typer.Argument(..., help="daily | weekly | treatment"),
    day: Optional[str] = typer.Option(None, "--day", help="sunday | wednesday"),
    out: Path = typer.Option(Path("poolwatch_report.pdf"), "--out", "-o"),
    offline: bool = typer.Option(False, "--offline", help="로컬 미러만 사용"),
):
    from poolwatch.services.tasks import render_report

    if day is not None and day not in WEEKLY_DAYS:
        raise typer.BadParameter(f"day must be one of {WEEKLY_DAYS}")

    with _open_store(offline=offline) as store:
        daily = store.daily_readings
        weekly = {d: store.weekly_readings(d) for d in WEEKLY_DAYS}
    path = render_report(out, kind, daily, weekly, day=day)
    print(str(path))


@app.command("serve")
def serve(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn

    uvicorn.run("poolwatch.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
