# ./tests/test_reading_store.py
import json

import pytest

from poolwatch.client.mirror import DAILY_MIRROR_KEY, WEEKLY_MIRROR_KEY, LocalMirror
from poolwatch.client.store import SAVE_OFFLINE_MESSAGE, SAVE_OK_MESSAGE, ReadingStore
from poolwatch.services.readings import default_daily_readings, default_weekly_readings
from poolwatch.services.water_chemistry import Dosage, LSIStatus


@pytest.fixture()
def mirror(tmp_path):
    return LocalMirror(tmp_path / "mirror")


@pytest.fixture()
def store(mirror, fake_remote):
    # 자동 저장 스레드 없이 flush / save_now 로만 원격 저장
    s = ReadingStore(mirror, fake_remote, debounce_s=60, autostart=False)
    yield s
    s.close()


# =============================================================================
# 1. LocalMirror
# =============================================================================
def test_mirror_read_missing_returns_none(mirror):
    assert mirror.read(DAILY_MIRROR_KEY) is None


def test_mirror_write_then_read(mirror):
    mirror.write(DAILY_MIRROR_KEY, [{"id": 1, "pH": "7.5"}])
    assert mirror.read(DAILY_MIRROR_KEY) == [{"id": 1, "pH": "7.5"}]
    assert not list(mirror.root.glob("*.tmp"))


def test_mirror_malformed_json_is_discarded(mirror):
    mirror.root.mkdir(parents=True)
    mirror.path_for(DAILY_MIRROR_KEY).write_text("{not json", encoding="utf-8")
    assert mirror.read(DAILY_MIRROR_KEY) is None


# =============================================================================
# 2. 로드 순서 (기본값 → 미러 → 원격)
# =============================================================================
def test_defaults_before_load(store):
    assert len(store.daily_readings) == 20
    assert [r["id"] for r in store.weekly_readings("sunday")] == list(range(1, 11))
    assert [r["id"] for r in store.weekly_readings("wednesday")] == list(range(11, 21))


def test_load_prefers_remote_over_mirror(store, mirror, fake_remote):
    local = default_daily_readings()
    local[0]["pH"] = "7.2"
    mirror.write(DAILY_MIRROR_KEY, local)

    remote = default_daily_readings()
    remote[0]["pH"] = "7.6"
    fake_remote.daily = remote

    assert store.load() is True
    assert store.daily_readings[0]["pH"] == "7.6"
    # 원격 값은 미러에도 반영
    assert mirror.read(DAILY_MIRROR_KEY)[0]["pH"] == "7.6"


def test_load_offline_falls_back_to_mirror(store, mirror, fake_remote):
    fake_remote.online = False
    weekly = {
        "sunday": default_weekly_readings("sunday"),
        "wednesday": default_weekly_readings("wednesday"),
    }
    weekly["sunday"][2]["tds"] = "900"
    mirror.write(WEEKLY_MIRROR_KEY, weekly)

    assert store.load() is False
    assert store.weekly_readings("sunday")[2]["tds"] == "900"


def test_load_with_malformed_mirror_keeps_defaults(store, mirror, fake_remote):
    fake_remote.online = False
    mirror.root.mkdir(parents=True)
    mirror.path_for(DAILY_MIRROR_KEY).write_text("[{", encoding="utf-8")

    store.load()
    assert store.daily_readings == default_daily_readings()


def test_empty_remote_does_not_clear_local(store, mirror, fake_remote):
    local = default_daily_readings()
    local[4]["flow"] = "12"
    mirror.write(DAILY_MIRROR_KEY, local)

    assert store.load() is True
    assert store.daily_readings[4]["flow"] == "12"


# =============================================================================
# 3. 편집 → 미러 즉시 기록 / 원격 저장
# =============================================================================
def test_update_daily_writes_mirror_and_queues_save(store, mirror, fake_remote):
    store.update_daily(3, "chlorineLevel", "4.5")
    store.update_daily(3, "acidReplace", 1)

    saved = json.loads(mirror.path_for(DAILY_MIRROR_KEY).read_text(encoding="utf-8"))
    assert saved[2]["chlorineLevel"] == "4.5"
    assert saved[2]["acidReplace"] is True

    assert store.worker.pending == ["daily"]
    store.worker.flush()
    # 연속 편집은 마지막 값 하나로 합쳐져 한 번만 저장
    assert len(fake_remote.daily_saves) == 1
    assert fake_remote.daily_saves[0][2]["acidReplace"] is True


def test_update_weekly_sends_both_days(store, fake_remote):
    store.update_weekly("wednesday", 12, "alkalinity", 55)
    store.worker.flush()

    sent = fake_remote.weekly_saves[-1]
    assert len(sent["sunday"]) == 10
    assert sent["wednesday"][1]["alkalinity"] == "55"


def test_update_rejects_unknown_field_and_unit(store):
    with pytest.raises(ValueError):
        store.update_daily(1, "salinity", "3")
    with pytest.raises(KeyError):
        store.update_daily(99, "pH", "7.4")
    with pytest.raises(ValueError):
        store.update_weekly("monday", 1, "tds", "100")
    # 일요일 목록에는 11번 유닛이 없음
    with pytest.raises(KeyError):
        store.update_weekly("sunday", 11, "tds", "100")


def test_save_now_reports_online_and_offline(store, fake_remote):
    assert store.save_now() == (True, SAVE_OK_MESSAGE)
    assert store.online is True

    fake_remote.online = False
    store.update_daily(1, "pH", "7.4")
    ok, message = store.save_now()
    assert ok is False
    assert message == SAVE_OFFLINE_MESSAGE
    assert store.online is False
    assert store.sync_status["daily"].ok is False
    # 원격 실패와 무관하게 로컬 값은 유지
    assert store.daily_readings[0]["pH"] == "7.4"


# =============================================================================
# 4. 평가 (현재 값 기준 재계산)
# =============================================================================
def test_store_evaluations(store):
    store.update_daily(1, "pH", "7.5")
    store.update_daily(1, "temperature", "80")
    store.update_daily(1, "chlorineLevel", "5.5")
    store.update_weekly("sunday", 1, "alkalinity", "80")
    store.update_weekly("sunday", 1, "calciumHardness", "150")
    store.update_weekly("sunday", 1, "tds", "1000")

    flags = store.safety(1)
    assert flags.chlorine_high is True
    assert flags.ph_ideal is True

    treatments = store.treatments("sunday")
    assert treatments[0].alkalinity_dosage is Dosage.ONE_CUP
    assert treatments[0].calcium_dosage is Dosage.ONE_AND_HALF_CUPS

    lsi = dict((w["id"], r) for w, r in store.weekly_lsi("sunday"))
    assert lsi[1].status is LSIStatus.CORROSIVE
    assert lsi[2].status is LSIStatus.INCOMPLETE

    # 일일 값을 지우면 주간 LSI 도 다시 Incomplete
    store.update_daily(1, "pH", "")
    assert store.weekly_lsi("sunday")[0][1].status is LSIStatus.INCOMPLETE


def test_readings_are_copies(store):
    rows = store.daily_readings
    rows[0]["pH"] = "9.9"
    assert store.daily_readings[0]["pH"] == ""
