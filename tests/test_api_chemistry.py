# ./tests/test_api_chemistry.py
import pytest

from poolwatch.services.readings import default_daily_readings, default_weekly_readings


def test_lsi_endpoint_worked_example(client):
    payload = {
        "pH": "7.5",
        "temperature": "80",
        "alkalinity": "80",
        "calciumHardness": "150",
        "tds": "1000",
    }
    res = client.post("/api/v1/chemistry/lsi", json=payload)
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "Corrosive"
    assert body["lsi_display"] == "-0.38"
    assert body["lsi"] == pytest.approx(-0.3773, abs=1e-3)


def test_lsi_endpoint_incomplete(client):
    res = client.post(
        "/api/v1/chemistry/lsi",
        json={"pH": 7.5, "temperature": 0, "alkalinity": 80, "calciumHardness": 150, "tds": 1000},
    )
    body = res.json()
    assert body["status"] == "Incomplete"
    assert body["lsi"] is None
    assert body["comment"] == "Enter all values to calculate LSI"


def test_treatment_endpoint(client):
    res = client.post(
        "/api/v1/chemistry/treatment", json={"alkalinity": "75", "calciumHardness": "130"}
    )
    body = res.json()
    assert body["alkalinity_dosage"] == "1 cup"
    assert body["calcium_dosage"] == "1.5 cups"
    assert body["needs_treatment"] is True
    assert body["instructions"] == [
        "Add 1 cup of Sodium Bicarbonate",
        "Add 1.5 cups of Calcium Chloride",
    ]

    none = client.post("/api/v1/chemistry/treatment", json={"alkalinity": "45"}).json()
    assert none["alkalinity_dosage"] is None
    assert none["needs_treatment"] is False


def test_safety_endpoint(client):
    body = client.post(
        "/api/v1/chemistry/safety", json={"chlorineLevel": "6.0", "pH": "7.5"}
    ).json()
    assert body["chlorine_high"] is True
    assert body["ph_high"] is False
    assert body["ph_ideal"] is True
    assert body["messages"] == [
        "Chlorine: Above safe level (>5.0)",
        "pH: Ideal range (7.4-7.6)",
    ]


def test_weekly_evaluation_uses_stored_daily_reference(client):
    daily = default_daily_readings()
    daily[0].update({"pH": "7.5", "temperature": "80"})
    sunday = default_weekly_readings("sunday")
    sunday[0].update({"alkalinity": "80", "calciumHardness": "150", "tds": "1000"})
    sunday[1].update({"alkalinity": "35"})

    client.post("/api/v1/daily-readings", json={"data": daily})
    client.post("/api/v1/weekly-readings", json={"sunday": sunday})

    body = client.get("/api/v1/chemistry/weekly/sunday").json()
    assert body["day"] == "sunday"
    assert len(body["units"]) == 10
    assert body["treatment_count"] == 2

    first = body["units"][0]
    assert first["name"] == "Bungalow 01"
    assert first["daily_ph"] == "7.5"
    assert first["lsi"]["status"] == "Corrosive"
    assert first["treatment"]["alkalinity_dosage"] == "1 cup"

    # 일일 pH 가 없는 유닛은 LSI 계산 불가
    assert body["units"][1]["lsi"]["status"] == "Incomplete"


def test_weekly_evaluation_defaults_when_store_empty(client):
    body = client.get("/api/v1/chemistry/weekly/wednesday").json()
    assert [u["unit_id"] for u in body["units"]] == list(range(11, 21))
    assert body["treatment_count"] == 0


def test_weekly_evaluation_rejects_unknown_day(client):
    res = client.get("/api/v1/chemistry/weekly/monday")
    assert res.status_code == 422
