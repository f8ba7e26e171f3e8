# ./tests/test_water_chemistry.py
import pytest

from poolwatch.services.water_chemistry import (
    Dosage,
    LSIStatus,
    INCOMPLETE_COMMENT,
    LSI_COMMENTS,
    alkalinity_dosage,
    calcium_dosage,
    calculate_treatments,
    chlorine_levels,
    classify_lsi,
    evaluate_lsi,
    evaluate_weekly_unit,
    fahrenheit_to_celsius,
    parse_reading,
    ph_levels,
    recommend_treatment,
    safety_flags,
    treatment_count,
)


# =============================================================================
# 1. 입력 파싱
# =============================================================================
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("7.5", 7.5),
        (" 80 ", 80.0),
        (150, 150.0),
        ("", None),
        ("   ", None),
        (None, None),
        ("abc", None),
        ("nan", None),
        ("inf", None),
        (True, None),
        (10**400, None),
        ("1e400", None),
    ],
)
def test_parse_reading(raw, expected):
    assert parse_reading(raw) == expected


# =============================================================================
# 2. Dosage Classifier
# =============================================================================
@pytest.mark.parametrize(
    "alk, expected",
    [
        (29, Dosage.NONE),
        (30, Dosage.TWO_CUPS),
        (35, Dosage.TWO_CUPS),
        (40, Dosage.TWO_CUPS),
        (41, Dosage.NONE),
        (49, Dosage.NONE),
        (50, Dosage.ONE_AND_HALF_CUPS),
        (55, Dosage.ONE_AND_HALF_CUPS),
        (60, Dosage.ONE_AND_HALF_CUPS),
        (61, Dosage.NONE),
        (69, Dosage.NONE),
        (70, Dosage.ONE_CUP),
        (75, Dosage.ONE_CUP),
        (80, Dosage.ONE_CUP),
        (81, Dosage.NONE),
    ],
)
def test_alkalinity_bands(alk, expected):
    assert alkalinity_dosage(alk) is expected
    # 폼 값(문자열)도 동일하게 평가
    assert alkalinity_dosage(str(alk)) is expected


@pytest.mark.parametrize(
    "ca, expected",
    [
        (100, Dosage.TWO_CUPS),
        (125, Dosage.TWO_CUPS),
        (126, Dosage.ONE_AND_HALF_CUPS),
        (150, Dosage.ONE_AND_HALF_CUPS),
        (151, Dosage.ONE_CUP),
        (175, Dosage.ONE_CUP),
        (176, Dosage.NONE),
    ],
)
def test_calcium_thresholds(ca, expected):
    assert calcium_dosage(ca) is expected


@pytest.mark.parametrize("empty", ["", None, "0", 0, "n/a"])
def test_dosage_absent_values_yield_none(empty):
    assert alkalinity_dosage(empty) is Dosage.NONE
    assert calcium_dosage(empty) is Dosage.NONE


def test_recommendation_evaluates_each_side_independently():
    only_alk = recommend_treatment("35", "")
    assert only_alk.alkalinity_dosage is Dosage.TWO_CUPS
    assert only_alk.calcium_dosage is Dosage.NONE
    assert only_alk.calcium_hardness is None
    assert only_alk.needs_treatment is True
    assert only_alk.instructions() == ["Add 2 cups of Sodium Bicarbonate"]

    only_ca = recommend_treatment(None, 160)
    assert only_ca.calcium_dosage is Dosage.ONE_CUP
    assert only_ca.instructions() == ["Add 1 cup of Calcium Chloride"]

    fine = recommend_treatment(100, 200)
    assert fine.needs_treatment is False
    assert fine.instructions() == []


def test_calculate_treatments_and_count():
    weekly = [
        {"id": 1, "name": "Bungalow 01", "alkalinity": "55", "calciumHardness": "120", "tds": ""},
        {"id": 2, "name": "Bungalow 02", "alkalinity": "45", "calciumHardness": "", "tds": ""},
        {"id": 3, "name": "Bungalow 03", "alkalinity": "", "calciumHardness": "170", "tds": ""},
    ]
    treatments = calculate_treatments(weekly)

    assert [t.unit_id for t in treatments] == [1, 2, 3]
    assert treatments[0].alkalinity_dosage is Dosage.ONE_AND_HALF_CUPS
    assert treatments[0].calcium_dosage is Dosage.TWO_CUPS
    # 41-49 구간 사이 값은 처방 없음
    assert treatments[1].needs_treatment is False
    assert treatments[2].name == "Bungalow 03"
    assert treatment_count(treatments) == 2


# =============================================================================
# 3. LSI Evaluator
# =============================================================================
def test_fahrenheit_to_celsius():
    assert fahrenheit_to_celsius(32) == pytest.approx(0.0)
    assert fahrenheit_to_celsius(80) == pytest.approx(26.6667, abs=1e-4)


def test_lsi_worked_example_is_corrosive():
    r = evaluate_lsi("7.5", "80", "80", "150", "1000")

    assert r.lsi == pytest.approx(-0.3773, abs=1e-3)
    assert r.status is LSIStatus.CORROSIVE
    assert r.display == "-0.38"
    assert r.comment == LSI_COMMENTS[LSIStatus.CORROSIVE]


def test_lsi_balanced_example():
    r = evaluate_lsi(7.5, 80, 100, 200, 1000)
    assert r.lsi == pytest.approx(-0.1555, abs=1e-3)
    assert r.status is LSIStatus.BALANCED


@pytest.mark.parametrize(
    "ph, temp, alk, ca, tds",
    [
        (7.5, 0, 80, 150, 1000),
        ("", 80, 80, 150, 1000),
        (7.5, 80, None, 150, 1000),
        (7.5, 80, 80, "abc", 1000),
        (7.5, 80, 80, 150, "0"),
        (-7.5, 80, 80, 150, 1000),
        (7.5, -600, 80, 150, 1000),
    ],
)
def test_lsi_incomplete(ph, temp, alk, ca, tds):
    r = evaluate_lsi(ph, temp, alk, ca, tds)
    assert r.status is LSIStatus.INCOMPLETE
    assert r.lsi is None
    assert r.display is None
    assert r.comment == INCOMPLETE_COMMENT


@pytest.mark.parametrize(
    "lsi, expected",
    [
        (-0.30, LSIStatus.BALANCED),
        (0.0, LSIStatus.BALANCED),
        (0.30, LSIStatus.BALANCED),
        (-0.31, LSIStatus.CORROSIVE),
        (0.31, LSIStatus.SCALE_FORMING),
        (-2.0, LSIStatus.CORROSIVE),
        (1.5, LSIStatus.SCALE_FORMING),
    ],
)
def test_classify_lsi_boundaries(lsi, expected):
    assert classify_lsi(lsi) is expected


def test_weekly_unit_borrows_daily_ph_and_temperature():
    weekly = {"id": 1, "alkalinity": "80", "calciumHardness": "150", "tds": "1000"}

    r = evaluate_weekly_unit(weekly, {"pH": "7.5", "temperature": "80"})
    assert r.status is LSIStatus.CORROSIVE

    assert evaluate_weekly_unit(weekly, None).status is LSIStatus.INCOMPLETE
    assert evaluate_weekly_unit(weekly, {"pH": "", "temperature": "80"}).status is LSIStatus.INCOMPLETE


# =============================================================================
# 4. Safety-Band Highlighter
# =============================================================================
def test_chlorine_boundary_is_exclusive():
    assert safety_flags("5.0", None).chlorine_high is False
    assert safety_flags("5.1", None).chlorine_high is True
    assert safety_flags("5.1", None).messages() == ["Chlorine: Above safe level (>5.0)"]


@pytest.mark.parametrize(
    "ph, high, ideal",
    [
        ("7.3", False, False),
        ("7.4", False, True),
        ("7.5", False, True),
        ("7.6", False, True),
        ("7.61", False, False),
        ("7.8", False, False),
        ("7.9", True, False),
    ],
)
def test_ph_bands(ph, high, ideal):
    f = safety_flags(None, ph)
    assert f.ph_high is high
    assert f.ph_ideal is ideal


def test_absent_values_raise_no_flags():
    f = safety_flags("", None)
    assert (f.chlorine_high, f.ph_high, f.ph_ideal) == (False, False, False)
    assert f.messages() == []


def test_selection_levels():
    cl = chlorine_levels()
    assert cl[0] == "1.0" and cl[-1] == "10.0" and len(cl) == 91
    assert ph_levels() == ["7.0", "7.1", "7.2", "7.3", "7.4", "7.5", "7.6", "7.7", "7.8"]


def test_huge_integers_count_as_absent():
    huge = 10**400
    assert alkalinity_dosage(huge) is Dosage.NONE
    assert calcium_dosage(huge) is Dosage.NONE
    assert evaluate_lsi(7.5, 80, huge, 150, 1000).status is LSIStatus.INCOMPLETE
    assert safety_flags(huge, huge).messages() == []
