# poolwatch/services/water_chemistry.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional
import math

# ---------------------------------------------------------
# 1. 기준값 (Safety Bands / Dosage Tables)
# ---------------------------------------------------------
CHLORINE_MAX_SAFE = 5.0
PH_MAX_SAFE = 7.8
PH_IDEAL_MIN = 7.4
PH_IDEAL_MAX = 7.6

LSI_BALANCED_MIN = -0.3
LSI_BALANCED_MAX = 0.3

INCOMPLETE_COMMENT = "Enter all values to calculate LSI"


class Dosage(str, Enum):
    NONE = "none"
    TWO_CUPS = "2 cups"
    ONE_AND_HALF_CUPS = "1.5 cups"
    ONE_CUP = "1 cup"


class LSIStatus(str, Enum):
    BALANCED = "Balanced"
    CORROSIVE = "Corrosive"
    SCALE_FORMING = "Scale-forming"
    INCOMPLETE = "Incomplete"


# 알칼리도: 구간 포함(inclusive), 먼저 맞는 구간 우선. 구간 사이(41-49, 61-69)는 처방 없음.
ALKALINITY_BANDS = (
    (30.0, 40.0, Dosage.TWO_CUPS),
    (50.0, 60.0, Dosage.ONE_AND_HALF_CUPS),
    (70.0, 80.0, Dosage.ONE_CUP),
)

# 칼슘 경도: 상한 포함 임계값
CALCIUM_THRESHOLDS = (
    (125.0, Dosage.TWO_CUPS),
    (150.0, Dosage.ONE_AND_HALF_CUPS),
    (175.0, Dosage.ONE_CUP),
)

ALKALINITY_CHEMICAL = "Sodium Bicarbonate"
CALCIUM_CHEMICAL = "Calcium Chloride"

LSI_COMMENTS: Dict[LSIStatus, str] = {
    LSIStatus.BALANCED: "Water is balanced with no negative effects on pool or equipment.",
    LSIStatus.CORROSIVE: (
        "Water is undersaturated and aggressive. May cause etching, pitting, "
        "and staining of pool surfaces and equipment."
    ),
    LSIStatus.SCALE_FORMING: (
        "Water is oversaturated. May lead to scale formation on pool surfaces, "
        "pipes, and filters."
    ),
    LSIStatus.INCOMPLETE: INCOMPLETE_COMMENT,
}

CHLORINE_HIGH_MESSAGE = "Above safe level (>5.0)"
PH_HIGH_MESSAGE = "Above safe level (>7.8)"
PH_IDEAL_MESSAGE = "Ideal range (7.4-7.6)"


# ---------------------------------------------------------
# 2. 데이터 구조 (Derived Results)
# ---------------------------------------------------------

@dataclass(frozen=True)
class TreatmentRecommendation:
    """한 유닛의 주간 처방 결과. 저장하지 않고 항상 재계산합니다."""
    unit_id: Optional[int]
    name: Optional[str]
    alkalinity: Optional[float]
    alkalinity_dosage: Dosage
    calcium_hardness: Optional[float]
    calcium_dosage: Dosage

    @property
    def needs_treatment(self) -> bool:
        return self.alkalinity_dosage is not Dosage.NONE or self.calcium_dosage is not Dosage.NONE

    def instructions(self) -> List[str]:
        out: List[str] = []
        if self.alkalinity_dosage is not Dosage.NONE:
            out.append(f"Add {self.alkalinity_dosage.value} of {ALKALINITY_CHEMICAL}")
        if self.calcium_dosage is not Dosage.NONE:
            out.append(f"Add {self.calcium_dosage.value} of {CALCIUM_CHEMICAL}")
        return out


@dataclass(frozen=True)
class LSIResult:
    lsi: Optional[float]
    status: LSIStatus
    comment: str

    @property
    def display(self) -> Optional[str]:
        """화면/리포트 표시용 (소수 2자리). 분류는 full precision 값으로 수행."""
        if self.lsi is None:
            return None
        return f"{self.lsi:.2f}"


@dataclass(frozen=True)
class SafetyFlags:
    chlorine_high: bool = False
    ph_high: bool = False
    ph_ideal: bool = False

    def messages(self) -> List[str]:
        out: List[str] = []
        if self.chlorine_high:
            out.append(f"Chlorine: {CHLORINE_HIGH_MESSAGE}")
        if self.ph_high:
            out.append(f"pH: {PH_HIGH_MESSAGE}")
        if self.ph_ideal:
            out.append(f"pH: {PH_IDEAL_MESSAGE}")
        return out


# ---------------------------------------------------------
# 3. 입력 파싱 (폼 값 -> float)
# ---------------------------------------------------------

def parse_reading(value: Any) -> Optional[float]:
    """
    폼에서 들어온 값을 float로 변환.
    빈 문자열 / None / 숫자가 아닌 값 / NaN / inf 는 모두 '미입력(None)'으로 취급합니다.
    bool은 체크박스 값이므로 수치로 보지 않습니다.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        x = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(x) or math.isinf(x):
        return None
    return x


def _entered(value: Any) -> Optional[float]:
    # 0은 빈 입력과 동일하게 취급 (폼 기본값)
    x = parse_reading(value)
    if x is None or x == 0:
        return None
    return x


# ---------------------------------------------------------
# 4. Dosage Classifier
# ---------------------------------------------------------

def alkalinity_dosage(value: Any) -> Dosage:
    x = _entered(value)
    if x is None:
        return Dosage.NONE
    for low, high, dosage in ALKALINITY_BANDS:
        if low <= x <= high:
            return dosage
    return Dosage.NONE


def calcium_dosage(value: Any) -> Dosage:
    x = _entered(value)
    if x is None:
        return Dosage.NONE
    for limit, dosage in CALCIUM_THRESHOLDS:
        if x <= limit:
            return dosage
    return Dosage.NONE


def recommend_treatment(
    alkalinity: Any,
    calcium_hardness: Any,
    *,
    unit_id: Optional[int] = None,
    name: Optional[str] = None,
) -> TreatmentRecommendation:
    """알칼리도 / 칼슘 경도를 각각 독립적으로 평가합니다 (한쪽만 있어도 됨)."""
    return TreatmentRecommendation(
        unit_id=unit_id,
        name=name,
        alkalinity=_entered(alkalinity),
        alkalinity_dosage=alkalinity_dosage(alkalinity),
        calcium_hardness=_entered(calcium_hardness),
        calcium_dosage=calcium_dosage(calcium_hardness),
    )


def calculate_treatments(weekly_readings: Iterable[Mapping[str, Any]]) -> List[TreatmentRecommendation]:
    return [
        recommend_treatment(
            r.get("alkalinity"),
            r.get("calciumHardness"),
            unit_id=r.get("id"),
            name=r.get("name"),
        )
        for r in weekly_readings
    ]


def treatment_count(treatments: Iterable[TreatmentRecommendation]) -> int:
    return sum(1 for t in treatments if t.needs_treatment)


# ---------------------------------------------------------
# 5. LSI Evaluator (Langelier Saturation Index)
# ---------------------------------------------------------

def fahrenheit_to_celsius(temp_f: float) -> float:
    return (temp_f - 32.0) * 5.0 / 9.0


def classify_lsi(lsi: float) -> LSIStatus:
    # 경계 포함, epsilon 없음
    if LSI_BALANCED_MIN <= lsi <= LSI_BALANCED_MAX:
        return LSIStatus.BALANCED
    if lsi < LSI_BALANCED_MIN:
        return LSIStatus.CORROSIVE
    return LSIStatus.SCALE_FORMING


def _incomplete() -> LSIResult:
    return LSIResult(lsi=None, status=LSIStatus.INCOMPLETE, comment=INCOMPLETE_COMMENT)


def calc_lsi(ph: float, temperature_f: float, alkalinity: float, calcium: float, tds: float) -> float:
    """
    APHA 방식 LSI 계산 (log10).
    호출 전에 모든 입력이 양수(온도는 0이 아닌 값)임이 보장되어야 합니다.
    """
    T = fahrenheit_to_celsius(temperature_f)

    A = (math.log10(tds) - 1.0) / 10.0
    B = -13.12 * math.log10(T + 273.0) + 34.55
    C = math.log10(calcium) - 0.4
    D = math.log10(alkalinity)

    pHs = (9.3 + A + B) - (C + D)
    return ph - pHs


def evaluate_lsi(ph: Any, temperature_f: Any, alkalinity: Any, calcium: Any, tds: Any) -> LSIResult:
    values = [_entered(v) for v in (ph, temperature_f, alkalinity, calcium, tds)]
    if any(v is None for v in values):
        return _incomplete()

    pH, temp_f, alk, ca, tds_v = values
    # log 정의역 밖(음수)이면 계산하지 않음
    if min(pH, alk, ca, tds_v) <= 0 or fahrenheit_to_celsius(temp_f) + 273.0 <= 0:
        return _incomplete()

    lsi = calc_lsi(pH, temp_f, alk, ca, tds_v)
    status = classify_lsi(lsi)
    return LSIResult(lsi=lsi, status=status, comment=LSI_COMMENTS[status])


def evaluate_weekly_unit(
    weekly: Mapping[str, Any], daily: Optional[Mapping[str, Any]]
) -> LSIResult:
    """주간 측정값 + 같은 유닛의 일일 pH/온도(읽기 전용)로 LSI 평가."""
    daily = daily or {}
    return evaluate_lsi(
        daily.get("pH"),
        daily.get("temperature"),
        weekly.get("alkalinity"),
        weekly.get("calciumHardness"),
        weekly.get("tds"),
    )


# ---------------------------------------------------------
# 6. Safety-Band Highlighter (Daily)
# ---------------------------------------------------------

def safety_flags(chlorine: Any, ph: Any) -> SafetyFlags:
    cl = parse_reading(chlorine)
    p = parse_reading(ph)
    return SafetyFlags(
        chlorine_high=cl is not None and cl > CHLORINE_MAX_SAFE,
        ph_high=p is not None and p > PH_MAX_SAFE,
        ph_ideal=p is not None and PH_IDEAL_MIN <= p <= PH_IDEAL_MAX,
    )


def chlorine_levels() -> List[str]:
    """선택지: 1.0 ~ 10.0 (0.1 step)"""
    return [f"{i / 10:.1f}" for i in range(10, 101)]


def ph_levels() -> List[str]:
    """선택지: 7.0 ~ 7.8 (0.1 step)"""
    return [f"{i / 10:.1f}" for i in range(70, 79)]
