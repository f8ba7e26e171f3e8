# poolwatch/schemas/chemistry.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import Field

from poolwatch.services.water_chemistry import (
    Dosage,
    LSIResult,
    SafetyFlags,
    TreatmentRecommendation,
)
from .common import AppBaseModel, WeeklyDayName

# 폼 값 그대로 (숫자 / 숫자 문자열 / 빈 문자열)
ReadingValue = Optional[Union[float, str]]


class LSIIn(AppBaseModel):
    ph: ReadingValue = Field(default=None, alias="pH")
    temperature_f: ReadingValue = Field(default=None, alias="temperature")
    alkalinity: ReadingValue = None
    calcium_hardness: ReadingValue = Field(default=None, alias="calciumHardness")
    tds: ReadingValue = None


class LSIOut(AppBaseModel):
    lsi: Optional[float] = None
    lsi_display: Optional[str] = None
    status: str
    comment: str

    @classmethod
    def from_result(cls, r: LSIResult) -> "LSIOut":
        return cls(lsi=r.lsi, lsi_display=r.display, status=r.status.value, comment=r.comment)


class TreatmentIn(AppBaseModel):
    alkalinity: ReadingValue = None
    calcium_hardness: ReadingValue = Field(default=None, alias="calciumHardness")


class TreatmentOut(AppBaseModel):
    unit_id: Optional[int] = None
    name: Optional[str] = None
    alkalinity: Optional[float] = None
    alkalinity_dosage: Optional[str] = Field(
        default=None, description='"2 cups" | "1.5 cups" | "1 cup" | null'
    )
    calcium_hardness: Optional[float] = None
    calcium_dosage: Optional[str] = None
    needs_treatment: bool = False
    instructions: List[str] = Field(default_factory=list)

    @classmethod
    def from_recommendation(cls, t: TreatmentRecommendation) -> "TreatmentOut":
        def _dose(d: Dosage) -> Optional[str]:
            return None if d is Dosage.NONE else d.value

        return cls(
            unit_id=t.unit_id,
            name=t.name,
            alkalinity=t.alkalinity,
            alkalinity_dosage=_dose(t.alkalinity_dosage),
            calcium_hardness=t.calcium_hardness,
            calcium_dosage=_dose(t.calcium_dosage),
            needs_treatment=t.needs_treatment,
            instructions=t.instructions(),
        )


class SafetyIn(AppBaseModel):
    chlorine: ReadingValue = Field(default=None, alias="chlorineLevel")
    ph: ReadingValue = Field(default=None, alias="pH")


class SafetyOut(AppBaseModel):
    chlorine_high: bool
    ph_high: bool
    ph_ideal: bool
    messages: List[str] = Field(default_factory=list)

    @classmethod
    def from_flags(cls, f: SafetyFlags) -> "SafetyOut":
        return cls(
            chlorine_high=f.chlorine_high,
            ph_high=f.ph_high,
            ph_ideal=f.ph_ideal,
            messages=f.messages(),
        )


class WeeklyUnitOut(AppBaseModel):
    unit_id: int
    name: str
    daily_ph: Optional[str] = None
    daily_temperature: Optional[str] = None
    lsi: LSIOut
    treatment: TreatmentOut


class WeeklyEvaluationOut(AppBaseModel):
    day: WeeklyDayName
    treatment_count: int
    units: List[WeeklyUnitOut]
