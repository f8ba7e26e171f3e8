# poolwatch/reports/templates/treatment.py
from __future__ import annotations
from typing import Any, Dict, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.colors import HexColor, black, darkgreen

from poolwatch.services.water_chemistry import Dosage, calculate_treatments, treatment_count
from .common import ensure_font, fmt_num, draw_hline, draw_page_header, check_page_break

GUIDE_ALKALINITY = "Alkalinity: 30-40ppm: 2 cups | 50-60ppm: 1.5 cups | 70-80ppm: 1 cup bicarb"
GUIDE_CALCIUM = "Calcium: <=125ppm: 2 cups | <=150ppm: 1.5 cups | <=175ppm: 1 cup calcium chloride"

_AMBER = HexColor("#b45309")


def draw_treatment_day(c, day: str, weekly: Sequence[Dict[str, Any]]):
    W, H = A4
    font = ensure_font()
    x0, x1 = 20 * mm, W - 20 * mm

    treatments = calculate_treatments(weekly)
    ids = [t.unit_id for t in treatments]
    span = f" - Bungalows {ids[0]}-{ids[-1]}" if ids else ""
    y = draw_page_header(c, f"{day.capitalize()} Treatment{span}", x0, x1, H - 25 * mm, font)

    # 처방 가이드라인 (페이지 상단 1회)
    c.setFont(font, 9)
    c.drawString(x0, y, GUIDE_ALKALINITY)
    y -= 12
    c.drawString(x0, y, GUIDE_CALCIUM)
    y -= 8
    draw_hline(c, x0, x1, y, w=0.4)
    y -= 16

    c.setFont(font, 10)
    c.drawString(x0, y, f"Bungalows needing treatment: {treatment_count(treatments)} / {len(treatments)}")
    y -= 20

    for t in treatments:
        y = check_page_break(c, y, H, required_space=40 * mm)
        c.setFont(font, 11)
        c.setFillColor(black)
        c.drawString(x0, y, t.name or f"Unit {t.unit_id}")
        if not t.needs_treatment:
            c.setFillColor(darkgreen)
            c.drawString(x0 + 60 * mm, y, "No Treatment Needed")
            c.setFillColor(black)
            y -= 18
            continue

        y -= 14
        c.setFont(font, 9)
        if t.alkalinity_dosage is not Dosage.NONE:
            c.drawString(x0 + 6 * mm, y, f"Alkalinity: {fmt_num(t.alkalinity)} ppm")
            c.setFillColor(_AMBER)
            c.drawString(x0 + 60 * mm, y, t.instructions()[0])
            c.setFillColor(black)
            y -= 12
        if t.calcium_dosage is not Dosage.NONE:
            c.drawString(x0 + 6 * mm, y, f"Calcium Hardness: {fmt_num(t.calcium_hardness)} ppm")
            c.setFillColor(_AMBER)
            c.drawString(x0 + 60 * mm, y, t.instructions()[-1])
            c.setFillColor(black)
            y -= 12
        y -= 8

    c.showPage()
