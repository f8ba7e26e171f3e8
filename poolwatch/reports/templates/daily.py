# poolwatch/reports/templates/daily.py
from __future__ import annotations
from typing import Any, Dict, List, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.colors import HexColor, black, red

from poolwatch.services.water_chemistry import safety_flags
from .common import ensure_font, fmt_text, draw_table, draw_page_header, check_page_break

_WARN_FILL = HexColor("#fee2e2")
_IDEAL_FILL = HexColor("#dcfce7")


def _check(v: Any) -> str:
    return "X" if v else ""


def _rows(readings: Sequence[Dict[str, Any]]):
    rows: List[List[str]] = []
    fills = []
    notes: List[str] = []
    for r in readings:
        flags = safety_flags(r.get("chlorineLevel"), r.get("pH"))
        rows.append(
            [
                fmt_text(r.get("name"), "-"),
                _check(r.get("acidReplace")),
                _check(r.get("chlorineReplace")),
                fmt_text(r.get("chlorineLevel"), "-") + (" !" if flags.chlorine_high else ""),
                fmt_text(r.get("pH"), "-") + (" !" if flags.ph_high else (" ok" if flags.ph_ideal else "")),
                fmt_text(r.get("temperature"), "-"),
                fmt_text(r.get("flow"), "-"),
            ]
        )
        if flags.chlorine_high or flags.ph_high:
            fills.append(_WARN_FILL)
        elif flags.ph_ideal:
            fills.append(_IDEAL_FILL)
        else:
            fills.append(None)
        for m in flags.messages():
            if "Above" in m:
                notes.append(f"{fmt_text(r.get('name'), '-')}: {m}")
    return rows, fills, notes


def draw_daily_page(c, readings: Sequence[Dict[str, Any]]):
    W, H = A4
    font = ensure_font()
    x0, x1 = 20 * mm, W - 20 * mm
    y = draw_page_header(c, "Daily Readings - All Bungalows", x0, x1, H - 25 * mm, font)

    headers = ["Bungalow", "Acid", "Chlorine", "Cl Level", "pH", "Temp (F)", "Flow (GPM)"]
    total_w = x1 - x0
    col_ws = [total_w * f for f in (0.22, 0.09, 0.11, 0.15, 0.13, 0.14, 0.16)]

    rows, fills, notes = _rows(readings)
    y = draw_table(
        c, x0, y, col_headers=headers, rows=rows, col_widths=col_ws,
        row_h=16, text_font=font, text_size=9, row_fills=fills,
    ) - 16

    c.setFont(font, 8)
    c.drawString(x0, y, "Chlorine safe level <= 5.0 | pH safe level <= 7.8 | pH ideal range 7.4-7.6")
    y -= 16

    if notes:
        c.setFont(font, 11)
        c.setFillColor(red)
        c.drawString(x0, y, f"Safety Warnings ({len(notes)})")
        c.setFillColor(black)
        y -= 14
        c.setFont(font, 9)
        for n in notes:
            y = check_page_break(c, y, H)
            c.drawString(x0, y, n)
            y -= 12

    c.showPage()
