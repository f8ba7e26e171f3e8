# poolwatch/reports/templates/weekly.py
from __future__ import annotations
from typing import Any, Dict, List, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.colors import HexColor

from poolwatch.services.readings import daily_reference, page_chunks
from poolwatch.services.water_chemistry import LSIStatus, evaluate_weekly_unit
from .common import ensure_font, fmt_text, draw_table, draw_page_header

_STATUS_FILL = {
    LSIStatus.BALANCED: HexColor("#dcfce7"),
    LSIStatus.CORROSIVE: HexColor("#fee2e2"),
    LSIStatus.SCALE_FORMING: HexColor("#ffedd5"),
}


def draw_weekly_day(
    c,
    day: str,
    weekly: Sequence[Dict[str, Any]],
    daily: Sequence[Dict[str, Any]],
):
    """요일별: 유닛 1-6 / 7-10 을 각각 한 페이지로."""
    W, H = A4
    font = ensure_font()
    x0, x1 = 20 * mm, W - 20 * mm
    total_w = x1 - x0
    col_ws = [total_w * f for f in (0.18, 0.09, 0.11, 0.11, 0.11, 0.10, 0.10, 0.20)]
    headers = ["Bungalow", "pH", "T (F)", "Alkalinity", "Ca Hard.", "TDS", "LSI", "Status"]

    for chunk in page_chunks(list(weekly)):
        ids = [w.get("id") for w in chunk]
        title = f"{day.capitalize()} Readings - Bungalows {ids[0]}-{ids[-1]}" if ids else day.capitalize()
        y = draw_page_header(c, title, x0, x1, H - 25 * mm, font)

        rows: List[List[str]] = []
        fills = []
        comments: List[str] = []
        for w in chunk:
            ref = daily_reference(daily, w.get("id"))
            res = evaluate_weekly_unit(w, ref)
            rows.append(
                [
                    fmt_text(w.get("name"), "-"),
                    fmt_text((ref or {}).get("pH")),
                    fmt_text((ref or {}).get("temperature")),
                    fmt_text(w.get("alkalinity"), "-"),
                    fmt_text(w.get("calciumHardness"), "-"),
                    fmt_text(w.get("tds"), "-"),
                    res.display or "-",
                    res.status.value,
                ]
            )
            fills.append(_STATUS_FILL.get(res.status))
            comments.append(f"{fmt_text(w.get('name'), '-')}: {res.comment}")

        y = draw_table(
            c, x0, y, col_headers=headers, rows=rows, col_widths=col_ws,
            row_h=18, text_font=font, text_size=9, row_fills=fills,
        ) - 18

        c.setFont(font, 8)
        for line in comments:
            c.drawString(x0, y, line[:130])
            y -= 11

        c.showPage()
