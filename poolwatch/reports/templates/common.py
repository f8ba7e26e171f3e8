# poolwatch/reports/templates/common.py

from __future__ import annotations
from datetime import datetime
from typing import Any, Sequence
from pathlib import Path

from reportlab.lib.units import mm
from reportlab.lib.colors import HexColor, black, lightgrey, Color
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from poolwatch.core.config import settings


def ensure_font(name: str = "NotoSans", path: str | None = None) -> str:
    path = path or settings.FONT_PATH
    if name not in pdfmetrics.getRegisteredFontNames() and Path(path).exists():
        pdfmetrics.registerFont(TTFont(name, path))
    return name if name in pdfmetrics.getRegisteredFontNames() else "Helvetica"


def hex_color(code: str, default: Color = black) -> Color:
    try:
        return HexColor(code)
    except ValueError:
        return default


def fmt_num(v: Any, nd: int = 2, none: str = "-") -> str:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return none
    s = f"{x:.{nd}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def fmt_text(v: Any, none: str = "N/A") -> str:
    s = "" if v is None else str(v).strip()
    return s or none


def generated_stamp(now: datetime | None = None) -> str:
    """예: 'Report Generated: Friday, October 16, 2026 09:05 AM'"""
    now = now or datetime.now()
    return f"Report Generated: {now.strftime('%A, %B %d, %Y %I:%M %p')}"


def draw_hline(c, x1: float, x2: float, y: float, w: float = 0.6):
    c.setLineWidth(w)
    c.line(x1, y, x2, y)


def check_page_break(c, y: float, H: float, required_space: float = 30 * mm) -> float:
    if y < required_space:
        c.showPage()
        return H - 25 * mm
    return y


def draw_page_header(c, title: str, x0: float, x1: float, y: float, font: str) -> float:
    """페이지 상단 제목 + 생성 시각 + 구분선. 다음 y 반환."""
    c.setFont(font, 16)
    c.setFillColor(hex_color(settings.BRAND_PRIMARY))
    c.drawString(x0, y, title)
    c.setFillColor(black)
    y -= 14
    c.setFont(font, 9)
    c.drawString(x0, y, generated_stamp())
    y -= 6
    draw_hline(c, x0, x1, y)
    return y - 16


def draw_table(
        c,
        x: float,
        y: float,
        col_headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        col_widths: Sequence[float],
        row_h: float = 16,
        header_fill: Color = lightgrey,
        text_font: str = "Helvetica",
        text_size: int = 9,
        row_fills: Sequence[Color | None] | None = None,
) -> float:
    c.setFont(text_font, text_size)
    c.setFillColor(header_fill)
    c.rect(x, y - row_h, sum(col_widths), row_h, stroke=0, fill=1)
    c.setFillColor(black)

    cx = x
    for i, h in enumerate(col_headers):
        c.drawString(cx + 3, y - row_h + 4, str(h))
        cx += col_widths[i]

    ty = y - row_h
    for ri, r in enumerate(rows):
        ty -= row_h
        fill = row_fills[ri] if row_fills and ri < len(row_fills) else None
        if fill is not None:
            c.setFillColor(fill)
            c.rect(x, ty, sum(col_widths), row_h, stroke=0, fill=1)
            c.setFillColor(black)
        cx = x
        for i, cell in enumerate(r):
            c.drawString(cx + 3, ty + 4, str(cell))
            cx += col_widths[i]

        draw_hline(c, x, x + sum(col_widths), ty, w=0.4)

    return ty
