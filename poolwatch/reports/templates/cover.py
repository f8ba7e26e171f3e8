# poolwatch/reports/templates/cover.py

from __future__ import annotations
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from poolwatch.core.config import settings
from .common import ensure_font, hex_color, generated_stamp


def draw_cover(c, title: str, subtitle: str | None = None, brand_primary: str | None = None):
    W, H = A4
    font = ensure_font()
    brand = hex_color(brand_primary or settings.BRAND_PRIMARY)

    # 타이틀 밴드
    c.setFillColor(brand)
    c.rect(0, H - 40*mm, W, 40*mm, fill=1, stroke=0)

    c.setFillColorRGB(1, 1, 1)
    c.setFont(font, 24)
    c.drawString(20*mm, H - 25*mm, title)

    c.setFont(font, 12)
    c.drawString(
        20*mm,
        H - 35*mm,
        subtitle or f"{settings.SITE_TITLE} - {settings.UNIT_COUNT} bungalows "
        f"({settings.POOL_VOLUME_GAL} gallons each)",
    )

    c.setFillColorRGB(0, 0, 0)
    c.setFont(font, 10)
    c.drawString(20*mm, 20*mm, generated_stamp())
    c.drawString(20*mm, 15*mm, "State of Florida Pools and Spas Regulations")

    c.showPage()
