# config.py

from __future__ import annotations

from typing import Any, Mapping

DEFAULTS: Mapping[str, Any] = {
    "left_color": "#9c27b0",
    "right_color": "#2196f3",
    "top_color": "#ffffff",
    "bottom_color": "#000000",
    "horizontal_levels": 7,
    "vertical_steps": 2,  # rows above and below the centre line
    "method": "lab",
    "vertical_enabled": False,
}

EXPORT_DEFAULTS: Mapping[str, float] = {
    "svg_cell_size": 40,
    "svg_gap": 3,
    "pdf_margin": 40,
    "pdf_min_cell_size": 18,
    "pdf_gap": 2,
}

# landscape A4 in points
PDF_PAGE_SIZE: tuple[float, float] = (841.89, 595.28)

MAX_LEVELS = 512
BLEND_WEIGHT = 0.7  # share of the OKLCH result in blended_oklch_rgb

APP_DEFAULTS: Mapping[str, Any] = {
    "MAX_LEVELS": MAX_LEVELS,
    "PALETTE_DEFAULTS": dict(DEFAULTS),
    "EXPORT_DEFAULTS": dict(EXPORT_DEFAULTS),
    "EXPORT_BASENAME": "huecraft_palette",
}
