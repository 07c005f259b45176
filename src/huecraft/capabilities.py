# capabilities.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from .colors import Color, register_hct

log = logging.getLogger(__name__)

SAMPLE_A = "#9c27b0"
SAMPLE_B = "#2196f3"


@dataclass(frozen=True)
class Capabilities:
    """Which colour-space backends can be used in this process."""

    colorspace: bool = True  # hsl / lab / lch / oklab / oklch conversions
    hct: bool = True  # HCT space registered and convertible
    bezier: bool = True  # curve (bspline) interpolation

    @classmethod
    def none(cls) -> "Capabilities":
        return cls(colorspace=False, hct=False, bezier=False)

    def missing(self, required: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(name for name in required if not getattr(self, name))


def _has_spaces() -> bool:
    try:
        for space in ("hsl", "lab", "lch", "oklab", "oklch"):
            Color(SAMPLE_A).convert(space)
    except Exception:
        log.exception("Colour-space conversions unavailable")
        return False
    return True


def _has_hct() -> bool:
    if not register_hct():
        return False
    try:
        Color(SAMPLE_A).convert("hct")
    except Exception:
        log.exception("HCT conversion unavailable")
        return False
    return True


def _has_bezier() -> bool:
    try:
        curve = Color.interpolate([SAMPLE_A, SAMPLE_B], space="lch", method="bspline")
        curve(0.5)
    except Exception:
        log.exception("B-spline interpolation unavailable")
        return False
    return True


@lru_cache(maxsize=1)
def detect_capabilities() -> Capabilities:
    """Check the colour backend once; later calls return the same record."""
    caps = Capabilities(
        colorspace=_has_spaces(),
        hct=_has_hct(),
        bezier=_has_bezier(),
    )
    log.info("Colour capabilities: %s", caps)
    return caps


__all__ = ["Capabilities", "detect_capabilities"]
