# colors.py

from __future__ import annotations

import logging

from coloraide import Color as _Base

log = logging.getLogger(__name__)

FIT_HEX = {"method": "raytrace"}  # consistent gamut-fit for hex output
FIT_HCT = {"method": "raytrace", "pspace": "hct"}


class Color(_Base):
    """Project-local Color class; HCT is registered on it by `register_hct`."""


def register_hct() -> bool:
    """Register ColorAide's HCT space on the local Color class (idempotent)."""
    try:
        from coloraide.spaces.hct import HCT  # type: ignore[attr-defined]
    except ImportError:
        log.warning("ColorAide build has no HCT space; HCT methods disabled")
        return False
    Color.register(HCT(), overwrite=True)
    return True


def to_hex(color: _Base, fit: dict = FIT_HEX) -> str:
    return color.convert("srgb").to_string(hex=True, fit=fit).lower()


__all__ = ["Color", "FIT_HCT", "FIT_HEX", "register_hct", "to_hex"]
