# codec.py

from __future__ import annotations

import string
from typing import NamedTuple, Sequence

import numpy as np

Hex = str

INVALID_COLOR: Hex = "#ff00ff"  # marker for undecodable input


class RGB(NamedTuple):
    r: int
    g: int
    b: int


def _expand(raw: str) -> str | None:
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) != 6 or not all(c in string.hexdigits for c in raw):
        return None
    return raw.lower()


def decode(hex_str: Hex) -> RGB | None:
    """`#RGB` / `#RRGGBB` → RGB triple, or None if the string is not a hex colour."""
    if not isinstance(hex_str, str) or not hex_str.startswith("#"):
        return None
    raw = _expand(hex_str[1:])
    if raw is None:
        return None
    return RGB(int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16))


def decode_or_invalid(hex_str: Hex) -> RGB:
    rgb = decode(hex_str)
    return rgb if rgb is not None else decode(INVALID_COLOR)  # type: ignore[return-value]


def encode(rgb: Sequence[float]) -> Hex:
    """
    Convert a 0-255 triple to `#rrggbb`.

    Channels are rounded half-up (so 127.5 → 128) and clamped to [0, 255].
    """
    u8 = np.clip(np.floor(np.asarray(rgb, dtype=np.float64) + 0.5), 0, 255)
    r, g, b = (int(v) for v in u8)
    return f"#{r:02x}{g:02x}{b:02x}"


def canon_hex(s: str) -> Hex:
    """Normalize to '#rrggbb'; accept 3- or 6-digit hex only."""
    raw = _expand((s or "").strip().lstrip("#"))
    if raw is None:
        raise ValueError(f"invalid hex: {s!r}")
    return "#" + raw


def is_hex(s: object) -> bool:
    return isinstance(s, str) and decode(s) is not None


def mix_channels(a: Sequence[float], b: Sequence[float], t: float) -> np.ndarray:
    t = min(1.0, max(0.0, float(t)))
    return (1.0 - t) * np.asarray(a, dtype=np.float64) + t * np.asarray(
        b, dtype=np.float64
    )


def relative_luminance(hex_str: Hex) -> float:
    r, g, b = decode_or_invalid(hex_str)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def label_color(hex_str: Hex) -> Hex:
    """Black text on light fills, white on dark ones."""
    return "#000000" if relative_luminance(hex_str) > 128 else "#ffffff"


__all__ = [
    "Hex",
    "INVALID_COLOR",
    "RGB",
    "canon_hex",
    "decode",
    "decode_or_invalid",
    "encode",
    "is_hex",
    "label_color",
    "mix_channels",
    "relative_luminance",
]
