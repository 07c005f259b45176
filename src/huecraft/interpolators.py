# interpolators.py

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, NamedTuple, Sequence

from .codec import (
    INVALID_COLOR,
    Hex,
    decode,
    decode_or_invalid,
    encode,
    mix_channels,
)
from .colors import FIT_HCT, Color, to_hex
from .config import BLEND_WEIGHT
from .diagnostics import DiagnosticsSink

Hue = float
Chroma = float
Tone = float

BlendFn = Callable[[Hex, Hex, float], Hex]

_HEX6 = re.compile(r"^#[0-9a-f]{6}$")


class InterpolationError(ValueError):
    """A colour space produced something that is not a usable colour."""


def clamp01(t: float) -> float:
    return 1.0 if t >= 1.0 else 0.0 if not t > 0.0 else float(t)


def lerp(a: float, b: float, t: float) -> float:
    t = clamp01(t)
    return a * (1.0 - t) + b * t


def interpolate_hue(h1: Hue, h2: Hue, t: float) -> Hue:
    """
    Shortest-arc hue interpolation in degrees.

    An undefined (NaN) hue, as produced for achromatic colours, takes the
    other endpoint's hue; if both are undefined the result is 0.
    """
    if math.isnan(h1) and math.isnan(h2):
        return 0.0
    if math.isnan(h1):
        h1 = h2
    elif math.isnan(h2):
        h2 = h1
    h1 %= 360.0
    h2 %= 360.0
    delta = h2 - h1
    if abs(delta) > 180.0:
        delta -= math.copysign(360.0, delta)
    return (h1 + delta * t + 360.0) % 360.0


def strict_hex(hex_str: Hex) -> Hex:
    """Canonical `#rrggbb` for a `#RGB` / `#RRGGBB` input; anything else raises."""
    rgb = decode(hex_str)
    if rgb is None:
        raise InterpolationError(f"not a hex colour: {hex_str!r}")
    return encode(rgb)


def _checked(hex_str: str) -> Hex:
    out = (hex_str or "").lower()
    if not _HEX6.match(out):
        raise InterpolationError(f"not a 6-digit hex colour: {hex_str!r}")
    return out


# ---- RGB ----


def blend_rgb(a: Hex, b: Hex, t: float) -> Hex:
    """Per-channel linear mix; undecodable endpoints become the invalid marker."""
    return encode(mix_channels(decode_or_invalid(a), decode_or_invalid(b), t))


# ---- library-driven linear spaces (hsl, lab, oklab, lch) ----


def blend_space(a: Hex, b: Hex, t: float, *, space: str) -> Hex:
    mixer = Color.interpolate(
        [strict_hex(a), strict_hex(b)],
        space=space,
        out_space="srgb",
        method="linear",
        hue="shorter",
    )
    return _checked(to_hex(mixer(clamp01(t))))


# ---- HCT ----


def _to_hct(hex_str: Hex) -> tuple[Hue, Chroma, Tone]:
    h, c, tone = Color(strict_hex(hex_str)).convert("hct").coords()
    return float(h), float(c), float(tone)


def _from_hct(h: Hue, c: Chroma, tone: Tone) -> Hex:
    safe_c = max(0.0, c)
    safe_t = max(0.0, min(100.0, tone))
    return _checked(to_hex(Color("hct", [h, safe_c, safe_t]), fit=FIT_HCT))


def blend_hct(a: Hex, b: Hex, t: float) -> Hex:
    h1, c1, t1 = _to_hct(a)
    h2, c2, t2 = _to_hct(b)
    return _from_hct(interpolate_hue(h1, h2, t), lerp(c1, c2, t), lerp(t1, t2, t))


def blend_hybrid_hct_rgb_hue(a: Hex, b: Hex, t: float) -> Hex:
    """HCT chroma and tone, hue taken from the RGB mix at the same t."""
    _, c1, t1 = _to_hct(a)
    _, c2, t2 = _to_hct(b)
    guide_h, _, _ = _to_hct(blend_rgb(a, b, t))
    if math.isnan(guide_h):
        guide_h = 0.0
    return _from_hct(guide_h, lerp(c1, c2, t), lerp(t1, t2, t))


# ---- OKLCH ----


def _to_oklch(hex_str: Hex) -> tuple[float, Chroma, Hue]:
    l, c, h = Color(strict_hex(hex_str)).convert("oklch").coords()
    return float(l), float(c), float(h)


def blend_oklch(a: Hex, b: Hex, t: float) -> Hex:
    l1, c1, h1 = _to_oklch(a)
    l2, c2, h2 = _to_oklch(b)
    l = max(0.0, min(1.0, lerp(l1, l2, t)))
    c = max(0.0, lerp(c1, c2, t))
    h = interpolate_hue(h1, h2, t)
    return _checked(to_hex(Color("oklch", [l, c, h])))


def blend_blended_oklch_rgb(
    a: Hex, b: Hex, t: float, *, weight: float = BLEND_WEIGHT
) -> Hex:
    """Mix the OKLCH result and the RGB result, `weight` toward OKLCH."""
    ok = decode(blend_oklch(a, b, t))
    rgb = decode(blend_rgb(a, b, t))
    if ok is None or rgb is None:
        raise InterpolationError("blend components did not decode")
    return encode(mix_channels(rgb, ok, weight))


# ---- Bezier in LCh ----


class BezierLch:
    """
    Smooth B-spline curves through the LCh forms of the anchor colours.

    Curves are built once per anchor tuple and reused, so every cell of a
    grid column shares a single curve.
    """

    def __init__(self, cache_size: int = 1024) -> None:
        self._curve = lru_cache(maxsize=cache_size)(self._build)

    @staticmethod
    def _build(stops: tuple[Hex, ...]):
        return Color.interpolate(
            list(stops), space="lch", out_space="srgb", method="bspline"
        )

    def curve(self, colors: Sequence[Hex]) -> Callable[[float], Hex]:
        stops = tuple(strict_hex(c) for c in colors)
        if len(stops) < 2:
            raise InterpolationError("a curve needs at least two colours")
        fn = self._curve(stops)
        return lambda t: _checked(to_hex(fn(clamp01(t))))

    def __call__(self, a: Hex, b: Hex, t: float) -> Hex:
        return self.curve((a, b))(t)

    def cache_info(self):
        return self._curve.cache_info()


# ---- fallback chain ----


class BlendOutcome(NamedTuple):
    color: Hex
    method: str  # method that produced `color`
    failed: tuple[str, ...] = ()  # methods that failed before it, in order

    @property
    def fell_back(self) -> bool:
        return bool(self.failed)


@dataclass(frozen=True)
class Interpolator:
    name: str
    fn: BlendFn
    fallback: "Interpolator | None" = None
    diagnostics: DiagnosticsSink | None = None
    exact_endpoints: bool = True

    def __call__(self, a: Hex, b: Hex, t: float) -> Hex:
        return self.outcome(a, b, t).color

    def outcome(self, a: Hex, b: Hex, t: float) -> BlendOutcome:
        t = clamp01(t)
        try:
            if self.exact_endpoints and t in (0.0, 1.0):
                color = strict_hex(a if t == 0.0 else b)
            else:
                color = _checked(self.fn(a, b, t))
        except Exception as exc:
            if self.diagnostics is not None:
                self.diagnostics.record(self.name, exc)
            if self.fallback is None:
                return BlendOutcome(INVALID_COLOR, self.name, (self.name,))
            result = self.fallback.outcome(a, b, t)
            return result._replace(failed=(self.name,) + result.failed)
        return BlendOutcome(color, self.name)

    def chain(self) -> tuple[str, ...]:
        names = [self.name]
        node = self.fallback
        while node is not None:
            names.append(node.name)
            node = node.fallback
        return tuple(names)


__all__ = [
    "BezierLch",
    "BlendFn",
    "BlendOutcome",
    "InterpolationError",
    "Interpolator",
    "blend_blended_oklch_rgb",
    "blend_hct",
    "blend_hybrid_hct_rgb_hue",
    "blend_oklch",
    "blend_rgb",
    "blend_space",
    "clamp01",
    "interpolate_hue",
    "lerp",
    "strict_hex",
]
