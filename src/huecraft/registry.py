# registry.py

from __future__ import annotations

import logging
from functools import partial
from typing import Mapping

from .capabilities import Capabilities
from .diagnostics import Diagnostics, DiagnosticsSink
from .interpolators import (
    BezierLch,
    BlendFn,
    Interpolator,
    blend_blended_oklch_rgb,
    blend_hct,
    blend_hybrid_hct_rgb_hue,
    blend_oklch,
    blend_rgb,
    blend_space,
)

log = logging.getLogger(__name__)

METHODS: tuple[str, ...] = (
    "rgb",
    "hsl",
    "lab",
    "hct",
    "oklab",
    "oklch",
    "lch",
    "hybrid_hct_rgb_hue",
    "blended_oklch_rgb",
    "bezier_lch",
)

DEFAULT_METHOD = "rgb"

# capability flags each method needs
REQUIRES: Mapping[str, tuple[str, ...]] = {
    "rgb": (),
    "hsl": ("colorspace",),
    "lab": ("colorspace",),
    "hct": ("hct",),
    "oklab": ("colorspace",),
    "oklch": ("colorspace",),
    "lch": ("colorspace",),
    "hybrid_hct_rgb_hue": ("hct",),
    "blended_oklch_rgb": ("colorspace",),
    "bezier_lch": ("colorspace", "bezier"),
}

# next method tried when a blend fails; everything else ends at rgb
FALLBACKS: Mapping[str, str] = {
    "blended_oklch_rgb": "oklch",
    "bezier_lch": "lch",
}


def _blend_fn(method: str) -> BlendFn:
    if method == "rgb":
        return blend_rgb
    if method in ("hsl", "lab", "oklab", "lch"):
        return partial(blend_space, space=method)
    if method == "hct":
        return blend_hct
    if method == "oklch":
        return blend_oklch
    if method == "hybrid_hct_rgb_hue":
        return blend_hybrid_hct_rgb_hue
    if method == "blended_oklch_rgb":
        return blend_blended_oklch_rgb
    if method == "bezier_lch":
        return BezierLch()
    raise KeyError(method)


class InterpolatorRegistry:
    """
    Maps method names to interpolators with their fallback chains.

    Built once from a `Capabilities` record; methods whose backend is missing
    resolve to RGB. `resolve` never raises.
    """

    def __init__(
        self,
        capabilities: Capabilities,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        self.capabilities = capabilities
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._rgb = Interpolator(
            "rgb", blend_rgb, diagnostics=self.diagnostics, exact_endpoints=False
        )
        self._table: dict[str, Interpolator] = {"rgb": self._rgb}
        for method in METHODS:
            self._build(method)

    def _build(self, method: str) -> Interpolator:
        if method in self._table:
            return self._table[method]
        nxt = FALLBACKS.get(method)
        fallback = self._build(nxt) if nxt and self.is_available(nxt) else self._rgb
        interp = Interpolator(
            method, _blend_fn(method), fallback=fallback, diagnostics=self.diagnostics
        )
        self._table[method] = interp
        return interp

    def is_available(self, method: str) -> bool:
        required = REQUIRES.get(method)
        if required is None:
            return False
        return not self.capabilities.missing(required)

    def available_methods(self) -> tuple[str, ...]:
        return tuple(m for m in METHODS if self.is_available(m))

    def unavailable_methods(self) -> tuple[str, ...]:
        return tuple(m for m in METHODS if not self.is_available(m))

    def resolve(self, method: object) -> Interpolator:
        if method is None:
            method = DEFAULT_METHOD
        name = method.strip().lower() if isinstance(method, str) else None
        if name not in REQUIRES:
            log.warning("Unknown interpolation method %r; using RGB", method)
            return self._rgb
        missing = self.capabilities.missing(REQUIRES[name])
        if missing:
            log.warning(
                "Method %r needs %s, which is unavailable; using RGB",
                name,
                ", ".join(missing),
            )
            return self._rgb
        return self._table[name]


__all__ = [
    "DEFAULT_METHOD",
    "FALLBACKS",
    "METHODS",
    "REQUIRES",
    "InterpolatorRegistry",
]
