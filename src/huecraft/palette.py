# palette.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Tuple

from .codec import INVALID_COLOR, Hex
from .config import DEFAULTS
from .interpolators import Interpolator
from .registry import InterpolatorRegistry

log = logging.getLogger(__name__)

Row = Tuple[Hex, ...]
PaletteGrid = Tuple[Row, ...]

EMPTY_GRID: PaletteGrid = ()

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class PaletteSettings:
    left_color: Hex
    right_color: Hex
    top_color: Hex | None = None
    bottom_color: Hex | None = None
    horizontal_levels: int = 7
    vertical_steps: int = 1
    method: str = "rgb"
    vertical_enabled: bool = False

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], defaults: Mapping[str, Any] = DEFAULTS
    ) -> "PaletteSettings":
        """Build settings from loose input (query args, JSON), filling gaps from `defaults`."""
        merged = {**defaults, **{k: v for k, v in data.items() if v is not None}}
        vertical = merged.get("vertical_enabled", False)
        if isinstance(vertical, str):
            vertical = vertical.strip().lower() in _TRUE
        return cls(
            left_color=merged["left_color"],
            right_color=merged["right_color"],
            top_color=merged.get("top_color"),
            bottom_color=merged.get("bottom_color"),
            horizontal_levels=int(merged["horizontal_levels"]),
            vertical_steps=int(merged.get("vertical_steps", 1)),
            method=str(merged.get("method") or "rgb"),
            vertical_enabled=bool(vertical),
        )

    def with_method(self, method: str) -> "PaletteSettings":
        return replace(self, method=method)

    def problems(self) -> list[str]:
        out: list[str] = []
        if self.horizontal_levels < 1:
            out.append("horizontal_levels must be >= 1")
        if not self.left_color or not self.right_color:
            out.append("left_color and right_color are required")
        if self.vertical_enabled:
            if self.vertical_steps < 1:
                out.append("vertical_steps must be >= 1")
            if not self.top_color or not self.bottom_color:
                out.append("top_color and bottom_color are required in vertical mode")
        return out

    @property
    def is_valid(self) -> bool:
        return not self.problems()

    @property
    def shape(self) -> tuple[int, int]:
        rows = 2 * self.vertical_steps + 1 if self.vertical_enabled else 1
        return rows, self.horizontal_levels


def _safe(blend: Interpolator, a: Hex, b: Hex, t: float, where: str) -> Hex:
    try:
        return blend(a, b, t)
    except Exception:
        log.exception("Blend failed at %s (t=%.3f)", where, t)
        return INVALID_COLOR


def horizontal_row(
    left: Hex, right: Hex, levels: int, blend: Interpolator
) -> Row:
    out = []
    for j in range(levels):
        t = 0.5 if levels <= 1 else j / (levels - 1)
        out.append(_safe(blend, left, right, t, f"column {j}"))
    return tuple(out)


def vertical_column(
    top: Hex, base: Hex, bottom: Hex, steps: int, blend: Interpolator
) -> Row:
    """
    Colours of one column, top to bottom.

    Two independent gradients meet at `base` in the centre row: top → base
    above it and base → bottom below it.
    """
    mid = steps
    out = []
    for i in range(2 * steps + 1):
        if i == mid:
            out.append(base)
        elif i < mid:
            out.append(_safe(blend, top, base, i / mid, f"row {i}"))
        else:
            out.append(_safe(blend, base, bottom, (i - mid) / steps, f"row {i}"))
    return tuple(out)


def build_palette(
    settings: PaletteSettings, registry: InterpolatorRegistry
) -> PaletteGrid:
    """
    Generate the palette grid for `settings`.

    Returns an empty grid when the settings are invalid. Every cell is a
    `#rrggbb` string; cells whose blend failed outright hold the invalid
    marker colour.
    """
    problems = settings.problems()
    if problems:
        log.error("Invalid palette settings: %s", "; ".join(problems))
        return EMPTY_GRID

    blend = registry.resolve(settings.method)
    base = horizontal_row(
        settings.left_color, settings.right_color, settings.horizontal_levels, blend
    )
    if not settings.vertical_enabled:
        return (base,)

    if settings.top_color is None or settings.bottom_color is None:
        return EMPTY_GRID
    columns = [
        vertical_column(
            settings.top_color,
            color,
            settings.bottom_color,
            settings.vertical_steps,
            blend,
        )
        for color in base
    ]
    return tuple(zip(*columns))


def grid_shape(grid: PaletteGrid) -> tuple[int, int]:
    return (len(grid), len(grid[0]) if grid else 0)


def is_valid_palette(grid: PaletteGrid) -> bool:
    return bool(grid) and bool(grid[0])


__all__ = [
    "EMPTY_GRID",
    "PaletteGrid",
    "PaletteSettings",
    "build_palette",
    "grid_shape",
    "horizontal_row",
    "is_valid_palette",
    "vertical_column",
]
