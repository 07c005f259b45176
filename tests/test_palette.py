import pytest

from huecraft.codec import INVALID_COLOR
from huecraft.palette import (
    PaletteSettings,
    build_palette,
    grid_shape,
    is_valid_palette,
)
from huecraft.registry import METHODS


def settings(**kw):
    base = dict(
        left_color="#ff0000",
        right_color="#0000ff",
        top_color="#ffffff",
        bottom_color="#000000",
        horizontal_levels=5,
        vertical_steps=2,
        method="rgb",
        vertical_enabled=False,
    )
    base.update(kw)
    return PaletteSettings(**base)


def test_red_to_blue_three_levels(registry):
    grid = build_palette(settings(horizontal_levels=3), registry)
    assert grid == (("#ff0000", "#800080", "#0000ff"),)


def test_single_level_uses_midpoint(registry):
    grid = build_palette(settings(horizontal_levels=1), registry)
    assert grid == (("#800080",),)


@pytest.mark.parametrize("method", METHODS)
def test_horizontal_shape(registry, method):
    grid = build_palette(settings(method=method), registry)
    assert grid_shape(grid) == (1, 5)
    assert grid[0][0] == "#ff0000"
    assert grid[0][-1] == "#0000ff"


@pytest.mark.parametrize("method", METHODS)
def test_vertical_centre_row_is_horizontal_row(registry, method):
    flat = build_palette(settings(method=method, horizontal_levels=4), registry)
    grid = build_palette(
        settings(method=method, horizontal_levels=4, vertical_enabled=True), registry
    )
    assert grid_shape(grid) == (5, 4)
    assert grid[2] == flat[0]
    assert all(cell == "#ffffff" for cell in grid[0])
    assert all(cell == "#000000" for cell in grid[-1])


def test_vertical_halves_rgb(registry):
    grid = build_palette(
        settings(
            left_color="#808080",
            right_color="#808080",
            horizontal_levels=2,
            vertical_steps=1,
            vertical_enabled=True,
        ),
        registry,
    )
    assert grid == (
        ("#ffffff", "#ffffff"),
        ("#808080", "#808080"),
        ("#000000", "#000000"),
    )


def test_vertical_two_steps_rgb(registry):
    grid = build_palette(
        settings(
            left_color="#000000",
            right_color="#000000",
            top_color="#ffffff",
            bottom_color="#000000",
            horizontal_levels=1,
            vertical_steps=2,
            vertical_enabled=True,
        ),
        registry,
    )
    assert [row[0] for row in grid] == [
        "#ffffff",
        "#808080",
        "#000000",
        "#000000",
        "#000000",
    ]


@pytest.mark.parametrize(
    "bad",
    [
        dict(horizontal_levels=0),
        dict(horizontal_levels=-3),
        dict(vertical_enabled=True, vertical_steps=0),
        dict(vertical_enabled=True, top_color=None),
        dict(vertical_enabled=True, bottom_color=""),
        dict(left_color=""),
    ],
)
def test_invalid_settings_give_empty_grid(registry, bad, caplog):
    s = settings(**bad)
    assert not s.is_valid
    grid = build_palette(s, registry)
    assert grid == ()
    assert not is_valid_palette(grid)
    assert grid_shape(grid) == (0, 0)


def test_missing_corners_ignored_when_not_vertical(registry):
    grid = build_palette(settings(top_color=None, bottom_color=None), registry)
    assert grid_shape(grid) == (1, 5)


def test_invalid_corner_colour_never_raises(registry):
    grid = build_palette(settings(left_color="#zzzzzz", method="lab"), registry)
    assert grid[0][0] == INVALID_COLOR
    assert grid[0][-1] == "#0000ff"


def test_blend_exception_marks_only_that_cell(registry, monkeypatch):
    real = registry.resolve("rgb")

    def flaky(a, b, t):
        if t == 0.5:
            raise RuntimeError("flaky")
        return real(a, b, t)

    monkeypatch.setattr(registry, "resolve", lambda method: flaky)
    grid = build_palette(settings(horizontal_levels=3), registry)
    assert grid == (("#ff0000", INVALID_COLOR, "#0000ff"),)


def test_grid_is_immutable(registry):
    grid = build_palette(settings(vertical_enabled=True), registry)
    assert isinstance(grid, tuple)
    assert all(isinstance(row, tuple) for row in grid)


def test_settings_from_mapping():
    s = PaletteSettings.from_mapping(
        {"horizontal_levels": "3", "vertical_enabled": "true", "method": "oklch"}
    )
    assert s.horizontal_levels == 3
    assert s.vertical_enabled is True
    assert s.method == "oklch"
    assert s.left_color == "#9c27b0"
    assert s.shape == (5, 3)

    off = PaletteSettings.from_mapping({"vertical_enabled": "0"})
    assert off.vertical_enabled is False
    assert off.shape == (1, 7)


@pytest.mark.parametrize("method", METHODS)
def test_hashless_colour_matches_rgb_grid(registry, method):
    grid = build_palette(
        settings(left_color="ff0000", horizontal_levels=3, method=method), registry
    )
    assert grid == (("#ff00ff", "#8000ff", "#0000ff"),)


def test_vertical_without_corners_gives_empty_grid(registry, monkeypatch):
    monkeypatch.setattr(PaletteSettings, "problems", lambda self: [])
    s = settings(vertical_enabled=True, top_color=None)
    assert build_palette(s, registry) == ()
