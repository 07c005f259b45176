from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, Response, current_app, jsonify, request

from .capabilities import Capabilities, detect_capabilities
from .codec import canon_hex
from .config import APP_DEFAULTS
from .diagnostics import Diagnostics
from .export import export_pdf, export_svg
from .palette import PaletteSettings, build_palette, grid_shape
from .registry import InterpolatorRegistry

log = logging.getLogger(__name__)

# query parameter → PaletteSettings field
QUERY_FIELDS: Mapping[str, str] = {
    "left": "left_color",
    "right": "right_color",
    "top": "top_color",
    "bottom": "bottom_color",
    "levels": "horizontal_levels",
    "steps": "vertical_steps",
    "method": "method",
    "vertical": "vertical_enabled",
}

COLOR_FIELDS = ("left_color", "right_color", "top_color", "bottom_color")


class BadRequest(ValueError):
    pass


def _registry() -> InterpolatorRegistry:
    return current_app.extensions["huecraft.registry"]


def parse_settings(args: Mapping[str, str]) -> PaletteSettings:
    """Query args → settings, with colours canonicalized and levels capped."""
    data: dict[str, Any] = {}
    for param, field in QUERY_FIELDS.items():
        if args.get(param) not in (None, ""):
            data[field] = args[param]
    try:
        for field in COLOR_FIELDS:
            if field in data:
                data[field] = canon_hex(data[field])
    except ValueError as e:
        raise BadRequest(f"invalid color: {e}") from e
    try:
        settings = PaletteSettings.from_mapping(
            data, current_app.config["PALETTE_DEFAULTS"]
        )
    except ValueError as e:
        raise BadRequest("levels and steps must be integers") from e

    cap = int(current_app.config["MAX_LEVELS"])
    if settings.horizontal_levels > cap or settings.vertical_steps > cap:
        raise BadRequest(f"levels and steps must be <= {cap}")
    return settings


def _palette_or_error():
    try:
        settings = parse_settings(request.args)
    except BadRequest as e:
        return None, None, (jsonify({"error": str(e)}), 400)
    grid = build_palette(settings, _registry())
    if not grid:
        return (
            settings,
            None,
            (
                jsonify(
                    {
                        "error": "invalid palette settings",
                        "problems": settings.problems(),
                    }
                ),
                400,
            ),
        )
    return settings, grid, None


def _download(body: bytes | str, mimetype: str, ext: str) -> Response:
    name = f"{current_app.config['EXPORT_BASENAME']}.{ext}"
    resp = Response(body, mimetype=mimetype)
    resp.headers["Content-Disposition"] = f'attachment; filename="{name}"'
    return resp


# ----------------------------- Flask app ----------------------------------


def create_app(
    config: Mapping[str, Any] | None = None,
    *,
    capabilities: Capabilities | None = None,
) -> Flask:
    app = Flask(__name__)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    app.config.update(
        {k: dict(v) if isinstance(v, Mapping) else v for k, v in APP_DEFAULTS.items()}
    )
    app.config.from_prefixed_env("HUECRAFT")
    if config:
        app.config.update(config)

    caps = capabilities if capabilities is not None else detect_capabilities()
    diagnostics = Diagnostics()
    app.extensions["huecraft.registry"] = InterpolatorRegistry(caps, diagnostics)
    app.extensions["huecraft.diagnostics"] = diagnostics

    @app.route("/methods")
    def methods():
        reg = _registry()
        return jsonify(
            {
                "methods": list(reg.available_methods()),
                "unavailable": list(reg.unavailable_methods()),
                "default": app.config["PALETTE_DEFAULTS"]["method"],
            }
        )

    @app.route("/palette")
    def palette():
        try:
            settings, grid, error = _palette_or_error()
        except Exception as exc:
            log.exception("Palette generation failed")
            return jsonify({"error": str(exc)}), 500
        if error:
            return error
        rows, cols = grid_shape(grid)
        return jsonify(
            {
                "rows": rows,
                "cols": cols,
                "method": _registry().resolve(settings.method).name,
                "palette": [list(row) for row in grid],
            }
        )

    @app.route("/export.svg")
    def export_svg_view():
        try:
            _, grid, error = _palette_or_error()
            if error:
                return error
            cfg = app.config["EXPORT_DEFAULTS"]
            svg = export_svg(grid, cell_size=cfg["svg_cell_size"], gap=cfg["svg_gap"])
        except Exception as exc:
            log.exception("SVG export failed")
            return jsonify({"error": str(exc)}), 500
        return _download(svg, "image/svg+xml", "svg")

    @app.route("/export.pdf")
    def export_pdf_view():
        try:
            _, grid, error = _palette_or_error()
            if error:
                return error
            cfg = app.config["EXPORT_DEFAULTS"]
            pdf = export_pdf(
                grid,
                margin=cfg["pdf_margin"],
                min_cell_size=cfg["pdf_min_cell_size"],
                gap=cfg["pdf_gap"],
            )
        except Exception as exc:
            log.exception("PDF export failed")
            return jsonify({"error": str(exc)}), 500
        return _download(pdf, "application/pdf", "pdf")

    @app.route("/diagnostics")
    def diagnostics_view():
        return jsonify({"failures": diagnostics.snapshot()})

    return app

