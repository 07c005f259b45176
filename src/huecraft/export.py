# export.py
#
# SVG and PDF renderings of a finished palette grid.

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from typing import Iterator

from jinja2 import Template
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from .codec import is_hex, label_color
from .config import EXPORT_DEFAULTS, PDF_PAGE_SIZE
from .palette import PaletteGrid, grid_shape, is_valid_palette

log = logging.getLogger(__name__)

PLACEHOLDER = "#cccccc"  # drawn for cells that are not hex colours

SVG_TEMPLATE = Template(
    """<svg width="{{ width }}" height="{{ height }}" viewBox="0 0 {{ width }} {{ height }}" xmlns="http://www.w3.org/2000/svg">
{%- for cell in cells %}
  <rect x="{{ cell.x }}" y="{{ cell.y }}" width="{{ size }}" height="{{ size }}" fill="{{ cell.fill }}" rx="4" ry="4"/>
{%- endfor %}
</svg>
""",
    autoescape=True,
)


def _fill(color: object) -> str:
    return str(color).lower() if is_hex(color) else PLACEHOLDER


def export_svg(
    grid: PaletteGrid,
    *,
    cell_size: float = EXPORT_DEFAULTS["svg_cell_size"],
    gap: float = EXPORT_DEFAULTS["svg_gap"],
) -> str:
    if not is_valid_palette(grid):
        raise ValueError("cannot export an empty palette")
    rows, cols = grid_shape(grid)
    width = cols * cell_size + max(0, cols - 1) * gap
    height = rows * cell_size + max(0, rows - 1) * gap
    cells = [
        {"x": c * (cell_size + gap), "y": r * (cell_size + gap), "fill": _fill(color)}
        for r, row in enumerate(grid)
        for c, color in enumerate(row)
    ]
    return SVG_TEMPLATE.render(width=width, height=height, size=cell_size, cells=cells)


# ---- PDF ----


@dataclass(frozen=True)
class PdfCell:
    row: int  # position in the palette grid
    col: int
    x: float  # top-left corner, points from the page's top-left
    y: float
    fill: str
    label: str | None  # hex text, or None when the cell is too small
    label_color: str


@dataclass(frozen=True)
class PdfPage:
    number: int
    cell_size: float
    font_size: float
    cells: tuple[PdfCell, ...]


def paginate(
    grid: PaletteGrid,
    *,
    page_size: tuple[float, float] = PDF_PAGE_SIZE,
    margin: float = EXPORT_DEFAULTS["pdf_margin"],
    min_cell_size: float = EXPORT_DEFAULTS["pdf_min_cell_size"],
    gap: float = EXPORT_DEFAULTS["pdf_gap"],
) -> list[PdfPage]:
    """
    Split the grid into pages of at least `min_cell_size` square cells.

    Pages walk row blocks first, then column blocks within each. On each page
    the block is scaled to the largest square cell that fits and centred in
    the area inside the margins.
    """
    if not is_valid_palette(grid):
        raise ValueError("cannot export an empty palette")
    page_w, page_h = page_size
    usable_w = page_w - 2 * margin
    usable_h = page_h - 2 * margin
    rows, cols = grid_shape(grid)
    max_cols = max(1, math.floor((usable_w + gap) / (min_cell_size + gap)))
    max_rows = max(1, math.floor((usable_h + gap) / (min_cell_size + gap)))

    pages: list[PdfPage] = []
    for start_row in range(0, rows, max_rows):
        for start_col in range(0, cols, max_cols):
            end_row = min(start_row + max_rows, rows)
            end_col = min(start_col + max_cols, cols)
            n_cols = end_col - start_col
            n_rows = end_row - start_row
            cell_w = (usable_w - max(0, n_cols - 1) * gap) / n_cols
            cell_h = (usable_h - max(0, n_rows - 1) * gap) / n_rows
            size = max(1.0, min(cell_w, cell_h))
            grid_w = n_cols * size + max(0, n_cols - 1) * gap
            grid_h = n_rows * size + max(0, n_rows - 1) * gap
            x0 = margin + max(0.0, (usable_w - grid_w) / 2)
            y0 = margin + max(0.0, (usable_h - grid_h) / 2)
            labelled = size >= min_cell_size

            cells = []
            for r in range(start_row, end_row):
                for c in range(start_col, end_col):
                    fill = _fill(grid[r][c])
                    cells.append(
                        PdfCell(
                            row=r,
                            col=c,
                            x=x0 + (c - start_col) * (size + gap),
                            y=y0 + (r - start_row) * (size + gap),
                            fill=fill,
                            label=fill.upper() if labelled else None,
                            label_color=label_color(fill),
                        )
                    )
            pages.append(
                PdfPage(
                    number=len(pages) + 1,
                    cell_size=size,
                    font_size=max(4.0, min(8.0, size * 0.15)),
                    cells=tuple(cells),
                )
            )
    return pages


def _page_figures(
    pages: list[PdfPage], page_size: tuple[float, float], margin: float
) -> Iterator[Figure]:
    page_w, page_h = page_size
    for page in pages:
        fig = Figure(figsize=(page_w / 72.0, page_h / 72.0))
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_xlim(0, page_w)
        ax.set_ylim(page_h, 0)  # y grows downward, like the layout
        ax.axis("off")
        for cell in page.cells:
            ax.add_patch(
                Rectangle(
                    (cell.x, cell.y),
                    page.cell_size,
                    page.cell_size,
                    facecolor=cell.fill,
                    edgecolor="none",
                )
            )
            if cell.label:
                ax.text(
                    cell.x + page.cell_size / 2,
                    cell.y + page.cell_size / 2,
                    cell.label,
                    ha="center",
                    va="center",
                    fontsize=page.font_size,
                    color=cell.label_color,
                )
        ax.text(
            page_w / 2,
            page_h - margin / 2,
            f"Page {page.number}",
            ha="center",
            va="center",
            fontsize=8,
            color="#888888",
        )
        yield fig


def export_pdf(
    grid: PaletteGrid,
    *,
    page_size: tuple[float, float] = PDF_PAGE_SIZE,
    margin: float = EXPORT_DEFAULTS["pdf_margin"],
    min_cell_size: float = EXPORT_DEFAULTS["pdf_min_cell_size"],
    gap: float = EXPORT_DEFAULTS["pdf_gap"],
) -> bytes:
    pages = paginate(
        grid, page_size=page_size, margin=margin, min_cell_size=min_cell_size, gap=gap
    )
    buf = io.BytesIO()
    with PdfPages(buf) as pdf:
        for fig in _page_figures(pages, page_size, margin):
            pdf.savefig(fig)
    log.info("Exported %d PDF page(s)", len(pages))
    return buf.getvalue()


__all__ = ["PdfCell", "PdfPage", "export_pdf", "export_svg", "paginate"]
