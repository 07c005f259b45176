import re

import pytest

from huecraft.export import PLACEHOLDER, export_pdf, export_svg, paginate


def grid(rows, cols, color="#336699"):
    return tuple(tuple(color for _ in range(cols)) for _ in range(rows))


def test_svg_has_one_rect_per_cell():
    svg = export_svg(grid(3, 4))
    assert svg.count("<rect") == 12
    # 4*40 + 3*3 by 3*40 + 2*3
    assert 'width="169" height="126"' in svg
    assert 'viewBox="0 0 169 126"' in svg


def test_svg_positions_and_fill():
    svg = export_svg((("#FF0000", "#00ff00"),), cell_size=10, gap=2)
    rects = re.findall(r'<rect x="(\d+)" y="(\d+)"[^>]*fill="([^"]+)"', svg)
    assert rects == [("0", "0", "#ff0000"), ("12", "0", "#00ff00")]


def test_svg_placeholder_for_bad_cells():
    svg = export_svg((("#000000", "oops"),))
    assert f'fill="{PLACEHOLDER}"' in svg


def test_empty_grid_is_rejected():
    with pytest.raises(ValueError):
        export_svg(())
    with pytest.raises(ValueError):
        paginate(())


def test_small_grid_fits_one_labelled_page():
    pages = paginate(grid(3, 5, "#ffffff"))
    assert len(pages) == 1
    page = pages[0]
    assert page.number == 1
    assert len(page.cells) == 15
    assert page.cell_size >= 18
    assert page.font_size == 8.0
    assert all(c.label == "#FFFFFF" for c in page.cells)
    assert all(c.label_color == "#000000" for c in page.cells)


def test_cells_are_centred_within_margins():
    page = paginate(grid(1, 1))[0]
    cell = page.cells[0]
    # a single cell fills the usable height of landscape A4
    assert page.cell_size == pytest.approx(595.28 - 80)
    assert cell.y == pytest.approx(40)
    assert cell.x == pytest.approx(40 + (841.89 - 80 - page.cell_size) / 2)


def test_large_grid_covers_every_cell_once():
    # 38 columns and 25 rows of 18pt cells fit on one landscape A4 page
    pages = paginate(grid(51, 60))
    assert len(pages) == 3 * 2
    seen = [(c.row, c.col) for p in pages for c in p.cells]
    assert len(seen) == 51 * 60
    assert set(seen) == {(r, c) for r in range(51) for c in range(60)}
    assert [p.number for p in pages] == list(range(1, 7))
    # row blocks come first: page 2 continues the first rows
    assert pages[1].cells[0].row == 0
    assert pages[1].cells[0].col == 38


def test_labels_dropped_when_cells_too_small():
    pages = paginate(grid(2, 2), page_size=(100, 100), margin=10, min_cell_size=100)
    assert all(c.label is None for p in pages for c in p.cells)


def test_pdf_bytes():
    data = export_pdf(grid(3, 3, "#123456"))
    assert data.startswith(b"%PDF")
