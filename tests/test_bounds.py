"""Tests for cell bounds."""

import pytest

from phase_sheet.core.bounds import CellBounds, cell_bounds
from phase_sheet.io.header import Header


def make_header(origin, width, total_width=100.0) -> Header:
    return Header(total_width=total_width, origin=origin, width=width)


class TestCellBounds:
    """Tests for cell_bounds."""

    def test_reference_case(self):
        hd = make_header((5.0, 5.0, 5.0), (12.0, 12.0, 12.0))
        cb = cell_bounds(hd, 10)
        assert cb.origin == (0, 0, 0)
        assert cb.width == (2, 2, 2)

    def test_per_axis(self):
        hd = make_header((0.0, 25.0, 95.0), (10.0, 1.0, 4.0))
        cb = cell_bounds(hd, 10)
        # x: [0, 10] touches cell 1 at its edge, so far = 1 + 1
        assert cb.origin == (0, 2, 9)
        assert cb.width == (2, 1, 1)

    def test_single_cell(self):
        hd = make_header((10.0, 20.0, 30.0), (5.0, 5.0, 5.0))
        cb = cell_bounds(hd, 1)
        assert cb.origin == (0, 0, 0)
        assert cb.width == (1, 1, 1)

    def test_negative_origin_floors_down(self):
        hd = make_header((-1.0, 0.0, 0.0), (2.0, 2.0, 2.0))
        cb = cell_bounds(hd, 10)
        assert cb.origin[0] == -1
        assert cb.width[0] == 2

    @pytest.mark.parametrize("cells", [0, -1, -10])
    def test_non_positive_cells_rejected(self, cells):
        hd = make_header((5.0, 5.0, 5.0), (12.0, 12.0, 12.0))
        with pytest.raises(ValueError):
            cell_bounds(hd, cells)

    @pytest.mark.parametrize("total_width", [0.0, -100.0, float("nan"), float("inf")])
    def test_bad_total_width_rejected(self, total_width):
        hd = make_header((1.0, 1.0, 1.0), (1.0, 1.0, 1.0), total_width=total_width)
        with pytest.raises(ValueError, match="total_width"):
            cell_bounds(hd, 10)

    @pytest.mark.parametrize(
        "origin, width",
        [
            ((float("nan"), 0.0, 0.0), (1.0, 1.0, 1.0)),
            ((0.0, 0.0, 0.0), (1.0, float("inf"), 1.0)),
            ((0.0, 0.0, float("-inf")), (1.0, 1.0, 1.0)),
        ],
    )
    def test_non_finite_bounds_rejected(self, origin, width):
        hd = make_header(origin, width)
        with pytest.raises(ValueError, match="not finite"):
            cell_bounds(hd, 10)

    def test_header_method_delegates(self):
        hd = make_header((5.0, 5.0, 5.0), (12.0, 12.0, 12.0))
        assert hd.cell_bounds(10) == cell_bounds(hd, 10)


class TestContains:
    def test_half_open(self):
        cb = CellBounds(origin=(1, 2, 3), width=(2, 1, 1))
        assert cb.contains(1, 2, 3)
        assert cb.contains(2, 2, 3)
        assert not cb.contains(3, 2, 3)
        assert not cb.contains(0, 2, 3)
        assert not cb.contains(1, 3, 3)
        assert not cb.contains(1, 2, 4)
