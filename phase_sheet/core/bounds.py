"""
Cell bounds of a sheet within a uniform decomposition of the domain.

The domain is a cube of side ``total_width`` split into ``cells`` cells per
axis. A sheet's bounding box (origin, width) overlaps a half-open range of
cell indices along each axis; CellBounds stores that range.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from phase_sheet.io.header import Header


@dataclass(slots=True)
class CellBounds:
    """
    Cell index ranges [origin[j], origin[j] + width[j]) for j in x, y, z.
    """
    origin: tuple[int, int, int]
    width: tuple[int, int, int]

    def contains(self, i: int, j: int, k: int) -> bool:
        for idx, o, w in zip((i, j, k), self.origin, self.width):
            if idx < o or idx >= o + w:
                return False
        return True


def cell_bounds(header: "Header", cells: int) -> CellBounds:
    """
    Compute the cells overlapped by the sheet's bounding box.

    The far edge uses ``1 + floor(...)`` so a trailing cell that is only
    partly covered is included.

    Raises:
        ValueError: ``cells`` is not positive, ``total_width`` is not a
            positive finite number, or the bounding box is not finite.
    """
    if cells <= 0:
        raise ValueError(f"cells must be > 0, got {cells}")

    cell_width = float(header.total_width) / cells
    if not math.isfinite(cell_width) or cell_width <= 0.0:
        raise ValueError(
            f"total_width must be positive and finite, got {header.total_width}"
        )

    origin: list[int] = []
    width: list[int] = []
    for j in range(3):
        o = header.origin[j]
        # Bounds are float32 on disk; add them at that precision.
        with np.errstate(over="ignore", invalid="ignore"):
            far = float(np.float32(o) + np.float32(header.width[j]))
        lo_f = float(o) / cell_width
        hi_f = far / cell_width
        if not (math.isfinite(lo_f) and math.isfinite(hi_f)):
            raise ValueError(
                f"Bounding box is not finite along axis {j}: "
                f"origin={o}, width={header.width[j]}"
            )
        lo = int(math.floor(lo_f))
        hi = 1 + int(math.floor(hi_f))
        origin.append(lo)
        width.append(hi - lo)

    return CellBounds(origin=tuple(origin), width=tuple(width))
