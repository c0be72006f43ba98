"""
Reusable buffers that load a phase sheet and hand back its segment.

A sheet stores a gw^3 grid of vectors. Callers only want the sw^3 corner
block anchored at (0, 0, 0); the extra layer(s) are shared with neighbouring
sheets. SheetBuffer keeps one full-grid array and one segment array and
reuses both across reads, so it must be built from a file with the same
grid and segment widths as the files it will later read.

Usage:
    >>> buf = SheetBuffer("sheet000.dat")
    >>> xs = buf.read("sheet000.dat")
    >>> ...  # use xs
    >>> buf.close()
    >>> xs = buf.read("sheet001.dat")

The array returned by read() is the buffer's own storage. It is overwritten
by the next read(), so copy it if it has to outlive close().

SheetBuffer is not thread-safe; use one buffer per worker.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import numpy as np

from phase_sheet.core.bounds import CellBounds, cell_bounds
from phase_sheet.errors import FormatError, IllegalStateError
from phase_sheet.io.header import Header, read_header
from phase_sheet.io.payload import read_vectors
from phase_sheet.params import ReaderParams

logger = logging.getLogger(__name__)


class VectorBuffer:
    """
    Abstract base interface for vector buffers.

    A buffer is closed until read() succeeds and must be closed again before
    the next read().
    """

    def is_open(self) -> bool:
        raise NotImplementedError

    def read(self, path: str | Path) -> np.ndarray:
        """
        Load the vectors stored at ``path``.

        Returns:
            (N, 3) float32 array owned by the buffer.
        """
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class SheetBuffer(VectorBuffer):
    """
    Buffer for phase sheet position files.

    Attributes:
        sheet: (gw^3, 3) float32 array holding the full stored grid.
        out: (sw^3, 3) float32 array holding the extracted segment.
    """

    def __init__(self, path: str | Path, params: ReaderParams | None = None) -> None:
        """
        Size the buffer from the header of a representative sheet.

        Raises:
            FormatError: The header is invalid, or its segment width is larger
                than its grid width.
            OSError: The file could not be read.
        """
        self.params = params if params is not None else ReaderParams()
        hd = read_header(path)
        sw, gw = int(hd.segment_width), int(hd.grid_width)
        if sw < 0 or gw < 0:
            raise FormatError(f"Negative grid dimensions in {path}: segment_width={sw}, grid_width={gw}.")
        if sw > gw:
            raise FormatError(
                f"Segment width {sw} exceeds grid width {gw} in {path}."
            )

        self._header = hd
        self._sw = sw
        self._gw = gw
        self._open = False
        self.sheet = np.zeros((gw * gw * gw, 3), dtype=np.float32)
        self.out = np.zeros((sw * sw * sw, 3), dtype=np.float32)
        logger.debug("Allocated sheet buffer gw=%d sw=%d from %s", gw, sw, path)

    @property
    def sw(self) -> int:
        return self._sw

    @property
    def gw(self) -> int:
        return self._gw

    @property
    def header(self) -> Header:
        """Header of the file the buffer was sized from."""
        return self._header

    def is_open(self) -> bool:
        return self._open

    def read(self, path: str | Path) -> np.ndarray:
        """
        Read a sheet and extract its sw^3 corner segment.

        Segment vector (x, y, z) is copied from grid vector (x, y, z), i.e.
        ``out[x + y*sw + z*sw*sw] = sheet[x + y*gw + z*gw*gw]``.

        Raises:
            IllegalStateError: The buffer is already open.
            FormatError: The file is malformed or has a different grid size.
            OSError: The file could not be read.
        """
        if self._open:
            raise IllegalStateError("Buffer already open.")

        read_vectors(path, self.sheet)

        sw, gw = self._sw, self._gw
        # Row-major reshape puts z first: grid[z, y, x] == sheet[x + y*gw + z*gw*gw].
        grid = self.sheet.reshape(gw, gw, gw, 3)
        self.out.reshape(sw, sw, sw, 3)[...] = grid[:sw, :sw, :sw]

        self._open = True
        logger.debug("Opened buffer on %s", path)
        return self.out

    def close(self) -> None:
        if not self._open:
            raise IllegalStateError("Buffer already closed.")
        self._open = False

    @contextmanager
    def reading(self, path: str | Path) -> Iterator[np.ndarray]:
        """Read ``path`` and close the buffer when the block exits."""
        vectors = self.read(path)
        try:
            yield vectors
        finally:
            self.close()

    def cell_bounds(self, cells: int | None = None) -> CellBounds:
        """Cell bounds of the sheet header read at construction, at ``params.cells`` by default."""
        return cell_bounds(self._header, self.params.cells if cells is None else cells)
