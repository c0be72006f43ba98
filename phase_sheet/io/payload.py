"""
Reader for the vector payload that follows a phase sheet header.

The payload is grid_count contiguous (x, y, z) float32 triples in the byte
order given by the file's flag. Vectors are stored in grid order, so vector
(x, y, z) of the full cube is at linear index x + y*gw + z*gw*gw.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from phase_sheet.errors import FormatError
from phase_sheet.io.header import PAYLOAD_OFFSET, VECTOR_SIZE, open_sheet, read_header

logger = logging.getLogger(__name__)


def read_vectors(path: str | Path, target: np.ndarray) -> None:
    """
    Read the payload of the sheet at ``path`` into ``target``.

    Args:
        path: Sheet file.
        target: Caller-owned array of shape (grid_count, 3). Converted to its
            own dtype on copy, normally float32.

    Raises:
        FormatError: Bad header, ``len(target)`` differs from the header's
            grid_count, or the payload is truncated. ``target`` is left
            untouched in every case.
        OSError: The file could not be opened or read.
    """
    if target.ndim != 2 or target.shape[1] != 3:
        raise ValueError(f"target must have shape (N, 3), got {target.shape}")

    hd, order, f = open_sheet(path)
    with f:
        if hd.grid_count != len(target):
            logger.warning(
                "Vector count mismatch for %s: buffer %d, file %d",
                path, len(target), hd.grid_count,
            )
            raise FormatError(
                f"Position buffer has length {len(target)}, but file {path} "
                f"has {hd.grid_count} vectors."
            )

        # The handle should already be here; seek anyway.
        f.seek(PAYLOAD_OFFSET)
        expected = hd.grid_count * VECTOR_SIZE
        data = f.read(expected)
        if len(data) != expected:
            raise FormatError(
                f"Payload of {path} is truncated: expected {expected} bytes, "
                f"found {len(data)}."
            )

    vectors = np.frombuffer(data, dtype=order.vector_dtype).reshape(-1, 3)
    target[...] = vectors
    logger.debug("Read %d vectors from %s (%s endian)", len(target), path, order.name.lower())


def load_vectors(path: str | Path) -> np.ndarray:
    """Allocate a float32 array sized from the header and fill it."""
    hd = read_header(path)
    out = np.empty((hd.grid_count, 3), dtype=np.float32)
    read_vectors(path, out)
    return out
