"""
Writer for phase sheet files.

Produces the same layout that header.py and payload.py read. Mostly used to
build synthetic sheets for tests and benchmarks.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

import numpy as np

from phase_sheet.io.header import RAW_HEADER_SIZE, ByteOrder, RawHeader

logger = logging.getLogger(__name__)


def encode_sheet(
    raw: RawHeader,
    vectors: np.ndarray,
    order: ByteOrder = ByteOrder.LITTLE,
    *,
    header_size: int | None = None,
) -> bytes:
    """
    Encode a header and its payload.

    Args:
        raw: Header to store. Its grid_count must match ``len(vectors)``.
        vectors: Array of shape (grid_count, 3).
        order: Byte order for every field after the flag.
        header_size: Value written to the size word. Defaults to
            RAW_HEADER_SIZE; other values produce files readers must reject.
    """
    vectors = np.asarray(vectors)
    if vectors.ndim != 2 or vectors.shape[1] != 3:
        raise ValueError(f"vectors must have shape (N, 3), got {vectors.shape}")
    if len(vectors) != raw.grid_count:
        raise ValueError(
            f"header grid_count is {raw.grid_count} but {len(vectors)} vectors were given"
        )
    if header_size is None:
        header_size = RAW_HEADER_SIZE

    prefix = struct.pack(order.prefix + "ii", order.flag, header_size)
    payload = np.ascontiguousarray(vectors, dtype=order.vector_dtype).tobytes()
    return prefix + raw.pack(order) + payload


def write_sheet(
    path: str | Path,
    raw: RawHeader,
    vectors: np.ndarray,
    order: ByteOrder = ByteOrder.LITTLE,
    *,
    header_size: int | None = None,
) -> Path:
    """Encode a sheet and write it to ``path``. Returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = encode_sheet(raw, vectors, order, header_size=header_size)
    path.write_bytes(data)
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path
