"""
Export utilities for phase sheet data.

This module provides functions to export sheet contents to text formats:
- CSV: One row per vector of an extracted segment
- Summary: Header fields and cell bounds

Usage:
    >>> from phase_sheet.utils.export import export_vectors_csv
    >>> buf = SheetBuffer("sheet000.dat")
    >>> with buf.reading("sheet000.dat") as xs:
    ...     export_vectors_csv(xs, "segment.csv", header=buf.header)
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from phase_sheet.core.bounds import cell_bounds
from phase_sheet.params import ReaderParams

if TYPE_CHECKING:
    from phase_sheet.io.header import Header

logger = logging.getLogger(__name__)


@dataclass
class ExportStats:
    """Statistics from an export operation."""
    file_path: Path
    vector_count: int
    timestamp: str


def export_vectors_csv(
    vectors: np.ndarray,
    output_path: str | Path,
    *,
    header: "Header | None" = None,
    precision: int | None = None,
    include_index: bool | None = None,
    params: ReaderParams | None = None,
) -> ExportStats:
    """
    Export an (N, 3) vector array to a CSV file.

    Args:
        vectors: Array of (x, y, z) vectors, e.g. the result of SheetBuffer.read
        output_path: Path to output CSV file
        header: Optional sheet header, recorded in the comment lines
        precision: Digits after the decimal point (default: params.export_precision)
        include_index: Prefix each row with its linear index
            (default: params.export_include_index)
        params: Reader settings supplying the defaults above

    Returns:
        ExportStats with export details

    Example:
        >>> stats = export_vectors_csv(xs, "segment.csv")
        >>> print(f"Exported {stats.vector_count} vectors")
    """
    vectors = np.asarray(vectors)
    if vectors.ndim != 2 or vectors.shape[1] != 3:
        raise ValueError(f"vectors must have shape (N, 3), got {vectors.shape}")

    if params is None:
        params = ReaderParams()
    if precision is None:
        precision = params.export_precision
    if include_index is None:
        include_index = params.export_include_index

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    columns = ["x", "y", "z"]
    if include_index:
        columns.insert(0, "index")

    timestamp = datetime.now().isoformat()
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)

        writer.writerow([f"# Phase sheet export - {timestamp}"])
        writer.writerow([f"# Vectors: {len(vectors)}"])
        if header is not None:
            writer.writerow([
                f"# Sheet {header.idx}: grid_width={header.grid_width} "
                f"segment_width={header.segment_width}"
            ])
        writer.writerow(columns)

        for i, (x, y, z) in enumerate(vectors):
            row: list = [i] if include_index else []
            row.extend([
                f"{x:.{precision}f}",
                f"{y:.{precision}f}",
                f"{z:.{precision}f}",
            ])
            writer.writerow(row)

    logger.info("Exported %d vectors to %s", len(vectors), output_path)
    return ExportStats(
        file_path=output_path,
        vector_count=len(vectors),
        timestamp=timestamp,
    )


def export_header_summary(
    header: "Header",
    output_path: str | Path,
    *,
    cells: int | None = None,
) -> Path:
    """
    Export header fields to a text file.

    Args:
        header: Decoded sheet header
        output_path: Path to output file
        cells: If given, also write the cell bounds at this resolution

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    def vec(v) -> str:
        return ", ".join(f"{c:.4f}" for c in v)

    with open(output_path, "w") as f:
        f.write(f"Phase Sheet Summary\n")
        f.write(f"Generated: {datetime.now().isoformat()}\n")
        f.write(f"\n")
        f.write(f"Sheet:\n")
        f.write(f"  Index: {header.idx}\n")
        f.write(f"  Cells: {header.cells}\n")
        f.write(f"\n")
        f.write(f"Particles:\n")
        f.write(f"  Count: {header.count}\n")
        f.write(f"  Count width: {header.count_width}\n")
        f.write(f"  Mass: {header.mass:.6g}\n")
        f.write(f"\n")
        f.write(f"Grid:\n")
        f.write(f"  Grid width: {header.grid_width}\n")
        f.write(f"  Grid count: {header.grid_count}\n")
        f.write(f"  Segment width: {header.segment_width}\n")
        f.write(f"  Segment count: {header.n}\n")
        f.write(f"\n")
        f.write(f"Bounds:\n")
        f.write(f"  Total width: {header.total_width:.4f}\n")
        f.write(f"  Origin: {vec(header.origin)}\n")
        f.write(f"  Width: {vec(header.width)}\n")
        f.write(f"  Velocity origin: {vec(header.velocity_origin)}\n")
        f.write(f"  Velocity width: {vec(header.velocity_width)}\n")
        if cells is not None:
            cb = cell_bounds(header, cells)
            f.write(f"\n")
            f.write(f"Cell Bounds ({cells} cells):\n")
            f.write(f"  Origin: {cb.origin[0]}, {cb.origin[1]}, {cb.origin[2]}\n")
            f.write(f"  Width: {cb.width[0]}, {cb.width[1]}, {cb.width[2]}\n")

    return output_path
