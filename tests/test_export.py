"""
Tests for export utilities.
"""

import csv

import numpy as np
import pytest

from phase_sheet.core.buffer import SheetBuffer
from phase_sheet.io.header import Header, RawHeader
from phase_sheet.io.writer import write_sheet
from phase_sheet.params import ReaderParams
from phase_sheet.utils.export import export_header_summary, export_vectors_csv


def sample_header() -> Header:
    return Header(
        count_width=4,
        segment_width=2,
        grid_width=3,
        grid_count=27,
        idx=3,
        cells=2,
        mass=2.0,
        total_width=100.0,
        origin=(5.0, 5.0, 5.0),
        width=(12.0, 12.0, 12.0),
    )


def data_rows(path):
    with open(path, newline="") as f:
        rows = [r for r in csv.reader(f) if r and not r[0].startswith("#")]
    return rows[0], rows[1:]


class TestExportVectorsCsv:
    """Tests for export_vectors_csv."""

    def test_rows_and_stats(self, tmp_path):
        vectors = np.array([[1.0, 2.0, 3.0], [4.5, 5.5, 6.5]], dtype=np.float32)
        stats = export_vectors_csv(vectors, tmp_path / "out" / "v.csv")

        assert stats.vector_count == 2
        assert stats.file_path.exists()
        columns, rows = data_rows(stats.file_path)
        assert columns == ["index", "x", "y", "z"]
        assert rows[1] == ["1", "4.500000", "5.500000", "6.500000"]

    def test_without_index_and_precision(self, tmp_path):
        vectors = np.array([[1.0, 2.0, 3.0]], dtype=np.float32)
        stats = export_vectors_csv(vectors, tmp_path / "v.csv", include_index=False, precision=2)
        columns, rows = data_rows(stats.file_path)
        assert columns == ["x", "y", "z"]
        assert rows == [["1.00", "2.00", "3.00"]]

    def test_defaults_from_params(self, tmp_path):
        vectors = np.array([[1.0, 2.0, 3.0]], dtype=np.float32)
        params = ReaderParams(export_precision=3, export_include_index=False).clamp()
        stats = export_vectors_csv(vectors, tmp_path / "v.csv", params=params)
        columns, rows = data_rows(stats.file_path)
        assert columns == ["x", "y", "z"]
        assert rows == [["1.000", "2.000", "3.000"]]

    def test_explicit_arguments_override_params(self, tmp_path):
        vectors = np.array([[1.0, 2.0, 3.0]], dtype=np.float32)
        params = ReaderParams(export_precision=3, export_include_index=False).clamp()
        stats = export_vectors_csv(vectors, tmp_path / "v.csv", params=params, precision=1, include_index=True)
        columns, rows = data_rows(stats.file_path)
        assert columns == ["index", "x", "y", "z"]
        assert rows == [["0", "1.0", "2.0", "3.0"]]

    def test_header_comment(self, tmp_path):
        vectors = np.zeros((1, 3), dtype=np.float32)
        stats = export_vectors_csv(vectors, tmp_path / "v.csv", header=sample_header())
        text = stats.file_path.read_text()
        assert "# Sheet 3: grid_width=3 segment_width=2" in text

    def test_bad_shape(self, tmp_path):
        with pytest.raises(ValueError):
            export_vectors_csv(np.zeros((2, 2)), tmp_path / "v.csv")

    def test_from_buffer(self, tmp_path):
        n = 27
        vectors = np.arange(n * 3, dtype=np.float32).reshape(n, 3)
        raw = RawHeader(count_width=3, segment_width=2, grid_width=3, grid_count=n)
        path = write_sheet(tmp_path / "s.dat", raw, vectors)
        buf = SheetBuffer(path)
        with buf.reading(path) as xs:
            stats = export_vectors_csv(xs, tmp_path / "seg.csv", header=buf.header, params=buf.params)
        assert stats.vector_count == 8


class TestExportHeaderSummary:
    """Tests for export_header_summary."""

    def test_fields(self, tmp_path):
        path = export_header_summary(sample_header(), tmp_path / "summary.txt")
        text = path.read_text()
        assert "Index: 3" in text
        assert "Count: 64" in text
        assert "Segment count: 8" in text
        assert "Cell Bounds" not in text

    def test_cell_bounds_section(self, tmp_path):
        path = export_header_summary(sample_header(), tmp_path / "summary.txt", cells=10)
        text = path.read_text()
        assert "Cell Bounds (10 cells):" in text
        assert "Width: 2, 2, 2" in text
