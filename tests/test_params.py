import json
import tempfile
import unittest
from pathlib import Path

from phase_sheet.params import ReaderParams


class TestParams(unittest.TestCase):
    def test_clamp_basic_bounds(self) -> None:
        params = ReaderParams(
            cells=0,
            export_precision=50,
            log_level="loud",
            benchmark_grid_width=5000,
            benchmark_segment_width=-3,
            benchmark_iterations=0,
        ).clamp()

        self.assertEqual(params.cells, 1)
        self.assertEqual(params.export_precision, 12)
        self.assertEqual(params.log_level, "WARNING")
        self.assertEqual(params.benchmark_grid_width, 1024)
        self.assertEqual(params.benchmark_segment_width, 1)
        self.assertEqual(params.benchmark_iterations, 1)

    def test_log_level_normalized(self) -> None:
        params = ReaderParams(log_level=" debug ").clamp()
        self.assertEqual(params.log_level, "DEBUG")

    def test_validate_warnings(self) -> None:
        params = ReaderParams(
            benchmark_grid_width=8,
            benchmark_segment_width=9,
            log_file="out.log",
            log_level="ERROR",
            export_precision=3,
        ).clamp()

        warnings = params.validate()
        self.assertTrue(any("exceeds benchmark_grid_width" in w for w in warnings))
        self.assertTrue(any("log_file" in w for w in warnings))
        self.assertTrue(any("precision" in w for w in warnings))

    def test_defaults_have_no_warnings(self) -> None:
        self.assertEqual(ReaderParams().clamp().validate(), [])

    def test_save_load_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "params.json"
            ReaderParams(cells=16, log_level="INFO").save(path)
            loaded = ReaderParams.load(path)
        self.assertEqual(loaded.cells, 16)
        self.assertEqual(loaded.log_level, "INFO")

    def test_load_ignores_unknown_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "params.json"
            path.write_text(json.dumps({"cells": 4, "bogus": 1}), encoding="utf-8")
            loaded = ReaderParams.load(path)
        self.assertEqual(loaded.cells, 4)

    def test_load_rejects_non_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "params.json"
            path.write_text("[1, 2]", encoding="utf-8")
            with self.assertRaises(ValueError):
                ReaderParams.load(path)
