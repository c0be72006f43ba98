#!/usr/bin/env python3
"""
Read benchmark for phase sheet buffers.

Writes a synthetic sheet to a temporary directory and times repeated
SheetBuffer read/close cycles on it:
- header decode
- payload read
- corner segment extraction

Usage:
    python -m phase_sheet.utils.benchmark [--grid-width 64] [--iterations 10]
"""

from __future__ import annotations

import argparse
import sys
import tempfile
import time
from pathlib import Path

import numpy as np

from phase_sheet.core.buffer import SheetBuffer
from phase_sheet.io.header import ByteOrder, RawHeader
from phase_sheet.io.writer import write_sheet
from phase_sheet.logging_config import setup_logging
from phase_sheet.params import ReaderParams


def generate_sheet(
    path: Path,
    grid_width: int,
    segment_width: int,
    order: ByteOrder = ByteOrder.LITTLE,
    seed: int = 42,
) -> Path:
    """Write a sheet with random positions in a 100-unit box."""
    rng = np.random.default_rng(seed)
    n = grid_width ** 3
    vectors = rng.uniform(0.0, 100.0, size=(n, 3)).astype(np.float32)
    raw = RawHeader(
        count=n,
        count_width=grid_width,
        segment_width=segment_width,
        grid_width=grid_width,
        grid_count=n,
        cells=1,
        mass=1.0,
        total_width=100.0,
        width=(100.0, 100.0, 100.0),
    )
    return write_sheet(path, raw, vectors, order)


def benchmark_read(path: Path, iterations: int = 10) -> tuple[float, float]:
    """Benchmark SheetBuffer read/close cycles. Returns (mean, std) in ms."""
    buf = SheetBuffer(path)

    times = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        buf.read(path)
        buf.close()
        times.append(time.perf_counter() - t0)

    mean_ms = (sum(times) / len(times)) * 1000
    std_ms = (sum((t - mean_ms/1000)**2 for t in times) / len(times))**0.5 * 1000
    return mean_ms, std_ms


def run_benchmark(grid_width: int, segment_width: int, iterations: int, order: ByteOrder, seed: int = 42) -> dict:
    """Run the benchmark for one sheet size."""
    print(f"\n{'='*60}")
    print(f"Benchmark: gw={grid_width} sw={segment_width}, {iterations} iterations, {order.name.lower()} endian")
    print(f"{'='*60}")

    results = {}
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "sheet.dat"

        print("Writing sheet...", end=" ", flush=True)
        generate_sheet(path, grid_width, segment_width, order, seed=seed)
        size_mb = path.stat().st_size / 1e6
        print(f"done ({size_mb:.1f} MB)")

        print("SheetBuffer read...", end=" ", flush=True)
        mean_ms, std_ms = benchmark_read(path, iterations)
        print(f"{mean_ms:.2f} ± {std_ms:.2f} ms")
        results["read_ms"] = mean_ms
        results["mb_per_s"] = size_mb / (mean_ms / 1000) if mean_ms > 0 else float("inf")

    print(f"\n{'='*60}")
    print("Summary:")
    print(f"  Read: {results['read_ms']:.2f} ms ({results['mb_per_s']:.0f} MB/s)")

    return results


def resolve_settings(args: argparse.Namespace, params: ReaderParams, from_file: bool) -> tuple[int, int, int]:
    """
    Pick grid width, segment width and iterations.

    Explicit command line flags win over the parameter file, which wins over
    the built-in defaults.
    """
    grid_width = args.grid_width if args.grid_width is not None else params.benchmark_grid_width
    iterations = args.iterations if args.iterations is not None else params.benchmark_iterations
    if args.segment_width is not None:
        segment_width = args.segment_width
    elif from_file:
        segment_width = params.benchmark_segment_width
    else:
        segment_width = max(1, grid_width - 1)
    return grid_width, min(segment_width, grid_width), iterations


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Benchmark phase sheet reads")
    parser.add_argument("--grid-width", "-g", type=int, default=None, help="Stored grid width")
    parser.add_argument("--segment-width", "-s", type=int, default=None, help="Segment width (default: grid width - 1)")
    parser.add_argument("--iterations", "-i", type=int, default=None, help="Benchmark iterations")
    parser.add_argument("--big-endian", action="store_true", help="Write the sheet big endian")
    parser.add_argument("--params", type=Path, default=None, help="JSON parameter file")
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)

    params = ReaderParams.load(args.params) if args.params else ReaderParams()
    setup_logging(params.log_level, params.log_file or None)
    grid_width, segment_width, iterations = resolve_settings(args, params, args.params is not None)

    print("Phase Sheet Read Benchmark")
    print(f"Platform: {sys.platform}")
    print(f"NumPy: {np.__version__}")

    order = ByteOrder.BIG if args.big_endian else ByteOrder.LITTLE
    return run_benchmark(grid_width, segment_width, iterations, order, seed=params.seed)


if __name__ == "__main__":
    main()
