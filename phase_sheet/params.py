from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(slots=True)
class ReaderParams:
    cells: int = 8  # default decomposition used for cell bounds
    export_precision: int = 6
    export_include_index: bool = True

    log_level: str = "WARNING"
    log_file: str = ""  # empty = console only

    benchmark_grid_width: int = 64
    benchmark_segment_width: int = 63
    benchmark_iterations: int = 10
    seed: int = 1

    def clamp(self) -> "ReaderParams":
        self.cells = max(1, int(self.cells))
        self.export_precision = max(0, min(12, int(self.export_precision)))
        self.export_include_index = bool(self.export_include_index)
        self.log_level = str(self.log_level or "WARNING").strip().upper()
        if self.log_level not in _LOG_LEVELS:
            self.log_level = "WARNING"
        self.log_file = str(self.log_file or "").strip()
        self.benchmark_grid_width = max(1, min(1024, int(self.benchmark_grid_width)))
        self.benchmark_segment_width = max(1, int(self.benchmark_segment_width))
        self.benchmark_iterations = max(1, int(self.benchmark_iterations))
        self.seed = int(self.seed)
        return self

    def validate(self) -> list[str]:
        warnings: list[str] = []

        if self.benchmark_segment_width > self.benchmark_grid_width:
            warnings.append("benchmark_segment_width exceeds benchmark_grid_width; sheets would be rejected.")
        if self.log_file and self.log_level in {"ERROR", "CRITICAL"}:
            warnings.append("log_file set but log_level hides most messages.")
        if self.export_precision < 6:
            warnings.append("export_precision below 6 digits loses float32 precision.")

        return warnings

    @classmethod
    def load(cls, path: str | Path) -> "ReaderParams":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Parameter file must contain a JSON object.")
        filtered: dict[str, Any] = {k: v for k, v in data.items() if k in cls.__annotations__}
        return cls(**filtered).clamp()

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(asdict(self), indent=2, ensure_ascii=False), encoding="utf-8")
