"""Run configuration for the aggregation pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

BadRowPolicy = Literal["fail", "skip"]
BAD_ROW_POLICIES: tuple[str, ...] = ("fail", "skip")
FALLBACK_TOP_K = 10


def _default_top_k() -> int:
    raw = os.getenv("ADAGG_DEFAULT_TOP_K", str(FALLBACK_TOP_K))
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid ADAGG_DEFAULT_TOP_K: {raw}") from exc
    if value <= 0:
        raise ValueError(f"ADAGG_DEFAULT_TOP_K must be a positive integer, got {value}")
    return value


DEFAULT_TOP_K = _default_top_k()


def resolve_top_k(value: int | None) -> int:
    """Non-positive or missing K falls back to the default."""
    if value is None or value <= 0:
        return DEFAULT_TOP_K
    return value


@dataclass(frozen=True)
class RunConfig:
    input_path: Path
    output_dir: Path
    top_k: int = DEFAULT_TOP_K
    benchmark: bool = False
    on_bad_row: BadRowPolicy = "fail"
    delimiter: str = ","
    excel_path: Path | None = None
    summary_json_path: Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_path", Path(self.input_path))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(self, "top_k", resolve_top_k(self.top_k))
        if self.on_bad_row not in BAD_ROW_POLICIES:
            raise ValueError(f"on_bad_row must be one of {list(BAD_ROW_POLICIES)}, got {self.on_bad_row!r}")
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if self.excel_path is not None:
            object.__setattr__(self, "excel_path", Path(self.excel_path))
        if self.summary_json_path is not None:
            object.__setattr__(self, "summary_json_path", Path(self.summary_json_path))

    @property
    def ctr_report_path(self) -> Path:
        return self.output_dir / f"top{self.top_k}_ctr.csv"

    @property
    def cpa_report_path(self) -> Path:
        return self.output_dir / f"top{self.top_k}_cpa.csv"
