"""Infrastructure adapter for report export targets."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, List, Tuple

import polars as pl


class ReportWriteError(OSError):
    """An output artifact could not be written."""


def write_report_csv(path: Path, frame: pl.DataFrame) -> None:
    # Null cells (undefined CPA) are written as empty fields.
    with path.open("wb") as handle:
        frame.write_csv(handle, include_header=True, null_value="")


def write_summary_json(path: Path, summary: dict[str, Any]) -> None:
    path.write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")


class StagedOutputs:
    """Collects artifacts in temporary siblings and moves them into place together.

    Nothing at a destination path changes until commit(); a failure while
    staging leaves every previous artifact untouched.
    """

    def __init__(self) -> None:
        self._staged: List[Tuple[Path, Path]] = []

    @staticmethod
    def _temp_path(path: Path) -> Path:
        return path.with_name(f".{path.name}.tmp")

    def stage(self, path: Path, writer: Callable[[Path], None]) -> None:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ReportWriteError(f"create output dir {path.parent}: {exc}") from exc

        temp_path = self._temp_path(path)
        try:
            writer(temp_path)
        except OSError as exc:
            self._discard(temp_path)
            raise ReportWriteError(f"write {path}: {exc}") from exc
        except Exception:
            self._discard(temp_path)
            raise
        self._staged.append((temp_path, path))

    def commit(self) -> List[Path]:
        written: List[Path] = []
        try:
            for temp_path, path in self._staged:
                try:
                    os.replace(temp_path, path)
                except OSError as exc:
                    raise ReportWriteError(f"replace {path}: {exc}") from exc
                written.append(path)
        finally:
            self.discard()
        return written

    def discard(self) -> None:
        for temp_path, _ in self._staged:
            self._discard(temp_path)
        self._staged = []

    @staticmethod
    def _discard(temp_path: Path) -> None:
        if temp_path.exists():
            temp_path.unlink()
