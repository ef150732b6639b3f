"""Infrastructure adapter for Excel workbook output."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict

import polars as pl
from openpyxl import Workbook

EXCEL_SHEET_NAME_LIMIT = 31


def _excel_cell_value(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def write_workbook(path: Path, sheets: Dict[str, pl.DataFrame]) -> None:
    """Write one worksheet per frame; null cells stay blank."""
    workbook = Workbook()
    default_sheet = workbook.active
    workbook.remove(default_sheet)

    for sheet_name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=str(sheet_name)[:EXCEL_SHEET_NAME_LIMIT])
        worksheet.append(frame.columns)
        for row in frame.iter_rows(named=False):
            worksheet.append([_excel_cell_value(value) for value in row])

    workbook.save(path)
