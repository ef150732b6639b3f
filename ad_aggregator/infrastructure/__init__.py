"""Infrastructure layer package."""

from .csv_source import iter_csv_records
from .excel_repository import write_workbook
from .report_exporter import ReportWriteError, StagedOutputs, write_report_csv, write_summary_json

__all__ = [
    "iter_csv_records",
    "write_workbook",
    "ReportWriteError",
    "StagedOutputs",
    "write_report_csv",
    "write_summary_json",
]
