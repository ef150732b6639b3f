"""Report rendering helpers."""

from .frames import REPORT_COLUMNS, build_report_frame, build_values_frame

__all__ = ["REPORT_COLUMNS", "build_report_frame", "build_values_frame"]
