"""CSV rendering and file output for reports."""

from pos_reports.export.csv import (
    ATTENDANCE_COLUMNS,
    MONTHLY_DAILY_COLUMNS,
    MONTHLY_SUMMARY_COLUMNS,
    attendance_to_csv,
    monthly_daily_to_csv,
    monthly_summary_to_csv,
    write_csv,
)

__all__ = [
    "ATTENDANCE_COLUMNS",
    "MONTHLY_DAILY_COLUMNS",
    "MONTHLY_SUMMARY_COLUMNS",
    "attendance_to_csv",
    "monthly_daily_to_csv",
    "monthly_summary_to_csv",
    "write_csv",
]
