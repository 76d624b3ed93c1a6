"""POS Reports - store operations reporting engine.

This package turns the operational records of a single store (receipts,
payment splits, expenses, cash movements, drawer closings and time records)
into daily and monthly financial reports, and renders them as CSV.

Module Structure:
    pos_reports.records: Record models, store interfaces and CSV loaders
    pos_reports.records.settings: Per-store COGS category settings
    pos_reports.analytics: Daily and monthly aggregators
    pos_reports.export: CSV rendering and file output
    pos_reports.stores: Store and employee display names
    pos_reports.config: DataPaths configuration

Quick Start:
    >>> from pos_reports import DataPaths
    >>> from pos_reports.api import build_monthly_report, export_monthly_reports
    >>>
    >>> paths = DataPaths.from_root("data", "config/stores.json")
    >>> report = build_monthly_report(paths, "store_1", "2024-06-01")
    >>> print(report.kpi.sales_total_incl_tax, report.kpi.cogs_ratio)
    >>> export_monthly_reports(paths, report)

Grain Reference:
    - DailyRow: store x calendar day
    - MonthlyReport: store x calendar month
"""

__version__ = "0.1.0"

from pos_reports.config import DataPaths
from pos_reports.exceptions import (
    ConfigError,
    DataQualityError,
    ExportError,
    InvalidMonthError,
    InvalidRangeError,
    ReportError,
)

__all__ = [
    "ConfigError",
    "DataPaths",
    "DataQualityError",
    "ExportError",
    "InvalidMonthError",
    "InvalidRangeError",
    "ReportError",
    "__version__",
]
