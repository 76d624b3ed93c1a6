"""File-based entry points: load records from a data directory, build reports
and write their CSV exports.

These functions wire DataPaths, the record CSV loaders, the category settings
file and the store directory together. The aggregators themselves never touch
the filesystem.

Example:
    >>> from pos_reports import DataPaths
    >>> from pos_reports.api import build_monthly_report, export_monthly_reports
    >>>
    >>> paths = DataPaths.from_root("data", "config/stores.json")
    >>> report = build_monthly_report(paths, "store_1", "2024-06-01")
    >>> written = export_monthly_reports(paths, report)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pos_reports.analytics.monthly import MonthlyAggregator, MonthlyReport
from pos_reports.config import DataPaths
from pos_reports.export.csv import (
    attendance_to_csv,
    monthly_daily_to_csv,
    monthly_summary_to_csv,
    write_csv,
)
from pos_reports.records.csv_loader import RecordStores, load_record_stores
from pos_reports.records.settings import CategorySettingsStore
from pos_reports.stores import StoreDirectory
from pos_reports.utils import DayLike, year_month_key

logger = logging.getLogger(__name__)


def _directory(paths: DataPaths) -> StoreDirectory:
    if not paths.stores_json.exists():
        logger.info("No store directory at %s, using store ids as names", paths.stores_json)
        return StoreDirectory()
    return StoreDirectory.from_paths(paths)


def build_monthly_report(
    paths: DataPaths,
    store_id: str,
    month: DayLike,
    stores: Optional[RecordStores] = None,
) -> MonthlyReport:
    """Load records under ``paths`` and compute one store's monthly report.

    Args:
        paths: DataPaths configuration.
        store_id: Store to report on.
        month: Any day of the target month.
        stores: Already-loaded record stores; loaded from ``paths`` when None.

    Returns:
        MonthlyReport for the store and month.

    Raises:
        DataQualityError: If a record file cannot be parsed.
        ConfigError: If the store directory or settings file is invalid.
        InvalidMonthError: If the month boundaries cannot be resolved.
    """
    if stores is None:
        stores = load_record_stores(paths)

    aggregator = MonthlyAggregator.from_record_stores(
        stores,
        CategorySettingsStore(paths.category_settings_json),
        directory=_directory(paths),
    )
    return aggregator.compute_month(store_id, month)


def export_monthly_reports(
    paths: DataPaths,
    report: MonthlyReport,
    output_dir: Optional[Path] = None,
) -> dict[str, Path]:
    """Write the monthly summary and daily series CSVs of a report.

    Files are named ``monthly_summary_<store>_<YYYY-MM>.csv`` and
    ``monthly_daily_<store>_<YYYY-MM>.csv``.

    Args:
        paths: DataPaths configuration.
        report: Computed monthly report.
        output_dir: Target directory; ``paths.exports_dir`` when None.

    Returns:
        Mapping of report kind ("summary", "daily") to the file written.

    Raises:
        ExportError: If a file cannot be written.
    """
    out = output_dir or paths.exports_dir
    suffix = f"{report.store_id}_{report.year_month}.csv"

    return {
        "summary": write_csv(monthly_summary_to_csv(report), out / f"monthly_summary_{suffix}"),
        "daily": write_csv(
            monthly_daily_to_csv(report.daily, report.store_name),
            out / f"monthly_daily_{suffix}",
        ),
    }


def export_attendance(
    paths: DataPaths,
    store_id: str,
    month: DayLike,
    output_dir: Optional[Path] = None,
    stores: Optional[RecordStores] = None,
) -> Path:
    """Write the attendance sheet of one store and month.

    The file is named ``attendance_<store>_<YYYY-MM>.csv``.

    Raises:
        ExportError: If the file cannot be written.
        InvalidMonthError: If the month boundaries cannot be resolved.
    """
    if stores is None:
        stores = load_record_stores(paths)

    records = [r for r in stores.time_records.load_all_time_records() if r.store_id == store_id]
    names = _directory(paths).employee_names(store_id)

    text = attendance_to_csv(records, month, names)
    out = output_dir or paths.exports_dir
    return write_csv(text, out / f"attendance_{store_id}_{year_month_key(month)}.csv")
