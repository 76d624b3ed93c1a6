"""Command line entry point for monthly report exports.

Usage:
    pos-reports --data-root data --stores config/stores.json \\
        --store store_1 --month 2024-06 [--attendance] [--output-dir out]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from pos_reports.api import build_monthly_report, export_attendance, export_monthly_reports
from pos_reports.config import DataPaths
from pos_reports.exceptions import ReportError
from pos_reports.records.csv_loader import load_record_stores

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Build a store's monthly report and write it as CSV files."
    )
    p.add_argument("--data-root", type=Path, default=Path("data"), help="Data root directory")
    p.add_argument(
        "--stores",
        type=Path,
        default=Path("config/stores.json"),
        help="Store directory JSON file",
    )
    p.add_argument("--store", required=True, help="Store id")
    p.add_argument("--month", required=True, help="Target month, YYYY-MM or any YYYY-MM-DD in it")
    p.add_argument("--output-dir", type=Path, help="Output directory (default: <data-root>/exports)")
    p.add_argument("--attendance", action="store_true", help="Also write the attendance sheet")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return p


def _month_arg(value: str) -> str:
    # "2024-06" names the month; any full date names the month containing it.
    return f"{value}-01" if len(value) == 7 else value


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    paths = DataPaths.from_root(args.data_root, args.stores)
    month = _month_arg(args.month)

    try:
        stores = load_record_stores(paths)
        report = build_monthly_report(paths, args.store, month, stores=stores)
        written = list(export_monthly_reports(paths, report, args.output_dir).values())
        if args.attendance:
            written.append(
                export_attendance(paths, args.store, month, args.output_dir, stores=stores)
            )
    except (ReportError, ValueError) as e:
        logger.error("Error: %s", e, exc_info=args.verbose)
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    for w in report.warnings:
        print(f"WARNING [{w.code}] {w.message}: {w.value}", file=sys.stderr)
    for path in written:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
