"""Example: Monthly report for one store

This example demonstrates how to build a store's monthly report from the
record CSV files of a data directory and export it:
1. Load record stores from data/records/*.csv
2. Compute the monthly report (KPIs, breakdowns, warnings, daily series)
3. Write the monthly summary, daily series and attendance CSVs

Prerequisites:
- Create config/stores.json with store and employee names
- Put record CSV files under data/records/ (missing files count as empty)
"""

from pathlib import Path

from pos_reports import DataPaths
from pos_reports.api import build_monthly_report, export_attendance, export_monthly_reports
from pos_reports.records import load_record_stores

data_root = Path("data")
stores_json = Path("config/stores.json")

paths = DataPaths.from_root(data_root, stores_json)

store_id = "store_1"  # MODIFY AS NEEDED
month = "2024-06-01"  # any day of the target month

stores = load_record_stores(paths)
report = build_monthly_report(paths, store_id, month, stores=stores)
kpi = report.kpi


def fmt_ratio(value):
    # Absent ratios mean "no data", not zero
    return "-" if value is None else f"{value:.1%}"


print(f"Monthly report: {report.store_name} ({report.year_month})")
print(f"  Sales (incl. tax):   {kpi.sales_total_incl_tax:>12,}")
print(f"  Receipts / guests:   {kpi.receipt_count:>6} / {kpi.guest_count}")
print(f"  COGS:                {kpi.cogs_total:>12,}  ({fmt_ratio(kpi.cogs_ratio)})")
print(f"  Gross margin:        {kpi.gross_profit:>12,}  ({fmt_ratio(kpi.gross_margin_ratio)})")
print(f"  Expenses:            {kpi.expenses_total:>12,}")
print(f"  Closing difference:  {kpi.closing_difference_total:>12,}  ({kpi.closing_issue_days} issue days)")

print("\nPayments by method:")
for item in report.breakdowns.payments_by_method:
    print(f"  {item.key:<8} {item.amount:>12,}")

print("\nTop vendors:")
for item in report.breakdowns.expenses_by_vendor:
    print(f"  {item.key:<24} {item.amount:>12,}")

for w in report.warnings:
    print(f"\nWARNING [{w.code}] {w.message}: {w.value:,}")

written = export_monthly_reports(paths, report)
written["attendance"] = export_attendance(paths, store_id, month, stores=stores)

print("\nFiles written:")
for kind, path in written.items():
    print(f"  - {kind}: {path}")
