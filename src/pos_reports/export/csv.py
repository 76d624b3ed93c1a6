"""CSV rendering of monthly reports and attendance records.

Rendering is a pure formatting layer over already-computed values: no
aggregation happens here. Every table has a fixed column order and a single
header row. Quoting is standard minimal CSV quoting applied uniformly: a
field holding the delimiter, a quote or a line break is wrapped in quotes
with internal quotes doubled. Rows end in CRLF.

Example:
    >>> from pos_reports.export import monthly_summary_to_csv, write_csv
    >>> text = monthly_summary_to_csv(report)
    >>> write_csv(text, paths.exports_dir / "monthly_summary_store_1_2024-06.csv")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd

from pos_reports.analytics.daily import DailyRow
from pos_reports.analytics.monthly import MonthlyReport, breakdown_amount
from pos_reports.exceptions import ExportError
from pos_reports.records.models import CashTransactionCategory, ExpenseCategory, TimeRecord
from pos_reports.utils import DayLike, month_range, to_day

logger = logging.getLogger(__name__)

MONTHLY_SUMMARY_COLUMNS = [
    "year_month",
    "store_id",
    "store_name",
    "sales_total_incl_tax",
    "sales_cash_incl_tax",
    "sales_card_incl_tax",
    "sales_qr_incl_tax",
    "sales_other_incl_tax",
    "sales_subtotal_excl_tax",
    "sales_tax_total",
    "expenses_total",
    "expenses_food",
    "expenses_drink",
    "expenses_consumable",
    "expenses_utility",
    "expenses_misc",
    "cash_in_total",
    "cash_out_total",
    "cash_out_purchase_total",
    "cash_out_reimburse_total",
    "cash_out_deposit_to_bank_total",
    "closing_difference_total",
    "closing_issue_days",
]

MONTHLY_DAILY_COLUMNS = [
    "date",
    "store_id",
    "store_name",
    "sales_total_incl_tax",
    "sales_subtotal_excl_tax",
    "sales_tax_total",
    "sales_cash_incl_tax",
    "sales_card_incl_tax",
    "sales_qr_incl_tax",
    "sales_other_incl_tax",
    "expenses_total",
    "cash_in_total",
    "cash_out_total",
    "expected_cash_balance",
    "actual_cash_balance",
    "difference",
    "issue_flag",
]

ATTENDANCE_COLUMNS = [
    "employeeId",
    "employeeName",
    "date",
    "clockIn",
    "clockOut",
    "breakMinutes",
    "workedMinutes",
    "workedHours",
    "status",
]

# Closing columns stay empty on days without a settled closing.
NULLABLE_DAILY_COLUMNS = ["expected_cash_balance", "actual_cash_balance", "difference"]


# Rows end in CRLF. The csv writer only quotes fields holding characters of
# the row terminator, so both \r and \n must be in it.
LINE_TERMINATOR = "\r\n"


def _render(df: pd.DataFrame) -> str:
    return df.to_csv(index=False, lineterminator=LINE_TERMINATOR)


def monthly_summary_to_csv(report: MonthlyReport) -> str:
    """Render a monthly report as a one-row summary table.

    Args:
        report: Computed monthly report.

    Returns:
        CSV text: header plus one row, newline-terminated.
    """
    kpi = report.kpi
    by_category = report.breakdowns.expenses_by_category
    cash_out = report.breakdowns.cash_out_by_category

    row = {
        "year_month": report.year_month,
        "store_id": report.store_id,
        "store_name": report.store_name,
        "sales_total_incl_tax": kpi.sales_total_incl_tax,
        "sales_cash_incl_tax": kpi.pay_cash,
        "sales_card_incl_tax": kpi.pay_card,
        "sales_qr_incl_tax": kpi.pay_qr,
        "sales_other_incl_tax": kpi.pay_other,
        "sales_subtotal_excl_tax": kpi.sales_subtotal_excl_tax,
        "sales_tax_total": kpi.sales_tax_total,
        "expenses_total": kpi.expenses_total,
        "expenses_food": breakdown_amount(by_category, ExpenseCategory.FOOD.value),
        "expenses_drink": breakdown_amount(by_category, ExpenseCategory.DRINK.value),
        "expenses_consumable": breakdown_amount(by_category, ExpenseCategory.CONSUMABLE.value),
        "expenses_utility": breakdown_amount(by_category, ExpenseCategory.UTILITY.value),
        "expenses_misc": breakdown_amount(by_category, ExpenseCategory.MISC.value),
        "cash_in_total": kpi.cash_in_total,
        "cash_out_total": kpi.cash_out_total,
        "cash_out_purchase_total": breakdown_amount(
            cash_out, CashTransactionCategory.PURCHASE.value
        ),
        "cash_out_reimburse_total": breakdown_amount(
            cash_out, CashTransactionCategory.EXPENSE_REIMBURSE.value
        ),
        "cash_out_deposit_to_bank_total": kpi.deposit_to_bank_total,
        "closing_difference_total": kpi.closing_difference_total,
        "closing_issue_days": kpi.closing_issue_days,
    }
    return _render(pd.DataFrame([row], columns=MONTHLY_SUMMARY_COLUMNS))


def _issue_flag(value: Optional[bool]) -> str:
    if value is None:
        return ""
    return "true" if value else "false"


def monthly_daily_to_csv(rows: Sequence[DailyRow], store_name: str) -> str:
    """Render a daily series as one row per day.

    Args:
        rows: Daily rows, usually the ``daily`` field of a MonthlyReport.
        store_name: Display name written on every row.

    Returns:
        CSV text: header plus one row per day, in the order given.
    """
    records = [
        {
            "date": r.date_key,
            "store_id": r.store_id,
            "store_name": store_name,
            "sales_total_incl_tax": r.sales_total_incl_tax,
            "sales_subtotal_excl_tax": r.sales_subtotal_excl_tax,
            "sales_tax_total": r.sales_tax_total,
            "sales_cash_incl_tax": r.sales_cash_incl_tax,
            "sales_card_incl_tax": r.sales_card_incl_tax,
            "sales_qr_incl_tax": r.sales_qr_incl_tax,
            "sales_other_incl_tax": r.sales_other_incl_tax,
            "expenses_total": r.expenses_total,
            "cash_in_total": r.cash_in_total,
            "cash_out_total": r.cash_out_total,
            "expected_cash_balance": r.expected_cash_balance,
            "actual_cash_balance": r.actual_cash_balance,
            "difference": r.closing_difference,
            "issue_flag": _issue_flag(r.closing_issue_flag),
        }
        for r in rows
    ]
    df = pd.DataFrame(records, columns=MONTHLY_DAILY_COLUMNS)
    for col in NULLABLE_DAILY_COLUMNS:
        df[col] = df[col].astype("Int64")
    return _render(df)


def _clock(value) -> str:
    return value.strftime("%H:%M") if value is not None else ""


def attendance_to_csv(
    records: Iterable[TimeRecord],
    month: DayLike,
    employee_names: Mapping[int, str],
) -> str:
    """Render the time records of one month as an attendance sheet.

    Records outside the month are skipped. Rows are sorted by date, then by
    employee name. Worked minutes only count closed periods.

    Args:
        records: Time records, any status.
        month: Any day of the target month.
        employee_names: Employee id to display name; unknown ids are written
            as ``employee<id>``.

    Returns:
        CSV text: header plus one row per time record.

    Raises:
        InvalidMonthError: If the month boundaries cannot be resolved.
    """
    start, end = month_range(month)

    def name(employee_id: int) -> str:
        return employee_names.get(employee_id, f"employee{employee_id}")

    in_month = [r for r in records if start <= to_day(r.date) <= end]
    in_month.sort(key=lambda r: (to_day(r.date), name(r.employee_id)))

    rows = []
    for r in in_month:
        worked = r.worked_minutes()
        rows.append(
            {
                "employeeId": r.employee_id,
                "employeeName": name(r.employee_id),
                "date": to_day(r.date).isoformat(),
                "clockIn": _clock(r.clock_in_at),
                "clockOut": _clock(r.clock_out_at),
                "breakMinutes": r.break_minutes,
                "workedMinutes": worked,
                "workedHours": f"{worked / 60:.2f}",
                "status": r.status.value,
            }
        )
    return _render(pd.DataFrame(rows, columns=ATTENDANCE_COLUMNS))


def write_csv(text: str, path: Path) -> Path:
    """Write rendered CSV text to ``path`` as UTF-8, creating parent directories.

    Line endings are written as given, never translated.

    Args:
        text: CSV text to write.
        path: Destination file.

    Returns:
        The path written.

    Raises:
        ExportError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        logger.error("Error writing %s: %s", path, e)
        raise ExportError(f"Cannot write {path}: {e}") from e

    logger.info("Wrote %s", path)
    return path
