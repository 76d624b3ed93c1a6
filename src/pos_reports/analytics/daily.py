"""Daily aggregation: one store, one calendar day, one DailyRow.

The Daily Aggregator joins receipts, payment splits, expenses, cash
transactions, time records and the drawer closing of a single day into the
day's derived metrics. It owns no state: the result is a pure function of the
store id, the day and the current contents of the stores it is given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from pos_reports.analytics.frames import records_frame, sum_by, sum_column
from pos_reports.analytics.ratios import safe_ratio
from pos_reports.records.base import (
    CashTransactionStore,
    ClosingStore,
    ExpenseStore,
    SalesStore,
    TimeRecordStore,
)
from pos_reports.records.models import (
    REVENUE_STATUSES,
    CashTransaction,
    CashTransactionType,
    DailyClosing,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    PaymentMethod,
    PaymentSplit,
    SalesReceipt,
    TimeRecord,
    TimeRecordStatus,
)
from pos_reports.records.settings import CategorySettingsStore
from pos_reports.utils import DayLike, iter_days, to_day

logger = logging.getLogger(__name__)

RECEIPT_COLUMNS = ["total_incl_tax", "subtotal_excl_tax", "tax_total", "guest_count"]
SPLIT_COLUMNS = ["method", "amount_incl_tax"]
EXPENSE_COLUMNS = ["category", "amount"]
CASH_COLUMNS = ["type", "amount"]


@dataclass(frozen=True)
class DailyRow:
    """Derived metrics of one store for one calendar day.

    The four closing fields are None unless a confirmed or approved closing
    exists for the day; None means "not verified", which differs from a
    verified zero difference. ``cogs_ratio`` is None when there were no sales.
    """

    date: date
    store_id: str

    sales_total_incl_tax: int = 0
    sales_subtotal_excl_tax: int = 0
    sales_tax_total: int = 0
    receipt_count: int = 0
    guest_count: int = 0

    sales_cash_incl_tax: int = 0
    sales_card_incl_tax: int = 0
    sales_qr_incl_tax: int = 0
    sales_other_incl_tax: int = 0

    cogs_total: int = 0
    expenses_total: int = 0
    cash_in_total: int = 0
    cash_out_total: int = 0
    labor_minutes_total: int = 0

    expected_cash_balance: Optional[int] = None
    actual_cash_balance: Optional[int] = None
    closing_difference: Optional[int] = None
    closing_issue_flag: Optional[bool] = None

    cogs_ratio: Optional[float] = None

    @property
    def date_key(self) -> str:
        return self.date.isoformat()

    @property
    def payment_total(self) -> int:
        return (
            self.sales_cash_incl_tax
            + self.sales_card_incl_tax
            + self.sales_qr_incl_tax
            + self.sales_other_incl_tax
        )


def build_daily_row(
    store_id: str,
    day: date,
    receipts: list[SalesReceipt],
    splits: list[PaymentSplit],
    expenses: list[Expense],
    transactions: list[CashTransaction],
    time_records: list[TimeRecord],
    closing: Optional[DailyClosing],
    cogs_categories: frozenset[ExpenseCategory],
) -> DailyRow:
    """Combine one day's already-filtered records into a DailyRow.

    Callers are responsible for filtering: revenue receipts, approved
    expenses and approved time records of this store and day only. The
    closing is ignored unless it is settled (confirmed or approved).
    """
    receipts_df = records_frame(receipts, RECEIPT_COLUMNS)
    splits_df = records_frame(splits, SPLIT_COLUMNS)
    expenses_df = records_frame(expenses, EXPENSE_COLUMNS)
    cash_df = records_frame(transactions, CASH_COLUMNS)

    by_method = sum_by(splits_df, "method", "amount_incl_tax")

    cogs_values = {c.value for c in cogs_categories}
    cogs_df = expenses_df[expenses_df["category"].isin(cogs_values)]

    sales_total = sum_column(receipts_df, "total_incl_tax")
    cogs_total = sum_column(cogs_df, "amount")

    # Closed periods only: a shift without clock-out counts zero.
    labor_minutes = sum(r.worked_minutes() for r in time_records)

    settled = closing if closing is not None and closing.is_settled else None
    if closing is not None and settled is None:
        logger.debug("Ignoring %s closing for %s on %s", closing.status.value, store_id, day)

    return DailyRow(
        date=day,
        store_id=store_id,
        sales_total_incl_tax=sales_total,
        sales_subtotal_excl_tax=sum_column(receipts_df, "subtotal_excl_tax"),
        sales_tax_total=sum_column(receipts_df, "tax_total"),
        receipt_count=len(receipts_df),
        guest_count=sum_column(receipts_df, "guest_count"),
        sales_cash_incl_tax=by_method.get(PaymentMethod.CASH.value, 0),
        sales_card_incl_tax=by_method.get(PaymentMethod.CARD.value, 0),
        sales_qr_incl_tax=by_method.get(PaymentMethod.QR.value, 0),
        sales_other_incl_tax=by_method.get(PaymentMethod.OTHER.value, 0),
        cogs_total=cogs_total,
        expenses_total=sum_column(expenses_df, "amount"),
        cash_in_total=sum_column(
            cash_df[cash_df["type"] == CashTransactionType.IN.value], "amount"
        ),
        cash_out_total=sum_column(
            cash_df[cash_df["type"] == CashTransactionType.OUT.value], "amount"
        ),
        labor_minutes_total=labor_minutes,
        expected_cash_balance=settled.expected_cash_balance if settled else None,
        actual_cash_balance=settled.actual_cash_balance if settled else None,
        closing_difference=settled.difference if settled else None,
        closing_issue_flag=settled.has_issue if settled else None,
        cogs_ratio=safe_ratio(cogs_total, sales_total),
    )


class DailyAggregator:
    """Compute DailyRows from injected record stores.

    Args:
        sales: Receipts and payment splits.
        expenses: Expense entries.
        cash_transactions: Drawer cash movements.
        closings: Drawer closings.
        time_records: Attendance records.
        settings: COGS category settings.

    Example:
        >>> aggregator = DailyAggregator(sales, expenses, cash, closings, time_records, settings)
        >>> row = aggregator.compute_day("store_1", date(2024, 6, 15))
        >>> row.sales_total_incl_tax
        10000

    """

    def __init__(
        self,
        sales: SalesStore,
        expenses: ExpenseStore,
        cash_transactions: CashTransactionStore,
        closings: ClosingStore,
        time_records: TimeRecordStore,
        settings: CategorySettingsStore,
    ) -> None:
        self.sales = sales
        self.expenses = expenses
        self.cash_transactions = cash_transactions
        self.closings = closings
        self.time_records = time_records
        self.settings = settings

    def compute_day(self, store_id: str, day: DayLike) -> DailyRow:
        """Aggregate every record of ``store_id`` that falls on ``day``.

        Args:
            store_id: Store to aggregate.
            day: Calendar day; datetimes are truncated to their day.

        Returns:
            The day's DailyRow. A day without records yields zero sums and
            None ratios and closing fields.
        """
        day = to_day(day)

        receipts = self.sales.fetch_receipts(store_id, day, day, REVENUE_STATUSES)
        splits = self.sales.fetch_payment_splits(store_id, day, day)
        expenses = self.expenses.fetch_expenses(
            store_id, day, day, status=ExpenseStatus.APPROVED
        )
        transactions = self.cash_transactions.fetch_transactions(store_id, day, day)
        time_records = [
            r
            for r in self.time_records.load_all_time_records()
            if r.store_id == store_id
            and r.status == TimeRecordStatus.APPROVED
            and to_day(r.date) == day
        ]
        closing = self.closings.load_closing(store_id, day)

        row = build_daily_row(
            store_id,
            day,
            receipts,
            splits,
            expenses,
            transactions,
            time_records,
            closing,
            self.settings.cogs_categories(store_id),
        )
        logger.debug(
            "Computed %s for %s: sales=%s receipts=%s",
            row.date_key,
            store_id,
            row.sales_total_incl_tax,
            row.receipt_count,
        )
        return row

    def compute_range(self, store_id: str, start: DayLike, end: DayLike) -> list[DailyRow]:
        """Compute one DailyRow per day from start to end (inclusive), ascending.

        Raises:
            InvalidRangeError: If start is after end.
        """
        days = iter_days(to_day(start), to_day(end))
        return [self.compute_day(store_id, d) for d in days]
