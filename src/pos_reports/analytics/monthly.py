"""Monthly aggregation: KPI totals, breakdowns and warnings for one month.

The Monthly Aggregator drives the Daily Aggregator across every calendar day
of a month and accumulates the daily series into monthly totals. Ratios are
recomputed from the monthly sums rather than averaged from daily ratios.
Breakdowns (payment mix, COGS and expenses by category, expenses by vendor,
cash out by category) are computed once at month grain, directly from the
month's filtered record sets.

Grain Reference:
    - compute_monthly_daily: one DailyRow per calendar day of the month
    - compute_month: one MonthlyReport per store x month
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import TYPE_CHECKING, Optional

import pandas as pd

from pos_reports.analytics.checks import ReportWarning, detect_sales_payment_mismatch
from pos_reports.analytics.daily import DailyAggregator, DailyRow
from pos_reports.analytics.frames import records_frame
from pos_reports.analytics.ratios import safe_ratio
from pos_reports.records.base import (
    CashTransactionStore,
    ClosingStore,
    ExpenseStore,
    SalesStore,
    TimeRecordStore,
    VendorStore,
)
from pos_reports.records.models import (
    CashTransaction,
    CashTransactionCategory,
    CashTransactionType,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    PaymentMethod,
    PaymentSplit,
)
from pos_reports.records.settings import CategorySettingsStore
from pos_reports.utils import DayLike, iter_days, month_range, year_month_key

if TYPE_CHECKING:
    from pos_reports.records.csv_loader import RecordStores
    from pos_reports.stores import StoreDirectory

logger = logging.getLogger(__name__)

UNASSIGNED_VENDOR_LABEL = "unassigned/other"
UNCATEGORIZED_LABEL = "uncategorized"
VENDOR_BREAKDOWN_LIMIT = 10

# DailyRow fields whose monthly total is the plain sum of the daily series.
SUMMED_FIELDS = [
    "sales_total_incl_tax",
    "sales_subtotal_excl_tax",
    "sales_tax_total",
    "receipt_count",
    "guest_count",
    "sales_cash_incl_tax",
    "sales_card_incl_tax",
    "sales_qr_incl_tax",
    "sales_other_incl_tax",
    "cogs_total",
    "expenses_total",
    "cash_in_total",
    "cash_out_total",
    "labor_minutes_total",
    "closing_difference",
]

CATEGORY_ORDER = {c.value: i for i, c in enumerate(ExpenseCategory)}
CASH_CATEGORY_ORDER = {c.value: i for i, c in enumerate(CashTransactionCategory)}


@dataclass(frozen=True)
class BreakdownItem:
    """One group of a breakdown: its key (category, method or vendor) and amount."""

    key: str
    amount: int


def breakdown_amount(items: tuple[BreakdownItem, ...], key: str) -> int:
    """Return the amount for ``key`` in a breakdown, 0 when absent."""
    for item in items:
        if item.key == key:
            return item.amount
    return 0


@dataclass(frozen=True)
class MonthlyKpi:
    """Monthly totals and ratios. Ratios are None when their base is not positive."""

    sales_total_incl_tax: int
    sales_subtotal_excl_tax: int
    sales_tax_total: int
    receipt_count: int
    guest_count: int
    avg_spend_per_guest: Optional[float]
    avg_spend_per_receipt: Optional[float]

    pay_cash: int
    pay_card: int
    pay_qr: int
    pay_other: int
    pay_total: int
    cash_ratio: Optional[float]
    card_ratio: Optional[float]
    qr_ratio: Optional[float]
    other_ratio: Optional[float]

    cogs_total: int
    gross_profit: int
    cogs_ratio: Optional[float]
    gross_margin_ratio: Optional[float]

    expenses_total: int
    cash_in_total: int
    cash_out_total: int

    closing_difference_total: int
    closing_issue_days: int
    deposit_to_bank_total: int

    labor_minutes_total: int
    sales_per_labor_hour: Optional[float]


@dataclass(frozen=True)
class MonthlyBreakdowns:
    """Month-grain groupings.

    Attributes:
        payments_by_method: All four payment methods, in declaration order.
        cogs_by_category: COGS expense categories, largest first.
        expenses_by_category: All expense categories with spend, largest first.
        expenses_by_vendor: Top vendors by spend, largest first.
        cash_out_by_category: Cash taken out of the drawer by category, largest first.
    """

    payments_by_method: tuple[BreakdownItem, ...]
    cogs_by_category: tuple[BreakdownItem, ...]
    expenses_by_category: tuple[BreakdownItem, ...]
    expenses_by_vendor: tuple[BreakdownItem, ...]
    cash_out_by_category: tuple[BreakdownItem, ...]


@dataclass(frozen=True)
class MonthlyReport:
    """Everything reported for one store and one calendar month."""

    year_month: str
    store_id: str
    store_name: str
    start: date
    end: date
    kpi: MonthlyKpi
    breakdowns: MonthlyBreakdowns
    warnings: tuple[ReportWarning, ...]
    daily: tuple[DailyRow, ...]


def _ranked(sums: pd.Series, order: dict[str, int]) -> tuple[BreakdownItem, ...]:
    """Sort grouped sums by descending amount, ties by declaration order."""
    if sums.empty:
        return ()
    df = pd.DataFrame({"key": sums.index.astype(str), "amount": sums.values})
    df["order"] = df["key"].map(order).fillna(len(order))
    df = df.sort_values(["amount", "order"], ascending=[False, True], kind="mergesort")
    return tuple(BreakdownItem(key=k, amount=int(a)) for k, a in zip(df["key"], df["amount"]))


class MonthlyAggregator:
    """Compute monthly reports and daily series from injected record stores.

    Args:
        sales: Receipts and payment splits.
        expenses: Expense entries.
        cash_transactions: Drawer cash movements.
        closings: Drawer closings.
        time_records: Attendance records.
        settings: COGS category settings.
        vendors: Optional vendor store used to resolve expense vendor names.
        directory: Optional store directory used to resolve the store name.

    Example:
        >>> aggregator = MonthlyAggregator.from_record_stores(stores, CategorySettingsStore())
        >>> report = aggregator.compute_month("store_1", date(2024, 6, 1))
        >>> report.kpi.sales_total_incl_tax
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
        vendors: Optional[VendorStore] = None,
        directory: Optional[StoreDirectory] = None,
    ) -> None:
        self.daily = DailyAggregator(
            sales, expenses, cash_transactions, closings, time_records, settings
        )
        self.vendors = vendors
        self.directory = directory

    @classmethod
    def from_record_stores(
        cls,
        stores: RecordStores,
        settings: CategorySettingsStore,
        directory: Optional[StoreDirectory] = None,
    ) -> MonthlyAggregator:
        """Build an aggregator over a loaded RecordStores bundle."""
        return cls(
            sales=stores.sales,
            expenses=stores.expenses,
            cash_transactions=stores.cash_transactions,
            closings=stores.closings,
            time_records=stores.time_records,
            settings=settings,
            vendors=stores.vendors,
            directory=directory,
        )

    def compute_monthly_daily(self, store_id: str, any_date_in_month: DayLike) -> list[DailyRow]:
        """Compute one DailyRow per calendar day of the month, ascending.

        Args:
            store_id: Store to aggregate.
            any_date_in_month: Any day of the target month.

        Returns:
            28 to 31 DailyRows, first day of the month first.

        Raises:
            InvalidMonthError: If the month boundaries cannot be resolved.
        """
        start, end = month_range(any_date_in_month)
        return [self.daily.compute_day(store_id, d) for d in iter_days(start, end)]

    def compute_month(self, store_id: str, any_date_in_month: DayLike) -> MonthlyReport:
        """Compute the monthly report of the month containing ``any_date_in_month``.

        Args:
            store_id: Store to aggregate.
            any_date_in_month: Any day of the target month.

        Returns:
            MonthlyReport with KPI totals, breakdowns, warnings and the daily series.

        Raises:
            InvalidMonthError: If the month boundaries cannot be resolved.
        """
        start, end = month_range(any_date_in_month)
        year_month = year_month_key(start)

        logger.info("Computing monthly report for %s, %s", store_id, year_month)

        try:
            daily = self.compute_monthly_daily(store_id, start)
            totals = self._sum_daily(daily)

            expenses = self.daily.expenses.fetch_expenses(
                store_id, start, end, status=ExpenseStatus.APPROVED
            )
            splits = self.daily.sales.fetch_payment_splits(store_id, start, end)
            cash_out = self.daily.cash_transactions.fetch_transactions(
                store_id, start, end, type=CashTransactionType.OUT
            )
            cogs_categories = self.daily.settings.cogs_categories(store_id)

            breakdowns = self._breakdowns(expenses, splits, cash_out, cogs_categories)
            kpi = self._kpi(totals, breakdowns)
            warnings = detect_sales_payment_mismatch(kpi.sales_total_incl_tax, kpi.pay_total)
        except Exception as e:
            logger.error("Error computing monthly report for %s, %s: %s", store_id, year_month, e)
            raise

        report = MonthlyReport(
            year_month=year_month,
            store_id=store_id,
            store_name=self.directory.store_name(store_id) if self.directory else store_id,
            start=start,
            end=end,
            kpi=kpi,
            breakdowns=breakdowns,
            warnings=tuple(warnings),
            daily=tuple(daily),
        )

        logger.info(
            "Monthly report for %s, %s: sales=%s, %d warning(s)",
            store_id,
            year_month,
            kpi.sales_total_incl_tax,
            len(report.warnings),
        )
        return report

    @staticmethod
    def _sum_daily(daily: list[DailyRow]) -> dict[str, int]:
        df = pd.DataFrame([asdict(r) for r in daily])
        totals = {}
        for field_name in SUMMED_FIELDS:
            totals[field_name] = int(pd.to_numeric(df[field_name]).sum()) if not df.empty else 0
        totals["closing_issue_days"] = (
            int(df["closing_issue_flag"].eq(True).sum()) if not df.empty else 0
        )
        return totals

    def _kpi(self, totals: dict[str, int], breakdowns: MonthlyBreakdowns) -> MonthlyKpi:
        sales = totals["sales_total_incl_tax"]
        pay_cash = totals["sales_cash_incl_tax"]
        pay_card = totals["sales_card_incl_tax"]
        pay_qr = totals["sales_qr_incl_tax"]
        pay_other = totals["sales_other_incl_tax"]
        pay_total = pay_cash + pay_card + pay_qr + pay_other
        cogs = totals["cogs_total"]
        gross_profit = sales - cogs
        labor_minutes = totals["labor_minutes_total"]

        return MonthlyKpi(
            sales_total_incl_tax=sales,
            sales_subtotal_excl_tax=totals["sales_subtotal_excl_tax"],
            sales_tax_total=totals["sales_tax_total"],
            receipt_count=totals["receipt_count"],
            guest_count=totals["guest_count"],
            avg_spend_per_guest=safe_ratio(sales, totals["guest_count"]),
            avg_spend_per_receipt=safe_ratio(sales, totals["receipt_count"]),
            pay_cash=pay_cash,
            pay_card=pay_card,
            pay_qr=pay_qr,
            pay_other=pay_other,
            pay_total=pay_total,
            cash_ratio=safe_ratio(pay_cash, pay_total),
            card_ratio=safe_ratio(pay_card, pay_total),
            qr_ratio=safe_ratio(pay_qr, pay_total),
            other_ratio=safe_ratio(pay_other, pay_total),
            cogs_total=cogs,
            gross_profit=gross_profit,
            cogs_ratio=safe_ratio(cogs, sales),
            gross_margin_ratio=safe_ratio(gross_profit, sales),
            expenses_total=totals["expenses_total"],
            cash_in_total=totals["cash_in_total"],
            cash_out_total=totals["cash_out_total"],
            closing_difference_total=totals["closing_difference"],
            closing_issue_days=totals["closing_issue_days"],
            deposit_to_bank_total=breakdown_amount(
                breakdowns.cash_out_by_category, CashTransactionCategory.DEPOSIT_TO_BANK.value
            ),
            labor_minutes_total=labor_minutes,
            sales_per_labor_hour=safe_ratio(sales, labor_minutes / 60),
        )

    def _breakdowns(
        self,
        expenses: list[Expense],
        splits: list[PaymentSplit],
        cash_out: list[CashTransaction],
        cogs_categories: frozenset[ExpenseCategory],
    ) -> MonthlyBreakdowns:
        expenses_df = records_frame(expenses, ["category", "amount"])
        expenses_df["vendor"] = [self.vendor_label(e) for e in expenses]

        by_category = expenses_df.groupby("category", sort=False)["amount"].sum()
        cogs_values = {c.value for c in cogs_categories}
        cogs_sums = by_category[by_category.index.isin(cogs_values)]

        by_vendor = (
            expenses_df.groupby("vendor", sort=False)["amount"]
            .sum()
            .reset_index()
            .sort_values(["amount", "vendor"], ascending=[False, True], kind="mergesort")
            .head(VENDOR_BREAKDOWN_LIMIT)
        )

        splits_df = records_frame(splits, ["method", "amount_incl_tax"])
        by_method = splits_df.groupby("method", sort=False)["amount_incl_tax"].sum()

        cash_df = records_frame(cash_out, ["category", "amount"])
        cash_df["category"] = cash_df["category"].fillna(UNCATEGORIZED_LABEL)
        by_cash_category = cash_df.groupby("category", sort=False)["amount"].sum()

        return MonthlyBreakdowns(
            payments_by_method=tuple(
                BreakdownItem(key=m.value, amount=int(by_method.get(m.value, 0)))
                for m in PaymentMethod
            ),
            cogs_by_category=_ranked(cogs_sums, CATEGORY_ORDER),
            expenses_by_category=_ranked(by_category, CATEGORY_ORDER),
            expenses_by_vendor=tuple(
                BreakdownItem(key=str(v), amount=int(a))
                for v, a in zip(by_vendor["vendor"], by_vendor["amount"])
            ),
            cash_out_by_category=_ranked(by_cash_category, CASH_CATEGORY_ORDER),
        )

    def vendor_label(self, expense: Expense) -> str:
        """Resolve the display name an expense is grouped under.

        The referenced vendor's name wins, then the free-text vendor name,
        then the ``unassigned/other`` fallback label.
        """
        if expense.vendor_id and self.vendors is not None:
            vendor = self.vendors.find_by_id(expense.vendor_id)
            if vendor is not None:
                return vendor.name
            logger.warning(
                "Expense %s references unknown vendor %s", expense.id, expense.vendor_id
            )
        if expense.vendor_name_raw:
            return expense.vendor_name_raw
        return UNASSIGNED_VENDOR_LABEL
