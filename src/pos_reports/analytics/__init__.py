"""Daily and monthly aggregation of store records.

Grain Reference:
    - daily: DailyRow - store x calendar day
    - monthly: MonthlyReport - store x calendar month

Example:
    >>> from pos_reports.analytics import MonthlyAggregator
    >>> aggregator = MonthlyAggregator.from_record_stores(stores, settings)
    >>> report = aggregator.compute_month("store_1", "2024-06-01")
"""

from pos_reports.analytics.checks import SALES_PAYMENT_MISMATCH, ReportWarning
from pos_reports.analytics.daily import DailyAggregator, DailyRow
from pos_reports.analytics.monthly import (
    BreakdownItem,
    MonthlyAggregator,
    MonthlyBreakdowns,
    MonthlyKpi,
    MonthlyReport,
)
from pos_reports.analytics.ratios import safe_ratio

__all__ = [
    "SALES_PAYMENT_MISMATCH",
    "BreakdownItem",
    "DailyAggregator",
    "DailyRow",
    "MonthlyAggregator",
    "MonthlyBreakdowns",
    "MonthlyKpi",
    "MonthlyReport",
    "ReportWarning",
    "safe_ratio",
]
