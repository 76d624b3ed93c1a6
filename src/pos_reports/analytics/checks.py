"""Cross-record consistency checks for monthly reports.

Checks only report discrepancies; they never correct source data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SALES_PAYMENT_MISMATCH = "sales_payment_mismatch"


@dataclass(frozen=True)
class ReportWarning:
    """A consistency problem found while building a report.

    Attributes:
        code: Stable machine-readable identifier.
        message: Human-readable description.
        value: Signed size of the discrepancy in currency units.
    """

    code: str
    message: str
    value: int


def detect_sales_payment_mismatch(sales_total_incl_tax: int, payment_total: int) -> list[ReportWarning]:
    """Compare receipt totals with the sum of their payment splits.

    Every receipt should be fully covered by its splits, so over a month the
    two totals must agree. A non-zero difference yields one warning carrying
    ``sales - payments``.

    Args:
        sales_total_incl_tax: Sum of receipt totals including tax.
        payment_total: Sum of payment split amounts over all methods.

    Returns:
        A list holding one warning, or an empty list when the totals agree.
    """
    mismatch = sales_total_incl_tax - payment_total
    if mismatch == 0:
        return []

    logger.warning(
        "Sales total %s differs from payment total %s by %s",
        sales_total_incl_tax,
        payment_total,
        mismatch,
    )
    return [
        ReportWarning(
            code=SALES_PAYMENT_MISMATCH,
            message="Sales total and payment total do not match",
            value=mismatch,
        )
    ]
