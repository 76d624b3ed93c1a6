"""Tests for the safe ratio rule and the sales/payment consistency check."""

import math

import pytest

from pos_reports.analytics.checks import SALES_PAYMENT_MISMATCH, detect_sales_payment_mismatch
from pos_reports.analytics.ratios import safe_ratio


@pytest.mark.parametrize("denominator", [0, -1, -100.5, 0.0, math.nan])
def test_safe_ratio_is_absent_for_non_positive_denominator(denominator) -> None:
    assert safe_ratio(100, denominator) is None


def test_safe_ratio_divides() -> None:
    assert safe_ratio(30, 120) == 0.25
    assert safe_ratio(0, 10) == 0.0
    assert safe_ratio(-50, 100) == -0.5


def test_no_warning_when_totals_match() -> None:
    assert detect_sales_payment_mismatch(10000, 10000) == []


def test_mismatch_warning_carries_signed_difference() -> None:
    warnings = detect_sales_payment_mismatch(100000, 95000)

    assert len(warnings) == 1
    assert warnings[0].code == SALES_PAYMENT_MISMATCH
    assert warnings[0].value == 5000
    assert warnings[0].message

    assert detect_sales_payment_mismatch(95000, 100000)[0].value == -5000
