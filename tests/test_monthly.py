"""Tests for the Monthly Aggregator."""

from dataclasses import asdict
from datetime import date, datetime

import pytest

from pos_reports.analytics.checks import SALES_PAYMENT_MISMATCH
from pos_reports.analytics.monthly import UNASSIGNED_VENDOR_LABEL, UNCATEGORIZED_LABEL
from pos_reports.exceptions import InvalidMonthError
from pos_reports.records.memory import InMemoryVendorStore
from pos_reports.records.models import (
    CashTransaction,
    CashTransactionCategory,
    CashTransactionType,
    ClosingStatus,
    DailyClosing,
    ExpenseCategory,
    PaymentMethod,
    TimeRecord,
    TimeRecordStatus,
    Vendor,
)

STORE = "store_1"
JUNE = date(2024, 6, 1)


def _closing(day: date, difference: int, status: ClosingStatus) -> DailyClosing:
    return DailyClosing(
        store_id=STORE,
        date=day,
        previous_cash_balance=10000,
        cash_sales=0,
        cash_in_total=0,
        cash_out_total=0,
        actual_cash_balance=10000 + difference,
        status=status,
    )


def test_single_cash_receipt_scenario(stores) -> None:
    """One posted 10000 receipt paid in cash: no warnings, cash only."""
    stores.add_sale("r1", date(2024, 6, 15), 10000, PaymentMethod.CASH)

    report = stores.monthly().compute_month(STORE, JUNE)

    assert report.kpi.sales_total_incl_tax == 10000
    assert report.kpi.pay_cash == 10000
    assert report.kpi.pay_card == 0
    assert report.kpi.cash_ratio == 1.0
    assert report.kpi.card_ratio == 0.0
    assert report.warnings == ()


def test_sales_payment_mismatch_warning(stores) -> None:
    stores.add_sale("r1", date(2024, 6, 3), 60000, PaymentMethod.CASH)
    stores.add_sale("r2", date(2024, 6, 20), 40000, PaymentMethod.CARD, paid=35000)

    report = stores.monthly().compute_month(STORE, JUNE)

    assert len(report.warnings) == 1
    assert report.warnings[0].code == SALES_PAYMENT_MISMATCH
    assert report.warnings[0].value == 5000


def test_report_identity_and_boundaries(stores, directory) -> None:
    report = stores.monthly(directory).compute_month(STORE, datetime(2024, 2, 17, 12, 0))

    assert report.year_month == "2024-02"
    assert report.store_name == "Main Street"
    assert report.start == date(2024, 2, 1)
    assert report.end == date(2024, 2, 29)
    assert len(report.daily) == 29
    assert [r.date for r in report.daily][:2] == [date(2024, 2, 1), date(2024, 2, 2)]


def test_store_name_falls_back_to_id(stores) -> None:
    assert stores.monthly().compute_month(STORE, JUNE).store_name == STORE


def test_invalid_month_raises(stores) -> None:
    with pytest.raises(InvalidMonthError):
        stores.monthly().compute_month(STORE, "2024-00-10")


def test_empty_month_is_all_zero_with_absent_ratios(stores) -> None:
    report = stores.monthly().compute_month(STORE, JUNE)
    kpi = report.kpi

    assert len(report.daily) == 30
    assert kpi.sales_total_incl_tax == 0
    assert kpi.closing_issue_days == 0
    assert kpi.avg_spend_per_guest is None
    assert kpi.avg_spend_per_receipt is None
    assert kpi.cash_ratio is None
    assert kpi.cogs_ratio is None
    assert kpi.gross_margin_ratio is None
    assert kpi.sales_per_labor_hour is None
    assert [b.key for b in report.breakdowns.payments_by_method] == ["cash", "card", "qr", "other"]
    assert all(b.amount == 0 for b in report.breakdowns.payments_by_method)
    assert report.breakdowns.expenses_by_category == ()
    assert report.breakdowns.expenses_by_vendor == ()
    assert report.warnings == ()


class TestTotalsAndRatios:
    @pytest.fixture
    def report(self, stores):
        stores.add_sale("r1", date(2024, 6, 1), 22000, PaymentMethod.CASH, guests=4)
        stores.add_sale("r2", date(2024, 6, 10), 11000, PaymentMethod.CARD, guests=2)
        stores.add_sale("r3", date(2024, 6, 30), 11000, PaymentMethod.QR, guests=2)
        stores.add_sale("r4", date(2024, 7, 1), 99000, PaymentMethod.CASH)
        stores.add_expense("e1", date(2024, 6, 1), 8000, ExpenseCategory.FOOD)
        stores.add_expense("e2", date(2024, 6, 12), 3000, ExpenseCategory.DRINK)
        stores.add_expense("e3", date(2024, 6, 12), 4000, ExpenseCategory.UTILITY)
        stores.time_records.save(
            TimeRecord(
                id="t1",
                employee_id=1,
                store_id=STORE,
                date=date(2024, 6, 10),
                clock_in_at=datetime(2024, 6, 10, 10, 0),
                clock_out_at=datetime(2024, 6, 10, 20, 0),
                break_minutes=60,
                status=TimeRecordStatus.APPROVED,
            )
        )
        return stores.monthly().compute_month(STORE, date(2024, 6, 18))

    def test_totals_equal_sum_of_daily_series(self, report) -> None:
        for kpi_field, daily_field in [
            ("sales_total_incl_tax", "sales_total_incl_tax"),
            ("sales_subtotal_excl_tax", "sales_subtotal_excl_tax"),
            ("sales_tax_total", "sales_tax_total"),
            ("receipt_count", "receipt_count"),
            ("guest_count", "guest_count"),
            ("pay_cash", "sales_cash_incl_tax"),
            ("pay_card", "sales_card_incl_tax"),
            ("pay_qr", "sales_qr_incl_tax"),
            ("cogs_total", "cogs_total"),
            ("expenses_total", "expenses_total"),
            ("labor_minutes_total", "labor_minutes_total"),
        ]:
            assert getattr(report.kpi, kpi_field) == sum(
                getattr(r, daily_field) for r in report.daily
            ), kpi_field

    def test_values(self, report) -> None:
        kpi = report.kpi
        assert kpi.sales_total_incl_tax == 44000
        assert kpi.receipt_count == 3
        assert kpi.guest_count == 8
        assert kpi.pay_total == 44000
        assert kpi.cogs_total == 11000
        assert kpi.gross_profit == 33000
        assert kpi.expenses_total == 15000
        assert kpi.labor_minutes_total == 540

    def test_ratios_are_recomputed_from_monthly_sums(self, report) -> None:
        kpi = report.kpi
        assert kpi.avg_spend_per_guest == pytest.approx(5500)
        assert kpi.avg_spend_per_receipt == pytest.approx(44000 / 3)
        assert kpi.cash_ratio == pytest.approx(0.5)
        assert kpi.qr_ratio == pytest.approx(0.25)
        assert kpi.other_ratio == 0.0
        assert kpi.cogs_ratio == pytest.approx(0.25)
        assert kpi.gross_margin_ratio == pytest.approx(0.75)
        assert kpi.sales_per_labor_hour == pytest.approx(44000 / 9)

    def test_compute_monthly_daily_matches_report_series(self, stores, report) -> None:
        assert tuple(stores.monthly().compute_monthly_daily(STORE, JUNE)) == report.daily


class TestBreakdowns:
    def test_expense_categories_descending_ties_in_declaration_order(self, stores) -> None:
        stores.add_expense("e1", date(2024, 6, 1), 1000, ExpenseCategory.MISC)
        stores.add_expense("e2", date(2024, 6, 2), 1000, ExpenseCategory.DRINK)
        stores.add_expense("e3", date(2024, 6, 3), 5000, ExpenseCategory.UTILITY)
        stores.add_expense("e4", date(2024, 6, 4), 1000, ExpenseCategory.FOOD)

        breakdowns = stores.monthly().compute_month(STORE, JUNE).breakdowns

        assert [(b.key, b.amount) for b in breakdowns.expenses_by_category] == [
            ("utility", 5000),
            ("food", 1000),
            ("drink", 1000),
            ("misc", 1000),
        ]
        assert [b.key for b in breakdowns.cogs_by_category] == ["food", "drink"]

    def test_vendor_labels(self, stores) -> None:
        stores.vendors = InMemoryVendorStore(
            [Vendor(id="v1", store_id=STORE, name="Sakura Foods")]
        )
        stores.add_expense("e1", date(2024, 6, 1), 3000, vendor_id="v1")
        stores.add_expense("e2", date(2024, 6, 2), 2000, vendor_id="v1", vendor_name_raw="ignored")
        stores.add_expense("e3", date(2024, 6, 3), 1500, vendor_name_raw="Corner Shop")
        stores.add_expense("e4", date(2024, 6, 4), 1000, vendor_id="gone", vendor_name_raw="Corner Shop")
        stores.add_expense("e5", date(2024, 6, 5), 700)
        stores.add_expense("e6", date(2024, 6, 6), 300, vendor_id="gone")

        by_vendor = stores.monthly().compute_month(STORE, JUNE).breakdowns.expenses_by_vendor

        assert [(b.key, b.amount) for b in by_vendor] == [
            ("Sakura Foods", 5000),
            ("Corner Shop", 2500),
            (UNASSIGNED_VENDOR_LABEL, 1000),
        ]

    def test_vendor_breakdown_caps_at_ten(self, stores) -> None:
        for i in range(12):
            stores.add_expense(f"e{i}", date(2024, 6, 1), 1000 + i * 100, vendor_name_raw=f"Vendor {i:02d}")

        by_vendor = stores.monthly().compute_month(STORE, JUNE).breakdowns.expenses_by_vendor

        assert len(by_vendor) == 10
        assert by_vendor[0].key == "Vendor 11"
        assert by_vendor[-1].key == "Vendor 02"
        amounts = [b.amount for b in by_vendor]
        assert amounts == sorted(amounts, reverse=True)

    def test_vendor_ties_break_by_name(self, stores) -> None:
        stores.add_expense("e1", date(2024, 6, 1), 1000, vendor_name_raw="Zen Supply")
        stores.add_expense("e2", date(2024, 6, 1), 1000, vendor_name_raw="Alpha Supply")

        by_vendor = stores.monthly().compute_month(STORE, JUNE).breakdowns.expenses_by_vendor
        assert [b.key for b in by_vendor] == ["Alpha Supply", "Zen Supply"]

    def test_cash_out_by_category(self, stores) -> None:
        for tid, type_, amount, category in [
            ("c1", CashTransactionType.OUT, 50000, CashTransactionCategory.DEPOSIT_TO_BANK),
            ("c2", CashTransactionType.OUT, 30000, CashTransactionCategory.DEPOSIT_TO_BANK),
            ("c3", CashTransactionType.OUT, 4000, CashTransactionCategory.PURCHASE),
            ("c4", CashTransactionType.OUT, 1000, None),
            ("c5", CashTransactionType.IN, 20000, CashTransactionCategory.CHANGE_PREP),
        ]:
            stores.cash_transactions.save(
                CashTransaction(
                    id=tid,
                    store_id=STORE,
                    date=date(2024, 6, 10),
                    type=type_,
                    amount=amount,
                    category=category,
                )
            )

        report = stores.monthly().compute_month(STORE, JUNE)

        assert [(b.key, b.amount) for b in report.breakdowns.cash_out_by_category] == [
            ("deposit_to_bank", 80000),
            ("purchase", 4000),
            (UNCATEGORIZED_LABEL, 1000),
        ]
        assert report.kpi.deposit_to_bank_total == 80000
        assert report.kpi.cash_out_total == 85000
        assert report.kpi.cash_in_total == 20000


def test_only_settled_closings_count(stores) -> None:
    stores.closings.save_closing(_closing(date(2024, 6, 1), -1500, ClosingStatus.CONFIRMED))
    stores.closings.save_closing(_closing(date(2024, 6, 2), 300, ClosingStatus.APPROVED))
    stores.closings.save_closing(_closing(date(2024, 6, 3), 1000, ClosingStatus.APPROVED))
    stores.closings.save_closing(_closing(date(2024, 6, 4), 5000, ClosingStatus.DRAFT))

    kpi = stores.monthly().compute_month(STORE, JUNE).kpi

    assert kpi.closing_difference_total == -200
    assert kpi.closing_issue_days == 2


def test_repeated_calls_are_identical(stores) -> None:
    stores.add_sale("r1", date(2024, 6, 15), 10000)
    stores.add_expense("e1", date(2024, 6, 15), 2000, vendor_name_raw="Corner Shop")
    aggregator = stores.monthly()

    first = aggregator.compute_month(STORE, JUNE)
    second = aggregator.compute_month(STORE, date(2024, 6, 30))

    assert first == second
    assert asdict(first) == asdict(second)


def test_last_representable_month(stores) -> None:
    rows = stores.monthly().compute_monthly_daily(STORE, date(9999, 12, 5))

    assert len(rows) == 31
    assert rows[-1].date == date.max
