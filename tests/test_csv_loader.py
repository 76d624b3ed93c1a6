"""Tests for loading record stores from record CSV files."""

from datetime import date, datetime

import pandas as pd
import pytest

from pos_reports.config import DataPaths
from pos_reports.exceptions import DataQualityError
from pos_reports.records.csv_loader import load_record_stores, read_record_frame
from pos_reports.records.models import (
    REVENUE_STATUSES,
    CashTransactionCategory,
    ClosingStatus,
    ExpenseCategory,
    ExpensePaymentMethod,
    ExpenseStatus,
    PaymentMethod,
    TimeRecordStatus,
)


@pytest.fixture
def paths(tmp_path) -> DataPaths:
    p = DataPaths.from_root(tmp_path / "data", tmp_path / "stores.json")
    p.ensure_dirs()
    return p


def _write(paths: DataPaths, kind: str, rows: list[dict]) -> None:
    pd.DataFrame(rows).to_csv(paths.record_file(kind), index=False)


def test_missing_files_load_as_empty_stores(paths: DataPaths) -> None:
    stores = load_record_stores(paths)

    june = (date(2024, 6, 1), date(2024, 6, 30))
    assert stores.sales.fetch_receipts("store_1", *june, REVENUE_STATUSES) == []
    assert stores.expenses.fetch_expenses("store_1", *june) == []
    assert stores.time_records.load_all_time_records() == []
    assert stores.vendors.fetch_vendors("store_1") == []


def test_loads_every_record_kind(paths: DataPaths) -> None:
    _write(
        paths,
        "receipts",
        [
            {
                "id": "r1",
                "store_id": "store_1",
                "business_date": "2024-06-15",
                "total_incl_tax": 11000,
                "subtotal_excl_tax": 10000,
                "tax_total": 1000,
                "guest_count": 2,
                "status": "posted",
            }
        ],
    )
    _write(
        paths,
        "payment_splits",
        [
            {
                "id": "p1",
                "receipt_id": "r1",
                "store_id": "store_1",
                "business_date": "2024-06-15",
                "method": "qr",
                "amount_incl_tax": 11000,
            }
        ],
    )
    _write(
        paths,
        "expenses",
        [
            {
                "id": "e1",
                "store_id": "store_1",
                "date": "2024-06-15",
                "amount": 3000,
                "category": "drink",
                "status": "approved",
                "payment_method": "",
                "vendor_id": "",
                "vendor_name_raw": "Corner Liquor",
                "employee_id": "",
                "is_reimbursed": "false",
                "memo": "",
            }
        ],
    )
    _write(
        paths,
        "cash_transactions",
        [
            {
                "id": "c1",
                "store_id": "store_1",
                "date": "2024-06-15",
                "type": "out",
                "amount": 20000,
                "category": "deposit_to_bank",
                "time": "2024-06-15T18:30:00",
            }
        ],
    )
    _write(
        paths,
        "closings",
        [
            {
                "store_id": "store_1",
                "date": "2024-06-15",
                "previous_cash_balance": 30000,
                "cash_sales": 0,
                "cash_in_total": 0,
                "cash_out_total": 20000,
                "actual_cash_balance": 10000,
                "status": "approved",
            }
        ],
    )
    _write(
        paths,
        "time_records",
        [
            {
                "id": "t1",
                "employee_id": 1,
                "store_id": "store_1",
                "date": "2024-06-15",
                "clock_in_at": "2024-06-15T09:00:00",
                "clock_out_at": "",
                "break_minutes": "",
                "status": "approved",
            }
        ],
    )
    _write(paths, "vendors", [{"id": "v1", "store_id": "store_1", "name": "Sakura Foods"}])

    stores = load_record_stores(paths)
    day = date(2024, 6, 15)

    receipt = stores.sales.fetch_receipts("store_1", day, day, REVENUE_STATUSES)[0]
    assert receipt.total_incl_tax == 11000
    assert receipt.guest_count == 2
    assert stores.sales.fetch_payment_splits("store_1", day, day)[0].method == PaymentMethod.QR

    expense = stores.expenses.find_by_id("e1")
    assert expense.category == ExpenseCategory.DRINK
    assert expense.status == ExpenseStatus.APPROVED
    assert expense.payment_method == ExpensePaymentMethod.CASH
    assert expense.vendor_id is None
    assert expense.vendor_name_raw == "Corner Liquor"
    assert expense.employee_id is None
    assert expense.is_reimbursed is False

    tx = stores.cash_transactions.find_by_id("c1")
    assert tx.category == CashTransactionCategory.DEPOSIT_TO_BANK
    assert tx.time == datetime(2024, 6, 15, 18, 30)

    closing = stores.closings.load_closing("store_1", day)
    assert closing.status == ClosingStatus.APPROVED
    assert closing.difference == 0

    record = stores.time_records.load(1, day)
    assert record.status == TimeRecordStatus.APPROVED
    assert record.clock_out_at is None
    assert record.break_minutes == 0

    vendor = stores.vendors.find_by_id("v1")
    assert vendor.is_active is True


def test_missing_required_columns_raise(paths: DataPaths) -> None:
    _write(paths, "vendors", [{"id": "v1", "name": "No Store Column"}])

    with pytest.raises(DataQualityError, match="store_id"):
        read_record_frame(paths.record_file("vendors"), "vendors")


def test_unknown_status_reports_line_number(paths: DataPaths) -> None:
    _write(
        paths,
        "expenses",
        [
            {"id": "e1", "store_id": "s", "date": "2024-06-01", "amount": 1, "category": "food", "status": "approved"},
            {"id": "e2", "store_id": "s", "date": "2024-06-01", "amount": 1, "category": "food", "status": "paid"},
        ],
    )

    with pytest.raises(DataQualityError, match="line 3"):
        load_record_stores(paths)
