"""Load record CSV files into in-memory record stores.

Record files live under ``DataPaths.records_dir``, one CSV per record kind,
with one column per record field (field names as in
``pos_reports.records.models``). Optional columns may be omitted or left
empty. A missing file is an empty store: a brand-new location has no records
yet and still gets well-formed, all-zero reports.

Example:
    >>> from pos_reports import DataPaths
    >>> from pos_reports.records.csv_loader import load_record_stores
    >>>
    >>> paths = DataPaths.from_root("data", "config/stores.json")
    >>> stores = load_record_stores(paths)
    >>> stores.sales.fetch_receipts(
    ...     "store_1", date(2024, 6, 1), date(2024, 6, 30), REVENUE_STATUSES
    ... )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

import pandas as pd

from pos_reports.exceptions import DataQualityError
from pos_reports.records.memory import (
    InMemoryCashTransactionStore,
    InMemoryClosingStore,
    InMemoryExpenseStore,
    InMemorySalesStore,
    InMemoryTimeRecordStore,
    InMemoryVendorStore,
)
from pos_reports.records.models import (
    CashTransaction,
    CashTransactionCategory,
    CashTransactionType,
    ClosingStatus,
    DailyClosing,
    Expense,
    ExpenseCategory,
    ExpensePaymentMethod,
    ExpenseStatus,
    PaymentMethod,
    PaymentSplit,
    SalesReceipt,
    SalesReceiptStatus,
    TimeRecord,
    TimeRecordStatus,
    Vendor,
    VendorCategory,
)
from pos_reports.utils import to_day

if TYPE_CHECKING:
    from pos_reports.config import DataPaths

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
R = TypeVar("R")

REQUIRED_COLUMNS: dict[str, list[str]] = {
    "receipts": [
        "id",
        "store_id",
        "business_date",
        "total_incl_tax",
        "subtotal_excl_tax",
        "tax_total",
        "status",
    ],
    "payment_splits": [
        "id",
        "receipt_id",
        "store_id",
        "business_date",
        "method",
        "amount_incl_tax",
    ],
    "expenses": ["id", "store_id", "date", "amount", "category", "status"],
    "cash_transactions": ["id", "store_id", "date", "type", "amount"],
    "closings": [
        "store_id",
        "date",
        "previous_cash_balance",
        "cash_sales",
        "cash_in_total",
        "cash_out_total",
        "actual_cash_balance",
        "status",
    ],
    "time_records": ["id", "employee_id", "store_id", "date", "status"],
    "vendors": ["id", "store_id", "name"],
}


@dataclass
class RecordStores:
    """The full set of record stores loaded from one data directory."""

    sales: InMemorySalesStore
    expenses: InMemoryExpenseStore
    cash_transactions: InMemoryCashTransactionStore
    closings: InMemoryClosingStore
    time_records: InMemoryTimeRecordStore
    vendors: InMemoryVendorStore


def read_record_frame(path: Path, kind: str) -> pd.DataFrame:
    """Read one record CSV as strings, validating its required columns.

    Args:
        path: CSV file to read.
        kind: Record kind, a key of REQUIRED_COLUMNS.

    Returns:
        DataFrame of string cells, empty cells as "". An empty frame with
        the required columns when the file does not exist.

    Raises:
        DataQualityError: If required columns are missing.
    """
    required = REQUIRED_COLUMNS[kind]
    if not path.exists():
        logger.info("No %s file at %s, treating as empty", kind, path)
        return pd.DataFrame(columns=required)

    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")

    missing_cols = [col for col in required if col not in df.columns]
    if missing_cols:
        raise DataQualityError(
            f"Missing required columns in {path.name}: {missing_cols}. Required: {required}"
        )

    logger.debug("Read %d %s rows from %s", len(df), kind, path)
    return df


def _rows(df: pd.DataFrame, kind: str, build: Callable[[dict[str, Any]], R]) -> list[R]:
    records = []
    for i, row in enumerate(df.to_dict("records"), start=2):  # header is line 1
        try:
            records.append(build(row))
        except (ValueError, KeyError) as e:
            raise DataQualityError(f"Invalid {kind} record on line {i}: {e}") from e
    return records


def _cell(row: dict[str, Any], name: str) -> str:
    value = row.get(name, "")
    return "" if value is None else str(value).strip()


def _int(row: dict[str, Any], name: str, default: int = 0) -> int:
    v = _cell(row, name)
    return int(v) if v else default


def _opt_int(row: dict[str, Any], name: str) -> Optional[int]:
    v = _cell(row, name)
    return int(v) if v else None


def _opt_str(row: dict[str, Any], name: str) -> Optional[str]:
    return _cell(row, name) or None


def _day(row: dict[str, Any], name: str) -> date:
    return to_day(_cell(row, name))


def _opt_datetime(row: dict[str, Any], name: str) -> Optional[datetime]:
    v = _cell(row, name)
    return datetime.fromisoformat(v) if v else None


def _bool(row: dict[str, Any], name: str) -> bool:
    return _cell(row, name).lower() in ("1", "true", "yes")


def _enum(row: dict[str, Any], name: str, cls: type[E], default: Optional[E] = None) -> E:
    v = _cell(row, name)
    if not v and default is not None:
        return default
    return cls(v)


def _opt_enum(row: dict[str, Any], name: str, cls: type[E]) -> Optional[E]:
    v = _cell(row, name)
    return cls(v) if v else None


def _receipt(row: dict[str, Any]) -> SalesReceipt:
    return SalesReceipt(
        id=_cell(row, "id"),
        store_id=_cell(row, "store_id"),
        business_date=_day(row, "business_date"),
        total_incl_tax=_int(row, "total_incl_tax"),
        subtotal_excl_tax=_int(row, "subtotal_excl_tax"),
        tax_total=_int(row, "tax_total"),
        guest_count=_int(row, "guest_count"),
        status=_enum(row, "status", SalesReceiptStatus),
    )


def _split(row: dict[str, Any]) -> PaymentSplit:
    return PaymentSplit(
        id=_cell(row, "id"),
        receipt_id=_cell(row, "receipt_id"),
        store_id=_cell(row, "store_id"),
        business_date=_day(row, "business_date"),
        method=_enum(row, "method", PaymentMethod),
        amount_incl_tax=_int(row, "amount_incl_tax"),
    )


def _expense(row: dict[str, Any]) -> Expense:
    return Expense(
        id=_cell(row, "id"),
        store_id=_cell(row, "store_id"),
        date=_day(row, "date"),
        amount=_int(row, "amount"),
        tax_amount=_int(row, "tax_amount"),
        category=_enum(row, "category", ExpenseCategory),
        payment_method=_enum(
            row, "payment_method", ExpensePaymentMethod, ExpensePaymentMethod.CASH
        ),
        status=_enum(row, "status", ExpenseStatus),
        vendor_id=_opt_str(row, "vendor_id"),
        vendor_name_raw=_opt_str(row, "vendor_name_raw"),
        employee_id=_opt_int(row, "employee_id"),
        is_reimbursed=_bool(row, "is_reimbursed"),
        reimbursed_at=_opt_datetime(row, "reimbursed_at"),
        memo=_cell(row, "memo"),
    )


def _cash_transaction(row: dict[str, Any]) -> CashTransaction:
    return CashTransaction(
        id=_cell(row, "id"),
        store_id=_cell(row, "store_id"),
        date=_day(row, "date"),
        type=_enum(row, "type", CashTransactionType),
        amount=_int(row, "amount"),
        category=_opt_enum(row, "category", CashTransactionCategory),
        time=_opt_datetime(row, "time"),
        vendor_name=_opt_str(row, "vendor_name"),
        description=_cell(row, "description"),
    )


def _closing(row: dict[str, Any]) -> DailyClosing:
    return DailyClosing(
        store_id=_cell(row, "store_id"),
        date=_day(row, "date"),
        previous_cash_balance=_int(row, "previous_cash_balance"),
        cash_sales=_int(row, "cash_sales"),
        cash_in_total=_int(row, "cash_in_total"),
        cash_out_total=_int(row, "cash_out_total"),
        actual_cash_balance=_int(row, "actual_cash_balance"),
        status=_enum(row, "status", ClosingStatus),
        note=_cell(row, "note"),
    )


def _time_record(row: dict[str, Any]) -> TimeRecord:
    return TimeRecord(
        id=_cell(row, "id"),
        employee_id=_int(row, "employee_id"),
        store_id=_cell(row, "store_id"),
        date=_day(row, "date"),
        clock_in_at=_opt_datetime(row, "clock_in_at"),
        clock_out_at=_opt_datetime(row, "clock_out_at"),
        break_minutes=_int(row, "break_minutes"),
        status=_enum(row, "status", TimeRecordStatus),
    )


def _vendor(row: dict[str, Any]) -> Vendor:
    active = _cell(row, "is_active")
    return Vendor(
        id=_cell(row, "id"),
        store_id=_cell(row, "store_id"),
        name=_cell(row, "name"),
        category=_enum(row, "category", VendorCategory, VendorCategory.OTHER),
        is_active=_bool(row, "is_active") if active else True,
    )


def _load(paths: DataPaths, kind: str, build: Callable[[dict[str, Any]], R]) -> list[R]:
    df = read_record_frame(paths.record_file(kind), kind)
    return _rows(df, kind, build)


def load_record_stores(paths: DataPaths) -> RecordStores:
    """Load every record kind from ``paths.records_dir`` into in-memory stores.

    Args:
        paths: DataPaths configuration.

    Returns:
        RecordStores holding one in-memory store per record kind.

    Raises:
        DataQualityError: If a file lacks required columns or holds a value
            that cannot be parsed (unknown status, malformed number or date).
    """
    logger.info("Loading record stores from %s", paths.records_dir)

    stores = RecordStores(
        sales=InMemorySalesStore(
            receipts=_load(paths, "receipts", _receipt),
            splits=_load(paths, "payment_splits", _split),
        ),
        expenses=InMemoryExpenseStore(_load(paths, "expenses", _expense)),
        cash_transactions=InMemoryCashTransactionStore(
            _load(paths, "cash_transactions", _cash_transaction)
        ),
        closings=InMemoryClosingStore(_load(paths, "closings", _closing)),
        time_records=InMemoryTimeRecordStore(_load(paths, "time_records", _time_record)),
        vendors=InMemoryVendorStore(_load(paths, "vendors", _vendor)),
    )
    return stores
