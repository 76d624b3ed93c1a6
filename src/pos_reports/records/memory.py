"""In-memory reference implementations of the record store interfaces.

These stores hold their records in plain Python containers. They back the
aggregators in tests and are what ``pos_reports.records.csv_loader`` builds
from record files on disk.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional

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
    DailyClosing,
    Expense,
    ExpenseCategory,
    ExpensePaymentMethod,
    ExpenseStatus,
    PaymentSplit,
    SalesReceipt,
    SalesReceiptStatus,
    TimeRecord,
    Vendor,
    VendorCategory,
)
from pos_reports.utils import date_key, in_day_range, to_day

logger = logging.getLogger(__name__)


class InMemorySalesStore(SalesStore):
    """Receipts and payment splits held in lists."""

    def __init__(
        self,
        receipts: Iterable[SalesReceipt] = (),
        splits: Iterable[PaymentSplit] = (),
    ) -> None:
        self._receipts = list(receipts)
        self._splits = list(splits)

    def add_receipt(self, receipt: SalesReceipt) -> None:
        self._receipts.append(receipt)

    def add_split(self, split: PaymentSplit) -> None:
        self._splits.append(split)

    def fetch_receipts(
        self,
        store_id: str,
        start: date,
        end: date,
        statuses: Iterable[SalesReceiptStatus],
    ) -> list[SalesReceipt]:
        start, end = to_day(start), to_day(end)
        wanted = set(statuses)
        result = [
            r
            for r in self._receipts
            if r.store_id == store_id
            and in_day_range(r.business_date, start, end)
            and r.status in wanted
        ]
        return sorted(result, key=lambda r: to_day(r.business_date), reverse=True)

    def fetch_payment_splits(
        self,
        store_id: str,
        start: date,
        end: date,
    ) -> list[PaymentSplit]:
        start, end = to_day(start), to_day(end)
        return [
            s
            for s in self._splits
            if s.store_id == store_id and in_day_range(s.business_date, start, end)
        ]


class InMemoryExpenseStore(ExpenseStore):
    """Expense entries keyed by id, in insertion order."""

    def __init__(self, expenses: Iterable[Expense] = ()) -> None:
        self._items: dict[str, Expense] = {e.id: e for e in expenses}

    def fetch_expenses(
        self,
        store_id: str,
        start: date,
        end: date,
        category: Optional[ExpenseCategory] = None,
        payment_method: Optional[ExpensePaymentMethod] = None,
        reimbursed: Optional[bool] = None,
        status: Optional[ExpenseStatus] = None,
        employee_id: Optional[int] = None,
    ) -> list[Expense]:
        start, end = to_day(start), to_day(end)
        result = []
        for e in self._items.values():
            if e.store_id != store_id or not in_day_range(e.date, start, end):
                continue
            if category is not None and e.category != category:
                continue
            if payment_method is not None and e.payment_method != payment_method:
                continue
            if reimbursed is not None and e.is_reimbursed != reimbursed:
                continue
            if status is not None and e.status != status:
                continue
            if employee_id is not None and e.employee_id != employee_id:
                continue
            result.append(e)
        return sorted(result, key=lambda e: to_day(e.date), reverse=True)

    def save(self, expense: Expense) -> None:
        self._items[expense.id] = expense

    def delete(self, expense_id: str) -> None:
        self._items.pop(expense_id, None)

    def find_by_id(self, expense_id: str) -> Optional[Expense]:
        return self._items.get(expense_id)


class InMemoryCashTransactionStore(CashTransactionStore):
    """Cash transactions keyed by id, in insertion order."""

    def __init__(self, transactions: Iterable[CashTransaction] = ()) -> None:
        self._items: dict[str, CashTransaction] = {t.id: t for t in transactions}

    def fetch_transactions(
        self,
        store_id: str,
        start: date,
        end: date,
        type: Optional[CashTransactionType] = None,
        category: Optional[CashTransactionCategory] = None,
        min_amount: Optional[int] = None,
        max_amount: Optional[int] = None,
    ) -> list[CashTransaction]:
        start, end = to_day(start), to_day(end)
        result = []
        for t in self._items.values():
            if t.store_id != store_id or not in_day_range(t.date, start, end):
                continue
            if type is not None and t.type != type:
                continue
            if category is not None and t.category != category:
                continue
            if min_amount is not None and t.amount < min_amount:
                continue
            if max_amount is not None and t.amount > max_amount:
                continue
            result.append(t)
        return sorted(result, key=_transaction_sort_key, reverse=True)

    def save(self, transaction: CashTransaction) -> None:
        self._items[transaction.id] = transaction

    def delete(self, transaction_id: str) -> None:
        self._items.pop(transaction_id, None)

    def find_by_id(self, transaction_id: str) -> Optional[CashTransaction]:
        return self._items.get(transaction_id)


def _transaction_sort_key(t: CashTransaction) -> tuple[date, datetime]:
    day = to_day(t.date)
    return day, t.time or datetime.combine(day, datetime.min.time())


class InMemoryClosingStore(ClosingStore):
    """Closings keyed by (store_id, YYYY-MM-DD)."""

    def __init__(self, closings: Iterable[DailyClosing] = ()) -> None:
        self._items: dict[tuple[str, str], DailyClosing] = {}
        for c in closings:
            self.save_closing(c)

    def load_closing(self, store_id: str, day: date) -> Optional[DailyClosing]:
        return self._items.get((store_id, date_key(day)))

    def save_closing(self, closing: DailyClosing) -> None:
        key = (closing.store_id, date_key(closing.date))
        if key in self._items:
            logger.debug("Replacing closing for %s on %s", *key)
        self._items[key] = closing


class InMemoryTimeRecordStore(TimeRecordStore):
    """Time records keyed by (employee_id, YYYY-MM-DD)."""

    def __init__(self, records: Iterable[TimeRecord] = ()) -> None:
        self._items: dict[tuple[int, str], TimeRecord] = {}
        for r in records:
            self.save(r)

    def load_all_time_records(self) -> list[TimeRecord]:
        return list(self._items.values())

    def load(self, employee_id: int, day: date) -> Optional[TimeRecord]:
        return self._items.get((employee_id, date_key(day)))

    def save(self, record: TimeRecord) -> None:
        self._items[(record.employee_id, date_key(record.date))] = record

    def delete(self, employee_id: int, day: date) -> None:
        self._items.pop((employee_id, date_key(day)), None)


class InMemoryVendorStore(VendorStore):
    """Vendors keyed by id."""

    def __init__(self, vendors: Iterable[Vendor] = ()) -> None:
        self._items: dict[str, Vendor] = {v.id: v for v in vendors}

    def fetch_vendors(
        self,
        store_id: str,
        search: Optional[str] = None,
        category: Optional[VendorCategory] = None,
        is_active: Optional[bool] = None,
    ) -> list[Vendor]:
        result = [v for v in self._items.values() if v.store_id == store_id]
        if search and search.strip():
            q = search.strip().lower()
            result = [v for v in result if q in v.name.lower()]
        if category is not None:
            result = [v for v in result if v.category == category]
        if is_active is not None:
            result = [v for v in result if v.is_active == is_active]
        return sorted(result, key=lambda v: v.name)

    def find_by_id(self, vendor_id: str) -> Optional[Vendor]:
        return self._items.get(vendor_id)
