"""Record store interfaces consumed by the aggregators.

This module defines the abstract base classes that every record store must
implement, so that the aggregators can run against the in-memory reference
stores, stores loaded from CSV files, or any other backend.

All ``start``/``end`` bounds are inclusive and compared by calendar day.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

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


class SalesStore(ABC):
    """Receipts and their payment splits."""

    @abstractmethod
    def fetch_receipts(
        self,
        store_id: str,
        start: date,
        end: date,
        statuses: Iterable[SalesReceiptStatus],
    ) -> list[SalesReceipt]:
        """Return the store's receipts in the range with one of ``statuses``, newest first."""
        pass

    @abstractmethod
    def fetch_payment_splits(
        self,
        store_id: str,
        start: date,
        end: date,
    ) -> list[PaymentSplit]:
        """Return the store's payment splits in the range."""
        pass


class ExpenseStore(ABC):
    """Expense entries with optional predicate filters."""

    @abstractmethod
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
        """Return matching expenses, newest first. ``None`` filters are ignored."""
        pass

    @abstractmethod
    def save(self, expense: Expense) -> None:
        """Insert the expense, or replace the one with the same id."""
        pass

    @abstractmethod
    def delete(self, expense_id: str) -> None:
        pass

    @abstractmethod
    def find_by_id(self, expense_id: str) -> Optional[Expense]:
        pass


class CashTransactionStore(ABC):
    """Drawer cash movements with optional predicate filters."""

    @abstractmethod
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
        """Return matching transactions, newest first. ``None`` filters are ignored."""
        pass

    @abstractmethod
    def save(self, transaction: CashTransaction) -> None:
        pass

    @abstractmethod
    def delete(self, transaction_id: str) -> None:
        pass

    @abstractmethod
    def find_by_id(self, transaction_id: str) -> Optional[CashTransaction]:
        pass


class ClosingStore(ABC):
    """One drawer closing per store and day."""

    @abstractmethod
    def load_closing(self, store_id: str, day: date) -> Optional[DailyClosing]:
        """Return the closing for the day, or None when the day was never closed."""
        pass

    @abstractmethod
    def save_closing(self, closing: DailyClosing) -> None:
        pass


class TimeRecordStore(ABC):
    """Attendance records keyed by employee and day."""

    @abstractmethod
    def load_all_time_records(self) -> list[TimeRecord]:
        """Return every record; callers filter by store, status and date."""
        pass

    @abstractmethod
    def load(self, employee_id: int, day: date) -> Optional[TimeRecord]:
        pass

    @abstractmethod
    def save(self, record: TimeRecord) -> None:
        pass

    @abstractmethod
    def delete(self, employee_id: int, day: date) -> None:
        pass


class VendorStore(ABC):
    """Suppliers referenced by expenses."""

    @abstractmethod
    def fetch_vendors(
        self,
        store_id: str,
        search: Optional[str] = None,
        category: Optional[VendorCategory] = None,
        is_active: Optional[bool] = None,
    ) -> list[Vendor]:
        """Return matching vendors sorted by name."""
        pass

    @abstractmethod
    def find_by_id(self, vendor_id: str) -> Optional[Vendor]:
        pass
