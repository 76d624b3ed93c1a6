"""Shared fixtures: empty in-memory stores and record builders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

import pytest

from pos_reports.analytics.daily import DailyAggregator
from pos_reports.analytics.monthly import MonthlyAggregator
from pos_reports.records.memory import (
    InMemoryCashTransactionStore,
    InMemoryClosingStore,
    InMemoryExpenseStore,
    InMemorySalesStore,
    InMemoryTimeRecordStore,
    InMemoryVendorStore,
)
from pos_reports.records.models import (
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    PaymentMethod,
    PaymentSplit,
    SalesReceipt,
    SalesReceiptStatus,
)
from pos_reports.records.settings import CategorySettingsStore
from pos_reports.stores import StoreDirectory, StoreInfo

STORE = "store_1"


@dataclass
class Stores:
    sales: InMemorySalesStore
    expenses: InMemoryExpenseStore
    cash_transactions: InMemoryCashTransactionStore
    closings: InMemoryClosingStore
    time_records: InMemoryTimeRecordStore
    vendors: InMemoryVendorStore
    settings: CategorySettingsStore

    def daily(self) -> DailyAggregator:
        return DailyAggregator(
            self.sales,
            self.expenses,
            self.cash_transactions,
            self.closings,
            self.time_records,
            self.settings,
        )

    def monthly(self, directory: Optional[StoreDirectory] = None) -> MonthlyAggregator:
        return MonthlyAggregator(
            self.sales,
            self.expenses,
            self.cash_transactions,
            self.closings,
            self.time_records,
            self.settings,
            vendors=self.vendors,
            directory=directory,
        )

    def add_sale(
        self,
        receipt_id: str,
        day: date,
        total: int,
        method: PaymentMethod = PaymentMethod.CASH,
        paid: Optional[int] = None,
        guests: int = 1,
        status: SalesReceiptStatus = SalesReceiptStatus.POSTED,
    ) -> None:
        """Add a receipt with 10% tax and one payment split covering ``paid``."""
        tax = total // 11
        self.sales.add_receipt(
            SalesReceipt(
                id=receipt_id,
                store_id=STORE,
                business_date=day,
                total_incl_tax=total,
                subtotal_excl_tax=total - tax,
                tax_total=tax,
                guest_count=guests,
                status=status,
            )
        )
        self.sales.add_split(
            PaymentSplit(
                id=f"{receipt_id}-1",
                receipt_id=receipt_id,
                store_id=STORE,
                business_date=day,
                method=method,
                amount_incl_tax=total if paid is None else paid,
            )
        )

    def add_expense(
        self,
        expense_id: str,
        day: date,
        amount: int,
        category: ExpenseCategory = ExpenseCategory.FOOD,
        status: ExpenseStatus = ExpenseStatus.APPROVED,
        **kwargs,
    ) -> None:
        self.expenses.save(
            Expense(
                id=expense_id,
                store_id=STORE,
                date=day,
                amount=amount,
                category=category,
                status=status,
                **kwargs,
            )
        )


@pytest.fixture
def stores() -> Stores:
    """Empty in-memory stores for one test."""
    return Stores(
        sales=InMemorySalesStore(),
        expenses=InMemoryExpenseStore(),
        cash_transactions=InMemoryCashTransactionStore(),
        closings=InMemoryClosingStore(),
        time_records=InMemoryTimeRecordStore(),
        vendors=InMemoryVendorStore(),
        settings=CategorySettingsStore(),
    )


@pytest.fixture
def directory() -> StoreDirectory:
    return StoreDirectory(
        {
            STORE: StoreInfo(
                store_id=STORE,
                name="Main Street",
                employees={1: "Taro Yamada", 2: "Hanako Sato"},
            )
        }
    )
