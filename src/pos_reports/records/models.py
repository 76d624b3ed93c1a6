"""Record models for the six operational record kinds.

Every record is an immutable value. Enumerations are string-valued so that
their values double as the wire strings stored in record CSV files, and their
declaration order is the stable display order used for tie-breaking.

Grain Reference:
    - SalesReceipt: one row per receipt (store x business date x receipt)
    - PaymentSplit: one row per receipt x payment method line
    - Expense: one row per expense entry
    - CashTransaction: one row per drawer cash movement
    - DailyClosing: one row per store x date
    - TimeRecord: one row per employee x date
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

# Absolute closing difference (currency units) at which a day is flagged.
CLOSING_ISSUE_THRESHOLD = 1000


class SalesReceiptStatus(str, Enum):
    POSTED = "posted"
    REFUNDED = "refunded"
    DRAFT = "draft"


# Receipts counted as revenue; refunds carry negative totals and net out.
REVENUE_STATUSES = (SalesReceiptStatus.POSTED, SalesReceiptStatus.REFUNDED)


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    QR = "qr"
    OTHER = "other"


class ExpenseCategory(str, Enum):
    FOOD = "food"
    DRINK = "drink"
    CONSUMABLE = "consumable"
    UTILITY = "utility"
    MISC = "misc"
    TRANSPORTATION = "transportation"
    EQUIPMENT = "equipment"


class ExpensePaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    EMPLOYEE_ADVANCE = "employee_advance"


class ExpenseStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class CashTransactionType(str, Enum):
    IN = "in"
    OUT = "out"

    @property
    def sign(self) -> int:
        """+1 for money into the drawer, -1 for money out."""
        return 1 if self is CashTransactionType.IN else -1


class CashTransactionCategory(str, Enum):
    CHANGE_PREP = "change_prep"
    CHANGE_RETURN = "change_return"
    PURCHASE = "purchase"
    EXPENSE_REIMBURSE = "expense_reimburse"
    DEPOSIT_TO_BANK = "deposit_to_bank"
    OTHER = "other"


class ClosingStatus(str, Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    APPROVED = "approved"


# A draft closing only holds the automatic calculation; it is provisional.
SETTLED_CLOSING_STATUSES = (ClosingStatus.CONFIRMED, ClosingStatus.APPROVED)


class TimeRecordStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    REJECTED = "rejected"


class VendorCategory(str, Enum):
    FOOD_SUPPLIER = "food_supplier"
    DRINK_SUPPLIER = "drink_supplier"
    CONSUMABLE = "consumable"
    SERVICE = "service"
    OTHER = "other"


@dataclass(frozen=True)
class SalesReceipt:
    """One point-of-sale receipt.

    Attributes:
        id: Receipt identifier.
        store_id: Store the receipt belongs to.
        business_date: Business day of the sale.
        total_incl_tax: Total including tax (negative for refunds).
        subtotal_excl_tax: Total excluding tax.
        tax_total: Tax amount.
        guest_count: Number of guests served on the receipt.
        status: Posting status.
    """

    id: str
    store_id: str
    business_date: date
    total_incl_tax: int
    subtotal_excl_tax: int
    tax_total: int
    guest_count: int = 0
    status: SalesReceiptStatus = SalesReceiptStatus.POSTED


@dataclass(frozen=True)
class PaymentSplit:
    """The part of a receipt paid with one payment method."""

    id: str
    receipt_id: str
    store_id: str
    business_date: date
    method: PaymentMethod
    amount_incl_tax: int


@dataclass(frozen=True)
class Expense:
    """An expense entry.

    ``vendor_id`` references a Vendor record; ``vendor_name_raw`` is the free
    text typed when no vendor record was picked. ``employee_id`` is set for
    employee advances awaiting reimbursement.
    """

    id: str
    store_id: str
    date: date
    amount: int
    category: ExpenseCategory
    payment_method: ExpensePaymentMethod = ExpensePaymentMethod.CASH
    status: ExpenseStatus = ExpenseStatus.DRAFT
    tax_amount: int = 0
    vendor_id: Optional[str] = None
    vendor_name_raw: Optional[str] = None
    employee_id: Optional[int] = None
    is_reimbursed: bool = False
    reimbursed_at: Optional[datetime] = None
    memo: str = ""


@dataclass(frozen=True)
class CashTransaction:
    """A cash movement into or out of the drawer."""

    id: str
    store_id: str
    date: date
    type: CashTransactionType
    amount: int
    category: Optional[CashTransactionCategory] = None
    time: Optional[datetime] = None
    vendor_name: Optional[str] = None
    description: str = ""

    @property
    def signed_amount(self) -> int:
        return self.type.sign * self.amount


@dataclass(frozen=True)
class DailyClosing:
    """Cash drawer closing of one store for one day.

    Attributes:
        store_id: Store the drawer belongs to.
        date: Closed day.
        previous_cash_balance: Drawer balance carried over from the previous day.
        cash_sales: Cash sales of the day.
        cash_in_total: Cash put into the drawer (change preparation etc.).
        cash_out_total: Cash taken out (purchases, reimbursements, deposits).
        actual_cash_balance: Counted balance.
        status: Closing workflow status.
        note: Free text note.
    """

    store_id: str
    date: date
    previous_cash_balance: int
    cash_sales: int
    cash_in_total: int
    cash_out_total: int
    actual_cash_balance: int
    status: ClosingStatus = ClosingStatus.DRAFT
    note: str = ""

    @property
    def expected_cash_balance(self) -> int:
        """Theoretical drawer balance."""
        return (
            self.previous_cash_balance
            + self.cash_sales
            + self.cash_in_total
            - self.cash_out_total
        )

    @property
    def difference(self) -> int:
        """Counted minus expected balance."""
        return self.actual_cash_balance - self.expected_cash_balance

    @property
    def has_issue(self) -> bool:
        return abs(self.difference) >= CLOSING_ISSUE_THRESHOLD

    @property
    def is_settled(self) -> bool:
        """True for confirmed or approved closings."""
        return self.status in SETTLED_CLOSING_STATUSES


@dataclass(frozen=True)
class TimeRecord:
    """Attendance of one employee on one day."""

    id: str
    employee_id: int
    store_id: str
    date: date
    clock_in_at: Optional[datetime] = None
    clock_out_at: Optional[datetime] = None
    break_minutes: int = 0
    status: TimeRecordStatus = TimeRecordStatus.DRAFT

    def worked_minutes(self, now: Optional[datetime] = None) -> int:
        """Minutes worked net of breaks, never negative.

        Args:
            now: Stand-in clock-out for an in-progress shift. Only pass it
                for live display; closed-period aggregation leaves it unset
                so that a shift without a clock-out counts zero.

        Returns:
            Whole minutes worked.
        """
        if self.clock_in_at is None:
            return 0
        end = self.clock_out_at or now
        if end is None:
            return 0
        seconds = (end - self.clock_in_at).total_seconds() - self.break_minutes * 60
        return max(0, int(seconds // 60))


@dataclass(frozen=True)
class Vendor:
    """A supplier that expenses can reference."""

    id: str
    store_id: str
    name: str
    category: VendorCategory = VendorCategory.OTHER
    is_active: bool = True


@dataclass(frozen=True)
class CostCategorySetting:
    """Whether an expense category counts as cost of goods sold for a store."""

    expense_category: ExpenseCategory
    is_cogs: bool
