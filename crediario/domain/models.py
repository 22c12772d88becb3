"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class Frequency(str, Enum):
    """Spacing between installment due dates"""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class TransactionType(str, Enum):
    DEBT = "debt"
    PAYMENT = "payment"


class ResolutionKind(str, Enum):
    NEW_CUSTOMER = "new_customer"
    EXISTING_CUSTOMER_NO_CREDIT = "existing_customer_no_credit"
    EXISTING_CREDIT_ACCOUNT = "existing_credit_account"


@dataclass(frozen=True)
class StoreContext:
    """Acting store owner, passed explicitly into every ledger call"""

    owner_id: str
    store_id: Optional[str] = None


@dataclass
class Customer:
    """Customer directory identity record"""

    id: Optional[str]
    name: str
    phone: str  # digits only
    owner_id: str
    email: Optional[str] = None
    address: Optional[str] = None
    store_id: Optional[str] = None


@dataclass
class CreditAccount:
    """Per-customer running balance"""

    id: str
    owner_id: str
    customer_id: Optional[str]
    customer_name: str
    customer_phone: str
    total_debt: Decimal
    created_at: datetime
    store_id: Optional[str] = None


@dataclass
class LineItem:
    """One product/quantity/price entry within a debt operation"""

    product_id: str
    product_name: str
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price * self.quantity).quantize(Decimal("0.01"))


@dataclass
class InstallmentPlan:
    """Derived repayment schedule; persisted only as transaction metadata"""

    total: Decimal
    count: int
    frequency: Frequency
    first_due_date: date
    installment_value: Decimal
    due_dates: List[date]

    @property
    def final_due_date(self) -> date:
        return self.due_dates[-1]


@dataclass
class CreditTransaction:
    """Immutable debt or payment event against a credit account"""

    id: Optional[str]
    credit_account_id: str
    owner_id: str
    type: TransactionType
    amount: Decimal
    description: str
    date: datetime
    installments: Optional[int] = None
    installment_value: Optional[Decimal] = None
    frequency: Optional[Frequency] = None
    first_payment_date: Optional[date] = None
    final_due_date: Optional[date] = None
    line_items: List[LineItem] = field(default_factory=list)


@dataclass
class CashFlowEntry:
    """Income/expense record consumed by financial reporting"""

    type: str  # "income" or "expense"
    amount: Decimal
    description: str
    date: datetime
    category: str
    payment_method: str
    owner_id: Optional[str] = None
    store_id: Optional[str] = None


@dataclass
class Resolution:
    """Outcome of matching a name/phone against customers and accounts"""

    kind: ResolutionKind
    customer: Optional[Customer] = None
    account: Optional[CreditAccount] = None
    suggestion: Optional[Customer] = None  # name-only match, never auto-applied


@dataclass
class DebtOperationForm:
    """Raw "new operation" submission as entered by the store owner"""

    customer_name: str
    customer_phone: str
    line_items: List[LineItem]
    installments: int
    frequency: Frequency
    first_due_date: str  # DD/MM/YYYY
    description: str = ""
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.line_items), Decimal("0.00"))


@dataclass
class OperationResult:
    """Outcome of a committed debt operation"""

    account: CreditAccount
    transaction: CreditTransaction
    plan: InstallmentPlan
    customer_created: bool
    account_created: bool
    warnings: List[str] = field(default_factory=list)
    failed_products: List[str] = field(default_factory=list)
    cash_flow_posted: bool = True
    history: List[CreditTransaction] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "partial" if self.warnings else "completed"
