"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from crediario.domain.models import (
    CreditAccount,
    CreditTransaction,
    DebtOperationForm,
    Frequency,
    InstallmentPlan,
    LineItem,
    TransactionType,
)
from crediario.domain.stock import StockIssue
from crediario.utils.date_utils import format_br_date


class LineItemSchema(BaseModel):
    """One product entry in a debt operation"""

    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    unit_price: Decimal = Field(..., gt=0, decimal_places=2)
    quantity: int = Field(..., gt=0)

    def to_domain(self) -> LineItem:
        return LineItem(
            product_id=self.product_id,
            product_name=self.product_name,
            unit_price=self.unit_price,
            quantity=self.quantity,
        )


class SchedulePreviewRequest(BaseModel):
    """Request body for POST /v1/schedule/preview"""

    total: Decimal = Field(..., gt=0)
    installments: int
    frequency: Frequency
    first_due_date: str = Field(..., description="DD/MM/YYYY")


class ScheduleResponse(BaseModel):
    total: Decimal
    installments: int
    frequency: Frequency
    installment_value: Decimal
    due_dates: List[str]
    first_due_date: str
    final_due_date: str

    @classmethod
    def from_plan(cls, plan: InstallmentPlan) -> "ScheduleResponse":
        return cls(
            total=plan.total,
            installments=plan.count,
            frequency=plan.frequency,
            installment_value=plan.installment_value,
            due_dates=[format_br_date(d) for d in plan.due_dates],
            first_due_date=format_br_date(plan.first_due_date),
            final_due_date=format_br_date(plan.final_due_date),
        )


class StageItemRequest(BaseModel):
    """Request body for POST /v1/line-items/stage"""

    staged: List[LineItemSchema] = []
    item: LineItemSchema


class StockIssueSchema(BaseModel):
    product_id: str
    product_name: str
    available: int
    requested: int
    reason: str

    @classmethod
    def from_issue(cls, issue: StockIssue) -> "StockIssueSchema":
        return cls(**issue.__dict__)


class StageItemResponse(BaseModel):
    accepted: bool
    issue: Optional[StockIssueSchema] = None
    staged: List[LineItemSchema]


class CustomerSchema(BaseModel):
    id: Optional[str]
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None


class AccountSchema(BaseModel):
    id: str
    customer_id: Optional[str]
    customer_name: str
    customer_phone: str
    total_debt: Decimal
    created_at: Optional[datetime] = None

    @classmethod
    def from_account(cls, account: CreditAccount) -> "AccountSchema":
        return cls(
            id=account.id,
            customer_id=account.customer_id,
            customer_name=account.customer_name,
            customer_phone=account.customer_phone,
            total_debt=account.total_debt,
            created_at=account.created_at,
        )


class ResolveResponse(BaseModel):
    """Response for GET /v1/customers/resolve"""

    kind: str
    customer: Optional[CustomerSchema] = None
    account: Optional[AccountSchema] = None
    suggestion: Optional[CustomerSchema] = None


class TransactionSchema(BaseModel):
    id: Optional[str]
    credit_account_id: str
    type: TransactionType
    amount: Decimal
    description: str
    date: datetime
    installments: Optional[int] = None
    installment_value: Optional[Decimal] = None
    frequency: Optional[Frequency] = None
    first_payment_date: Optional[date] = None
    final_due_date: Optional[date] = None
    line_items: List[LineItemSchema] = []

    @classmethod
    def from_transaction(cls, txn: CreditTransaction) -> "TransactionSchema":
        return cls(
            id=txn.id,
            credit_account_id=txn.credit_account_id,
            type=txn.type,
            amount=txn.amount,
            description=txn.description,
            date=txn.date,
            installments=txn.installments,
            installment_value=txn.installment_value,
            frequency=txn.frequency,
            first_payment_date=txn.first_payment_date,
            final_due_date=txn.final_due_date,
            line_items=[LineItemSchema(**item.__dict__) for item in txn.line_items],
        )


class OperationRequest(BaseModel):
    """Request body for POST /v1/operations"""

    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    line_items: List[LineItemSchema]
    installments: int
    frequency: Frequency
    first_due_date: str = Field(..., description="DD/MM/YYYY")
    description: str = ""

    def to_domain(self) -> DebtOperationForm:
        return DebtOperationForm(
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            line_items=[item.to_domain() for item in self.line_items],
            installments=self.installments,
            frequency=self.frequency,
            first_due_date=self.first_due_date,
            description=self.description,
            customer_email=self.customer_email,
            customer_address=self.customer_address,
        )


class OperationResponse(BaseModel):
    """Response for POST /v1/operations"""

    status: str  # completed | partial
    account: AccountSchema
    transaction: TransactionSchema
    schedule: ScheduleResponse
    customer_created: bool
    account_created: bool
    cash_flow_posted: bool
    failed_products: List[str]
    warnings: List[str]
    history: List[TransactionSchema]


class AccountCreateRequest(BaseModel):
    """Request body for POST /v1/accounts"""

    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)


class PortfolioSchema(BaseModel):
    total_debt: Decimal
    clients_with_debt: int
    total_clients: int


class AccountListResponse(BaseModel):
    """Response for GET /v1/accounts"""

    summary: PortfolioSchema
    accounts: List[AccountSchema]


class TransactionRequest(BaseModel):
    """Request body for manual debt/payment registration"""

    amount: Decimal = Field(..., gt=0)
    description: str = ""


class TransactionResponse(BaseModel):
    transaction: TransactionSchema
    total_debt: Decimal


class ReminderResponse(BaseModel):
    account_id: str
    total_debt: Decimal
    link: Optional[str]
