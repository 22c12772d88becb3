"""Data access layer for customers, credit accounts and credit transactions"""

from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from crediario.infrastructure.database.models import CustomerRecord, CreditAccountRecord, CreditTransactionRecord
from crediario.domain.customers import normalize_name
from crediario.domain.models import (
    CreditAccount,
    CreditTransaction,
    Customer,
    Frequency,
    LineItem,
    TransactionType,
)
from crediario.utils.money import to_money


def _to_customer(record: CustomerRecord) -> Customer:
    return Customer(
        id=record.id,
        name=record.name,
        phone=record.phone or "",
        owner_id=record.owner_id,
        email=record.email,
        address=record.address,
        store_id=record.store_id,
    )


def _to_account(record: CreditAccountRecord) -> CreditAccount:
    return CreditAccount(
        id=record.id,
        owner_id=record.owner_id,
        customer_id=record.customer_id,
        customer_name=record.customer_name,
        customer_phone=record.customer_phone,
        total_debt=to_money(record.total_debt),
        created_at=record.created_at,
        store_id=record.store_id,
    )


def _to_transaction(record: CreditTransactionRecord) -> CreditTransaction:
    return CreditTransaction(
        id=record.id,
        credit_account_id=record.credit_account_id,
        owner_id=record.owner_id,
        type=TransactionType(record.type),
        amount=to_money(record.amount),
        description=record.description or "",
        date=record.date,
        installments=record.installments,
        installment_value=to_money(record.installment_value) if record.installment_value is not None else None,
        frequency=Frequency(record.frequency) if record.frequency else None,
        first_payment_date=record.first_payment_date,
        final_due_date=record.final_due_date,
        line_items=[
            LineItem(
                product_id=item["product_id"],
                product_name=item["product_name"],
                unit_price=Decimal(item["unit_price"]),
                quantity=item["quantity"],
            )
            for item in (record.line_items or [])
        ],
    )


class CustomerRepository:
    """Customer directory backed by the customers table"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_phone(self, owner_id: str, phone: str) -> Optional[Customer]:
        record = (
            self.db.query(CustomerRecord)
            .filter(CustomerRecord.owner_id == owner_id, CustomerRecord.phone == phone)
            .order_by(CustomerRecord.created_at)
            .first()
        )
        return _to_customer(record) if record else None

    def find_by_name(self, owner_id: str, name: str) -> Optional[Customer]:
        record = (
            self.db.query(CustomerRecord)
            .filter(CustomerRecord.owner_id == owner_id, CustomerRecord.name_normalized == normalize_name(name))
            .order_by(CustomerRecord.created_at)
            .first()
        )
        return _to_customer(record) if record else None

    def create(self, customer: Customer) -> Customer:
        record = CustomerRecord(
            owner_id=customer.owner_id,
            store_id=customer.store_id,
            name=customer.name,
            name_normalized=normalize_name(customer.name),
            phone=customer.phone or None,
            email=customer.email,
            address=customer.address,
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return _to_customer(record)


class CreditRepository:
    """Credit accounts and their transactions"""

    def __init__(self, db: Session):
        self.db = db

    def _account(self, account_id: str) -> Optional[CreditAccountRecord]:
        return self.db.get(CreditAccountRecord, account_id)

    def list_accounts(self, owner_id: str) -> List[CreditAccount]:
        records = (
            self.db.query(CreditAccountRecord)
            .filter(CreditAccountRecord.owner_id == owner_id)
            .order_by(CreditAccountRecord.total_debt.desc())
            .all()
        )
        return [_to_account(r) for r in records]

    def get_account(self, owner_id: str, account_id: str) -> Optional[CreditAccount]:
        record = self._account(account_id)
        if record is None or record.owner_id != owner_id:
            return None
        return _to_account(record)

    def find_account_by_phone(self, owner_id: str, phone: str) -> Optional[CreditAccount]:
        record = (
            self.db.query(CreditAccountRecord)
            .filter(CreditAccountRecord.owner_id == owner_id, CreditAccountRecord.customer_phone == phone)
            .first()
        )
        return _to_account(record) if record else None

    def create_account(
        self,
        owner_id: str,
        customer_id: Optional[str],
        customer_name: str,
        customer_phone: str,
        store_id: Optional[str] = None,
    ) -> CreditAccount:
        record = CreditAccountRecord(
            owner_id=owner_id,
            store_id=store_id,
            customer_id=customer_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            total_debt=Decimal("0.00"),
        )
        self.db.add(record)
        self.db.flush()
        return _to_account(record)

    def update_balance(self, account_id: str, new_balance: Decimal) -> None:
        record = self._account(account_id)
        record.total_debt = new_balance
        self.db.flush()

    def delete_account(self, account_id: str) -> None:
        record = self._account(account_id)
        self.db.delete(record)
        self.db.flush()

    def list_transactions(self, account_id: str) -> List[CreditTransaction]:
        records = (
            self.db.query(CreditTransactionRecord)
            .filter(CreditTransactionRecord.credit_account_id == account_id)
            .order_by(CreditTransactionRecord.date.desc())
            .all()
        )
        return [_to_transaction(r) for r in records]

    def create_transaction(self, transaction: CreditTransaction) -> CreditTransaction:
        record = CreditTransactionRecord(
            credit_account_id=transaction.credit_account_id,
            owner_id=transaction.owner_id,
            type=transaction.type.value,
            amount=transaction.amount,
            description=transaction.description,
            date=transaction.date,
            installments=transaction.installments,
            installment_value=transaction.installment_value,
            frequency=transaction.frequency.value if transaction.frequency else None,
            first_payment_date=transaction.first_payment_date,
            final_due_date=transaction.final_due_date,
            line_items=[
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "unit_price": str(item.unit_price),
                    "quantity": item.quantity,
                    "line_total": str(item.line_total),
                }
                for item in transaction.line_items
            ]
            or None,
        )
        self.db.add(record)
        self.db.flush()
        return _to_transaction(record)
