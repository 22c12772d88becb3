"""SQLAlchemy ORM models for customers, credit accounts and credit transactions"""

import uuid
from sqlalchemy import Column, String, Numeric, DateTime, Date, Integer, ForeignKey, Text, JSON
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class CustomerRecord(Base):
    """Customer directory entry"""

    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=_uuid)
    owner_id = Column(Text, nullable=False, index=True)
    store_id = Column(Text, nullable=True)
    name = Column(Text, nullable=False)
    name_normalized = Column(Text, nullable=False, index=True)
    phone = Column(String(32), nullable=True, index=True)  # digits only
    email = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CreditAccountRecord(Base):
    """Per-customer crediário balance"""

    __tablename__ = "credit_accounts"

    id = Column(String(36), primary_key=True, default=_uuid)
    owner_id = Column(Text, nullable=False, index=True)
    store_id = Column(Text, nullable=True)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=True)
    customer_name = Column(Text, nullable=False)
    customer_phone = Column(String(32), nullable=False, index=True)
    total_debt = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    transactions = relationship(
        "CreditTransactionRecord",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="CreditTransactionRecord.date",
    )


class CreditTransactionRecord(Base):
    """Immutable debt/payment event with optional installment schedule metadata"""

    __tablename__ = "credit_transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    credit_account_id = Column(
        String(36), ForeignKey("credit_accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_id = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)  # debt | payment
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Installment plan snapshot
    installments = Column(Integer, nullable=True)
    installment_value = Column(Numeric(12, 2), nullable=True)
    frequency = Column(String(16), nullable=True)
    first_payment_date = Column(Date, nullable=True)
    final_due_date = Column(Date, nullable=True)

    line_items = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("CreditAccountRecord", back_populates="transactions")
