"""Credit account ledger - owns the authoritative total_debt per customer"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from urllib.parse import quote

from crediario.config import settings
from crediario.domain.customers import normalize_phone
from crediario.domain.exceptions import AccountNotFound, DuplicateAccount, InvalidAmount, NonZeroBalance
from crediario.domain.models import (
    CreditAccount,
    CreditTransaction,
    Customer,
    InstallmentPlan,
    LineItem,
    StoreContext,
    TransactionType,
)
from crediario.domain.ports import CreditStore
from crediario.utils.money import format_brl, to_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def _positive(amount) -> Decimal:
    try:
        value = to_money(amount)
    except (ArithmeticError, TypeError, ValueError) as e:
        raise InvalidAmount(f"Invalid amount: {amount!r}") from e
    if value <= 0:
        raise InvalidAmount(f"Amount must be greater than zero, got {amount}")
    return value


def debit_balance(balance: Decimal, amount: Decimal) -> Decimal:
    """Balance after a debt"""
    return to_money(balance) + _positive(amount)


def credit_balance(balance: Decimal, amount: Decimal) -> Decimal:
    """Balance after a payment, clamped at zero; overpayment is discarded"""
    return max(ZERO, to_money(balance) - _positive(amount))


@dataclass
class PortfolioSummary:
    total_debt: Decimal
    clients_with_debt: int
    total_clients: int


class CreditLedger:
    """Applies debt and payment transactions to credit accounts"""

    def __init__(self, store: CreditStore):
        self.store = store

    def get_account(self, account_id: str, ctx: StoreContext) -> CreditAccount:
        account = self.store.get_account(ctx.owner_id, account_id)
        if account is None:
            raise AccountNotFound(f"Credit account {account_id} not found")
        return account

    def list_accounts(self, ctx: StoreContext) -> List[CreditAccount]:
        """Owner's accounts, largest debt first"""
        return sorted(self.store.list_accounts(ctx.owner_id), key=lambda a: a.total_debt, reverse=True)

    def summary(self, accounts: List[CreditAccount]) -> PortfolioSummary:
        return PortfolioSummary(
            total_debt=sum((a.total_debt for a in accounts), ZERO),
            clients_with_debt=sum(1 for a in accounts if a.total_debt > 0),
            total_clients=len(accounts),
        )

    def history(self, account_id: str, ctx: StoreContext) -> List[CreditTransaction]:
        self.get_account(account_id, ctx)
        return self.store.list_transactions(account_id)

    def create_account(self, customer: Customer, ctx: StoreContext) -> CreditAccount:
        """
        Open a credit account for a customer.

        Raises:
            DuplicateAccount: an account already exists for the customer's
                normalized phone (re-checked here even when callers pre-check)
        """
        phone = normalize_phone(customer.phone)
        existing = self.store.find_account_by_phone(ctx.owner_id, phone)
        if existing:
            raise DuplicateAccount(phone, existing)

        account = self.store.create_account(
            owner_id=ctx.owner_id,
            customer_id=customer.id,
            customer_name=" ".join(customer.name.split()),
            customer_phone=phone,
            store_id=ctx.store_id,
        )
        logger.info(
            "Credit account created",
            extra={"owner_id": ctx.owner_id, "account_id": account.id, "step": "create_account"},
        )
        return account

    def apply_debt(self, account_id: str, amount, ctx: StoreContext) -> Decimal:
        account = self.get_account(account_id, ctx)
        new_balance = debit_balance(account.total_debt, amount)
        self.store.update_balance(account.id, new_balance)
        return new_balance

    def apply_payment(self, account_id: str, amount, ctx: StoreContext) -> Decimal:
        account = self.get_account(account_id, ctx)
        new_balance = credit_balance(account.total_debt, amount)
        self.store.update_balance(account.id, new_balance)
        return new_balance

    def record_transaction(
        self,
        account_id: str,
        type: TransactionType,
        amount,
        ctx: StoreContext,
        description: str = "",
        plan: Optional[InstallmentPlan] = None,
        line_items: Optional[List[LineItem]] = None,
        when: Optional[datetime] = None,
    ) -> tuple[CreditTransaction, Decimal]:
        """
        Persist an immutable transaction and apply it to the balance.

        Returns:
            (stored transaction, new balance)
        """
        amount = _positive(amount)
        type = TransactionType(type)
        account = self.get_account(account_id, ctx)

        transaction = CreditTransaction(
            id=None,
            credit_account_id=account.id,
            owner_id=ctx.owner_id,
            type=type,
            amount=amount,
            description=description or "",
            date=when or datetime.utcnow(),
            line_items=list(line_items or []),
        )
        if plan is not None:
            transaction.installments = plan.count
            transaction.installment_value = plan.installment_value
            transaction.frequency = plan.frequency
            transaction.first_payment_date = plan.first_due_date
            transaction.final_due_date = plan.final_due_date

        stored = self.store.create_transaction(transaction)

        if type == TransactionType.DEBT:
            new_balance = self.apply_debt(account.id, amount, ctx)
        else:
            new_balance = self.apply_payment(account.id, amount, ctx)

        logger.info(
            "Credit transaction recorded",
            extra={
                "owner_id": ctx.owner_id,
                "account_id": account.id,
                "transaction_type": type.value,
                "amount": str(amount),
                "new_balance": str(new_balance),
            },
        )
        return stored, new_balance

    def delete_account(self, account_id: str, ctx: StoreContext) -> None:
        """
        Raises:
            NonZeroBalance: account still has outstanding debt
        """
        account = self.get_account(account_id, ctx)
        if account.total_debt > 0:
            raise NonZeroBalance(account.id, account.total_debt)
        self.store.delete_account(account.id)
        logger.info("Credit account deleted", extra={"owner_id": ctx.owner_id, "account_id": account.id})


def payment_reminder_link(account: CreditAccount) -> Optional[str]:
    """WhatsApp deep link reminding the customer of the outstanding balance"""
    phone = normalize_phone(account.customer_phone)
    if not phone:
        return None
    message = (
        f"Olá {account.customer_name}! 👋\n\n"
        "Este é um lembrete amigável sobre seu saldo pendente no Crediário:\n"
        f"💰 Valor: {format_brl(account.total_debt)}\n\n"
        "Fique à vontade para entrar em contato para combinarmos o pagamento! 😊"
    )
    return f"https://wa.me/{settings.reminder_country_code}{phone}?text={quote(message)}"
