"""Debt operation workflow: customer -> stock -> schedule -> ledger -> stock/cash-flow side effects"""

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from crediario.config import settings
from crediario.domain.customers import CustomerResolver, normalize_phone
from crediario.domain.exceptions import (
    ExistingCreditAccount,
    FormValidationError,
    InvalidScheduleInput,
    StockValidationError,
)
from crediario.domain.installments import (
    check_first_due_date,
    check_frequency,
    check_installment_count,
    compute_schedule,
)
from crediario.domain.ledger import CreditLedger
from crediario.domain.models import (
    CashFlowEntry,
    Customer,
    DebtOperationForm,
    OperationResult,
    ResolutionKind,
    StoreContext,
    TransactionType,
)
from crediario.domain.ports import CashFlowStore, Catalog, CustomerDirectory
from crediario.domain.stock import validate_line_items

logger = logging.getLogger(__name__)

# Characters people type inside phone numbers that are not part of the number
PHONE_FORMATTING = re.compile(r"[\s().+\-]")


def validate_form(form: DebtOperationForm) -> List[str]:
    """Collect every problem with the form; an empty list means it can be submitted"""
    errors = []

    if not (form.customer_name or "").strip():
        errors.append("Nome do cliente é obrigatório")

    phone = PHONE_FORMATTING.sub("", form.customer_phone or "")
    if not phone:
        errors.append("Telefone do cliente é obrigatório")
    elif not phone.isdigit():
        errors.append("Telefone deve conter apenas números")

    item_errors = []
    if not form.line_items:
        errors.append("Adicione pelo menos um produto")
    for item in form.line_items:
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
            item_errors.append(f"Quantidade inválida para {item.product_name}")
        if not isinstance(item.unit_price, Decimal) or item.unit_price <= 0:
            item_errors.append(f"Preço inválido para {item.product_name}")
    errors.extend(item_errors)

    # total is only defined once every line has a usable price and quantity
    if form.line_items and not item_errors and form.total <= 0:
        errors.append("Total deve ser maior que zero")

    for check, value in (
        (check_installment_count, form.installments),
        (check_frequency, form.frequency),
        (check_first_due_date, form.first_due_date),
    ):
        try:
            check(value)
        except InvalidScheduleInput as e:
            errors.append(str(e))

    return errors


def default_description(form: DebtOperationForm) -> str:
    return "Crediário: " + ", ".join(f"{item.product_name} x{item.quantity}" for item in form.line_items)


class DebtOperationOrchestrator:
    """
    Runs one "new operation" submission as a forward-only sequence of steps.

    Steps 1-5 abort with no committed state. Step 6 (persisting the debt
    transaction) is the commit point; stock decrements and the cash-flow
    posting after it are never rolled back, their failures come back as
    warnings on the result.
    """

    def __init__(
        self,
        directory: CustomerDirectory,
        ledger: CreditLedger,
        catalog: Catalog,
        cash_flow: CashFlowStore,
        on_commit: Optional[Callable[[], None]] = None,
    ):
        self.directory = directory
        self.ledger = ledger
        self.catalog = catalog
        self.cash_flow = cash_flow
        self.resolver = CustomerResolver(directory, ledger.store)
        self.on_commit = on_commit

    async def fetch_stock_snapshot(self, product_ids: List[str]) -> Dict[str, int]:
        snapshot = {}
        for product_id in dict.fromkeys(product_ids):
            snapshot[product_id] = await self.catalog.get_stock(product_id)
        return snapshot

    async def submit(self, form: DebtOperationForm, ctx: StoreContext) -> OperationResult:
        log_extra = {"owner_id": ctx.owner_id}

        # 1. Validate form
        errors = validate_form(form)
        if errors:
            raise FormValidationError(errors)
        plan = compute_schedule(form.total, form.installments, form.frequency, form.first_due_date)
        phone = normalize_phone(form.customer_phone)

        # 2. Resolve customer
        resolution = self.resolver.resolve(form.customer_name, phone, ctx)
        if resolution.kind == ResolutionKind.EXISTING_CREDIT_ACCOUNT:
            logger.info("Operation halted: customer already has credit", extra={**log_extra, "step": "resolve_customer"})
            raise ExistingCreditAccount(resolution.account)

        # 3. Create customer if new
        customer = resolution.customer
        customer_created = False
        if customer is None:
            customer = self.directory.create(
                Customer(
                    id=None,
                    name=" ".join(form.customer_name.split()),
                    phone=phone,
                    owner_id=ctx.owner_id,
                    email=form.customer_email,
                    address=form.customer_address,
                    store_id=ctx.store_id,
                )
            )
            customer_created = True
            logger.info("Customer created", extra={**log_extra, "step": "create_customer", "customer_id": customer.id})

        # 4. Re-validate stock against a fresh snapshot (hard gate)
        snapshot = await self.fetch_stock_snapshot([item.product_id for item in form.line_items])
        issues = validate_line_items(form.line_items, snapshot)
        if issues:
            logger.warning(
                "Operation rejected: insufficient stock",
                extra={**log_extra, "step": "validate_stock", "products": [i.product_id for i in issues]},
            )
            raise StockValidationError(issues)

        # 5. Create credit account
        account = self.ledger.create_account(customer, ctx)

        # 6. Persist the debt transaction (commit point)
        transaction, _ = self.ledger.record_transaction(
            account.id,
            TransactionType.DEBT,
            plan.total,
            ctx,
            description=form.description or default_description(form),
            plan=plan,
            line_items=form.line_items,
        )
        if self.on_commit:
            self.on_commit()
        logger.info(
            "Debt transaction committed",
            extra={**log_extra, "step": "persist_transaction", "account_id": account.id, "amount": str(plan.total)},
        )

        result = OperationResult(
            account=account,
            transaction=transaction,
            plan=plan,
            customer_created=customer_created,
            account_created=True,
        )

        # 7. Decrement stock per item; failures do not undo anything
        for item in form.line_items:
            try:
                await self.catalog.decrement_stock(item.product_id, item.quantity)
            except Exception as e:
                result.failed_products.append(item.product_name)
                logger.error(
                    f"Stock decrement failed: {e}",
                    extra={**log_extra, "step": "decrement_stock", "product_id": item.product_id},
                )
        if result.failed_products:
            result.warnings.append(
                f"Venda registrada, mas {len(result.failed_products)} produtos com erro de estoque "
                f"({', '.join(result.failed_products)}) - verifique manualmente"
            )

        # 8. Post cash-flow income
        try:
            await self.cash_flow.post_entry(
                CashFlowEntry(
                    type="income",
                    amount=plan.total,
                    description=f"Crediário: {account.customer_name}",
                    date=datetime.utcnow(),
                    category=settings.cash_flow_category,
                    payment_method=settings.cash_flow_payment_method,
                    owner_id=ctx.owner_id,
                    store_id=ctx.store_id,
                )
            )
        except Exception as e:
            result.cash_flow_posted = False
            result.warnings.append("Venda registrada, mas o lançamento no fluxo de caixa falhou - verifique manualmente")
            logger.error(f"Cash flow posting failed: {e}", extra={**log_extra, "step": "post_cash_flow"})

        # 9. Refresh the authoritative view
        result.account = self.ledger.get_account(account.id, ctx)
        result.history = self.ledger.history(account.id, ctx)

        return result
