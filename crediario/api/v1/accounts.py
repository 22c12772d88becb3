"""Credit account endpoints: listing, history, manual transactions, deletion, reminders"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from crediario.api.v1.schemas import (
    AccountCreateRequest,
    AccountListResponse,
    AccountSchema,
    PortfolioSchema,
    ReminderResponse,
    TransactionRequest,
    TransactionResponse,
    TransactionSchema,
)
from crediario.api.dependencies import get_customer_repository, get_ledger, get_request_id, get_store_context
from crediario.infrastructure.database.session import get_db
from crediario.infrastructure.database.repositories import CustomerRepository
from crediario.infrastructure.observability.metrics import ledger_transaction_counter
from crediario.domain.customers import normalize_phone
from crediario.domain.ledger import CreditLedger, payment_reminder_link
from crediario.domain.models import Customer, StoreContext, TransactionType
from crediario.domain.exceptions import AccountNotFound, DuplicateAccount, InvalidAmount, NonZeroBalance

router = APIRouter()


@router.get("/accounts", response_model=AccountListResponse)
def list_accounts(
    ctx: StoreContext = Depends(get_store_context),
    ledger: CreditLedger = Depends(get_ledger),
):
    """Owner's credit accounts, largest debt first, with portfolio totals"""
    accounts = ledger.list_accounts(ctx)
    summary = ledger.summary(accounts)
    return AccountListResponse(
        summary=PortfolioSchema(**summary.__dict__),
        accounts=[AccountSchema.from_account(a) for a in accounts],
    )


@router.post("/accounts", response_model=AccountSchema, status_code=201)
def create_account(
    request_body: AccountCreateRequest,
    ctx: StoreContext = Depends(get_store_context),
    db: Session = Depends(get_db),
    customers: CustomerRepository = Depends(get_customer_repository),
    ledger: CreditLedger = Depends(get_ledger),
):
    """Open a credit account with zero balance, reusing the directory customer when the phone matches"""
    phone = normalize_phone(request_body.customer_phone)
    if not phone:
        raise HTTPException(status_code=422, detail="Telefone deve conter números")

    try:
        customer = customers.find_by_phone(ctx.owner_id, phone) or customers.create(
            Customer(
                id=None,
                name=" ".join(request_body.customer_name.split()),
                phone=phone,
                owner_id=ctx.owner_id,
                store_id=ctx.store_id,
            )
        )
        account = ledger.create_account(customer, ctx)
        db.commit()
    except DuplicateAccount as e:
        db.rollback()
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Cliente já possui crediário. Visualize a conta existente.",
                "action": "view_account",
                "account": AccountSchema.from_account(e.account).model_dump(mode="json"),
            },
        )

    return AccountSchema.from_account(account)


@router.get("/accounts/{account_id}", response_model=AccountSchema)
def get_account(
    account_id: str,
    ctx: StoreContext = Depends(get_store_context),
    ledger: CreditLedger = Depends(get_ledger),
):
    try:
        return AccountSchema.from_account(ledger.get_account(account_id, ctx))
    except AccountNotFound:
        raise HTTPException(status_code=404, detail="Account not found")


@router.get("/accounts/{account_id}/transactions", response_model=List[TransactionSchema])
def get_transactions(
    account_id: str,
    ctx: StoreContext = Depends(get_store_context),
    ledger: CreditLedger = Depends(get_ledger),
):
    """Transaction history, most recent first"""
    try:
        transactions = ledger.history(account_id, ctx)
    except AccountNotFound:
        raise HTTPException(status_code=404, detail="Account not found")

    return [TransactionSchema.from_transaction(t) for t in transactions]


def _register(
    type: TransactionType,
    account_id: str,
    request_body: TransactionRequest,
    ctx: StoreContext,
    db: Session,
    ledger: CreditLedger,
    request_id: str,
) -> TransactionResponse:
    try:
        transaction, balance = ledger.record_transaction(
            account_id, type, request_body.amount, ctx, description=request_body.description
        )
        db.commit()
    except AccountNotFound:
        db.rollback()
        raise HTTPException(status_code=404, detail="Account not found")
    except InvalidAmount as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    ledger_transaction_counter.labels(type=type.value).inc()
    return TransactionResponse(transaction=TransactionSchema.from_transaction(transaction), total_debt=balance)


@router.post("/accounts/{account_id}/debts", response_model=TransactionResponse, status_code=201)
def register_debt(
    account_id: str,
    request_body: TransactionRequest,
    ctx: StoreContext = Depends(get_store_context),
    db: Session = Depends(get_db),
    ledger: CreditLedger = Depends(get_ledger),
    request_id: str = Depends(get_request_id),
):
    """Add a debt without line items or schedule"""
    return _register(TransactionType.DEBT, account_id, request_body, ctx, db, ledger, request_id)


@router.post("/accounts/{account_id}/payments", response_model=TransactionResponse, status_code=201)
def register_payment(
    account_id: str,
    request_body: TransactionRequest,
    ctx: StoreContext = Depends(get_store_context),
    db: Session = Depends(get_db),
    ledger: CreditLedger = Depends(get_ledger),
    request_id: str = Depends(get_request_id),
):
    """Record a payment; paying more than the balance settles it at zero"""
    return _register(TransactionType.PAYMENT, account_id, request_body, ctx, db, ledger, request_id)


@router.delete("/accounts/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    ctx: StoreContext = Depends(get_store_context),
    db: Session = Depends(get_db),
    ledger: CreditLedger = Depends(get_ledger),
):
    try:
        ledger.delete_account(account_id, ctx)
        db.commit()
    except AccountNotFound:
        raise HTTPException(status_code=404, detail="Account not found")
    except NonZeroBalance as e:
        db.rollback()
        raise HTTPException(
            status_code=409,
            detail={"message": "Conta com saldo devedor não pode ser excluída", "total_debt": str(e.balance)},
        )

    return Response(status_code=204)


@router.get("/accounts/{account_id}/reminder", response_model=ReminderResponse)
def get_reminder(
    account_id: str,
    ctx: StoreContext = Depends(get_store_context),
    ledger: CreditLedger = Depends(get_ledger),
):
    """WhatsApp link with a friendly reminder of the outstanding balance"""
    try:
        account = ledger.get_account(account_id, ctx)
    except AccountNotFound:
        raise HTTPException(status_code=404, detail="Account not found")

    return ReminderResponse(account_id=account.id, total_debt=account.total_debt, link=payment_reminder_link(account))
