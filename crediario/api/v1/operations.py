"""POST /v1/operations - register a debt operation (crediário sale)"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from crediario.api.v1.schemas import (
    AccountSchema,
    OperationRequest,
    OperationResponse,
    ScheduleResponse,
    StockIssueSchema,
    TransactionSchema,
)
from crediario.api.dependencies import (
    get_cash_flow_client,
    get_catalog_client,
    get_customer_repository,
    get_ledger,
    get_request_id,
    get_store_context,
)
from crediario.infrastructure.database.session import get_db
from crediario.infrastructure.database.repositories import CustomerRepository
from crediario.infrastructure.clients.catalog import CatalogClient
from crediario.infrastructure.clients.cash_flow import CashFlowClient
from crediario.domain.ledger import CreditLedger
from crediario.domain.models import StoreContext
from crediario.domain.operations import DebtOperationOrchestrator
from crediario.domain.exceptions import (
    DuplicateAccount,
    ExistingCreditAccount,
    FormValidationError,
    RemoteServiceError,
    StockValidationError,
    ValidationFailure,
)
from crediario.infrastructure.observability.metrics import ledger_transaction_counter, record_operation
from crediario.infrastructure.observability.logging import log_operation

router = APIRouter()


@router.post("/operations", response_model=OperationResponse, status_code=201)
async def submit_operation(
    request_body: OperationRequest,
    request: Request,
    ctx: StoreContext = Depends(get_store_context),
    db: Session = Depends(get_db),
    customers: CustomerRepository = Depends(get_customer_repository),
    ledger: CreditLedger = Depends(get_ledger),
    catalog: CatalogClient = Depends(get_catalog_client),
    cash_flow: CashFlowClient = Depends(get_cash_flow_client),
):
    """
    Register a purchase on credit.

    Flow:
    1. Validate form
    2. Resolve customer (existing credit account -> 409, nothing written)
    3. Create customer if new
    4. Re-validate stock against the catalog
    5. Create credit account
    6. Persist debt transaction and commit
    7. Decrement stock per item (failures become warnings)
    8. Post cash flow income (failure becomes a warning)
    9. Return refreshed account and history
    """
    start_time = time.time()
    request_id = get_request_id(request)
    orchestrator = DebtOperationOrchestrator(customers, ledger, catalog, cash_flow, on_commit=db.commit)

    try:
        result = await orchestrator.submit(request_body.to_domain(), ctx)

    except FormValidationError as e:
        db.rollback()
        record_operation("rejected")
        raise HTTPException(status_code=422, detail={"message": "Formulário inválido", "errors": e.errors})

    except ValidationFailure as e:
        db.rollback()
        record_operation("rejected")
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": [str(e)]})

    except (ExistingCreditAccount, DuplicateAccount) as e:
        db.rollback()
        record_operation("rejected")
        logging.info(f"Customer already has credit: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Cliente já possui crediário. Visualize a conta existente.",
                "action": "view_account",
                "account": AccountSchema.from_account(e.account).model_dump(mode="json") if e.account else None,
            },
        )

    except StockValidationError as e:
        db.rollback()
        record_operation("rejected")
        logging.warning(f"Insufficient stock: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Estoque insuficiente",
                "issues": [StockIssueSchema.from_issue(i).model_dump() for i in e.issues],
            },
        )

    except RemoteServiceError as e:
        db.rollback()
        record_operation("failed")
        logging.error(f"Remote service error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Serviço indisponível, tente novamente")

    except Exception as e:
        db.rollback()
        record_operation("failed")
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    ledger_transaction_counter.labels(type="debt").inc()
    record_operation(result.status, len(result.failed_products), not result.cash_flow_posted)
    log_operation(request_id, ctx.owner_id, result.account.id, str(result.plan.total), result.warnings, duration_ms)

    return OperationResponse(
        status=result.status,
        account=AccountSchema.from_account(result.account),
        transaction=TransactionSchema.from_transaction(result.transaction),
        schedule=ScheduleResponse.from_plan(result.plan),
        customer_created=result.customer_created,
        account_created=result.account_created,
        cash_flow_posted=result.cash_flow_posted,
        failed_products=result.failed_products,
        warnings=result.warnings,
        history=[TransactionSchema.from_transaction(t) for t in result.history],
    )
