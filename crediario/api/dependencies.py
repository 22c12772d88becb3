"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from crediario.domain.customers import CustomerResolver
from crediario.domain.ledger import CreditLedger
from crediario.domain.models import StoreContext
from crediario.infrastructure.clients.catalog import CatalogClient
from crediario.infrastructure.clients.cash_flow import CashFlowClient
from crediario.infrastructure.database.repositories import CreditRepository, CustomerRepository
from crediario.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store_context(
    x_owner_id: str = Header(..., min_length=1),
    x_store_id: Optional[str] = Header(None),
) -> StoreContext:
    """Acting store owner; authentication happens upstream and forwards these headers"""
    return StoreContext(owner_id=x_owner_id, store_id=x_store_id)


def get_catalog_client() -> CatalogClient:
    """Provide catalog API client instance"""
    return CatalogClient()


def get_cash_flow_client() -> CashFlowClient:
    """Provide cash flow API client instance"""
    return CashFlowClient()


def get_customer_repository(db: Session = Depends(get_db)) -> CustomerRepository:
    return CustomerRepository(db)


def get_ledger(db: Session = Depends(get_db)) -> CreditLedger:
    return CreditLedger(CreditRepository(db))


def get_resolver(
    customers: CustomerRepository = Depends(get_customer_repository),
    ledger: CreditLedger = Depends(get_ledger),
) -> CustomerResolver:
    return CustomerResolver(customers, ledger.store)
