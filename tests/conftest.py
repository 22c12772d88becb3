"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from typing import Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from crediario.api.main import create_app
from crediario.api.dependencies import get_cash_flow_client, get_catalog_client
from crediario.infrastructure.database.models import Base
from crediario.infrastructure.database.repositories import CreditRepository, CustomerRepository
from crediario.infrastructure.database.session import get_db
from crediario.domain.exceptions import RemoteServiceError
from crediario.domain.ledger import CreditLedger
from crediario.domain.models import CashFlowEntry, Customer, Frequency, LineItem, StoreContext


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER = "owner-1"


class FakeCatalog:
    """In-process catalog; products listed in ``failing`` reject decrements"""

    def __init__(self, stock: Dict[str, int] | None = None):
        self.stock: Dict[str, int] = dict(stock or {})
        self.failing: set = set()
        self.unavailable = False
        self.decrements: List[tuple] = []

    async def get_stock(self, product_id: str) -> int:
        if self.unavailable:
            raise RemoteServiceError("catalog", "unreachable")
        return self.stock.get(product_id, 0)

    async def decrement_stock(self, product_id: str, quantity: int) -> None:
        if product_id in self.failing:
            raise RemoteServiceError("catalog", "error 500")
        self.stock[product_id] = max(self.stock.get(product_id, 0) - quantity, 0)
        self.decrements.append((product_id, quantity))


class FakeCashFlow:
    def __init__(self):
        self.entries: List[CashFlowEntry] = []
        self.fail = False

    async def post_entry(self, entry: CashFlowEntry) -> None:
        if self.fail:
            raise RemoteServiceError("cash_flow", "error 503")
        self.entries.append(entry)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def ctx() -> StoreContext:
    return StoreContext(owner_id=OWNER, store_id="store-1")


@pytest.fixture
def customers(db: Session) -> CustomerRepository:
    return CustomerRepository(db)


@pytest.fixture
def ledger(db: Session) -> CreditLedger:
    return CreditLedger(CreditRepository(db))


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog({"prod-x": 2, "prod-y": 10, "prod-z": 5, "prod-empty": 0})


@pytest.fixture
def cash_flow() -> FakeCashFlow:
    return FakeCashFlow()


@pytest.fixture
def client(db: Session, catalog: FakeCatalog, cash_flow: FakeCashFlow) -> TestClient:
    """Create FastAPI test client with test database and in-process collaborators"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog_client] = lambda: catalog
    app.dependency_overrides[get_cash_flow_client] = lambda: cash_flow
    return TestClient(app, headers={"X-Owner-Id": OWNER})


@pytest.fixture
def make_account(customers: CustomerRepository, ledger: CreditLedger, ctx: StoreContext, db: Session):
    """Open an account for a new customer, optionally with an opening debt"""

    def _make(name: str, phone: str, debt: Decimal | None = None):
        customer = customers.create(Customer(id=None, name=name, phone=phone, owner_id=ctx.owner_id))
        account = ledger.create_account(customer, ctx)
        if debt:
            ledger.record_transaction(account.id, "debt", debt, ctx, description="Saldo inicial")
        db.commit()
        return ledger.get_account(account.id, ctx)

    return _make


def line_item(product_id: str, quantity: int, unit_price: str = "10.00", name: str | None = None) -> LineItem:
    return LineItem(
        product_id=product_id,
        product_name=name or product_id.upper(),
        unit_price=Decimal(unit_price),
        quantity=quantity,
    )


def operation_payload(**overrides) -> dict:
    """JSON body for POST /v1/operations"""
    payload = {
        "customer_name": "Maria Silva",
        "customer_phone": "(11) 98765-4321",
        "line_items": [
            {"product_id": "prod-y", "product_name": "Camiseta", "unit_price": "100.00", "quantity": 3},
        ],
        "installments": 3,
        "frequency": Frequency.MONTHLY.value,
        "first_due_date": "15/01/2025",
    }
    payload.update(overrides)
    return payload
