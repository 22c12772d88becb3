"""Collaborator interfaces consumed by the ledger and orchestrator"""

from decimal import Decimal
from typing import List, Optional, Protocol

from crediario.domain.models import CashFlowEntry, CreditAccount, CreditTransaction, Customer


class CustomerDirectory(Protocol):
    def find_by_phone(self, owner_id: str, phone: str) -> Optional[Customer]: ...

    def find_by_name(self, owner_id: str, name: str) -> Optional[Customer]: ...

    def create(self, customer: Customer) -> Customer: ...


class CreditStore(Protocol):
    def list_accounts(self, owner_id: str) -> List[CreditAccount]: ...

    def get_account(self, owner_id: str, account_id: str) -> Optional[CreditAccount]: ...

    def find_account_by_phone(self, owner_id: str, phone: str) -> Optional[CreditAccount]: ...

    def create_account(
        self,
        owner_id: str,
        customer_id: Optional[str],
        customer_name: str,
        customer_phone: str,
        store_id: Optional[str] = None,
    ) -> CreditAccount: ...

    def update_balance(self, account_id: str, new_balance: Decimal) -> None: ...

    def delete_account(self, account_id: str) -> None: ...

    def list_transactions(self, account_id: str) -> List[CreditTransaction]: ...

    def create_transaction(self, transaction: CreditTransaction) -> CreditTransaction: ...


class Catalog(Protocol):
    """Product stock owned by the catalog service"""

    async def get_stock(self, product_id: str) -> int: ...

    async def decrement_stock(self, product_id: str, quantity: int) -> None: ...


class CashFlowStore(Protocol):
    async def post_entry(self, entry: CashFlowEntry) -> None: ...
