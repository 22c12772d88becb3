"""Customer matching: reuse existing identities and credit accounts instead of duplicating them"""

import logging
import re

from crediario.domain.models import Resolution, ResolutionKind, StoreContext
from crediario.domain.ports import CreditStore, CustomerDirectory

logger = logging.getLogger(__name__)


def normalize_phone(value: str | None) -> str:
    """Canonical phone: digits only ("(11) 98765-4321" -> "11987654321")"""
    return re.sub(r"\D", "", value or "")


def normalize_name(value: str | None) -> str:
    """Case-insensitive, whitespace-collapsed name for exact matching"""
    return " ".join((value or "").split()).casefold()


class CustomerResolver:
    """Decides whether a name/phone pair is a new customer, a known customer, or a customer with credit"""

    def __init__(self, directory: CustomerDirectory, credit_store: CreditStore):
        self.directory = directory
        self.credit_store = credit_store

    def resolve(self, name: str, phone: str, ctx: StoreContext) -> Resolution:
        """
        Match precedence:
        1. Normalized phone against credit accounts (authoritative "already has credit")
        2. Normalized phone against the customer directory
        3. Name against the customer directory

        A name match whose phone differs from the one supplied is only offered
        as a suggestion; phone always wins.
        """
        phone_digits = normalize_phone(phone)

        if phone_digits:
            account = self.credit_store.find_account_by_phone(ctx.owner_id, phone_digits)
            if account:
                logger.info(
                    "Phone matches existing credit account",
                    extra={"owner_id": ctx.owner_id, "account_id": account.id, "step": "resolve_customer"},
                )
                customer = self.directory.find_by_phone(ctx.owner_id, phone_digits)
                return Resolution(ResolutionKind.EXISTING_CREDIT_ACCOUNT, customer=customer, account=account)

            customer = self.directory.find_by_phone(ctx.owner_id, phone_digits)
            if customer:
                return Resolution(ResolutionKind.EXISTING_CUSTOMER_NO_CREDIT, customer=customer)

        by_name = self.directory.find_by_name(ctx.owner_id, normalize_name(name)) if normalize_name(name) else None
        if by_name is None:
            return Resolution(ResolutionKind.NEW_CUSTOMER)

        if phone_digits:
            return Resolution(ResolutionKind.NEW_CUSTOMER, suggestion=by_name)

        # No phone given: the name match is all there is to go on
        account = self.credit_store.find_account_by_phone(ctx.owner_id, by_name.phone) if by_name.phone else None
        if account:
            return Resolution(ResolutionKind.EXISTING_CREDIT_ACCOUNT, customer=by_name, account=account)
        return Resolution(ResolutionKind.EXISTING_CUSTOMER_NO_CREDIT, customer=by_name)
