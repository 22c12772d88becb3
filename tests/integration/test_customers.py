"""Customer resolver tests against the customer directory"""

import pytest
from crediario.domain.customers import CustomerResolver, normalize_name, normalize_phone
from crediario.domain.models import Customer, ResolutionKind


@pytest.fixture
def resolver(customers, ledger) -> CustomerResolver:
    return CustomerResolver(customers, ledger.store)


def test_normalize_phone():
    assert normalize_phone("(11) 98765-4321") == "11987654321"
    assert normalize_phone("+55 11 98765 4321") == "5511987654321"
    assert normalize_phone(None) == ""


def test_normalize_name():
    assert normalize_name("  Maria   da SILVA ") == "maria da silva"


def test_resolve_new_customer(resolver, ctx):
    resolution = resolver.resolve("Maria", "11987654321", ctx)

    assert resolution.kind == ResolutionKind.NEW_CUSTOMER
    assert resolution.customer is None
    assert resolution.suggestion is None


def test_resolve_existing_credit_account_by_phone(resolver, make_account, ctx):
    account = make_account("Maria", "11987654321")

    resolution = resolver.resolve("Outro Nome", "(11) 98765-4321", ctx)

    assert resolution.kind == ResolutionKind.EXISTING_CREDIT_ACCOUNT
    assert resolution.account.id == account.id


def test_resolve_existing_customer_without_credit(resolver, customers, ctx):
    customer = customers.create(Customer(id=None, name="Maria", phone="11987654321", owner_id=ctx.owner_id))

    resolution = resolver.resolve("maria", "11 98765 4321", ctx)

    assert resolution.kind == ResolutionKind.EXISTING_CUSTOMER_NO_CREDIT
    assert resolution.customer.id == customer.id


def test_resolve_phone_beats_name(resolver, customers, ctx):
    """Name matches one customer, phone another: the phone match wins"""
    customers.create(Customer(id=None, name="Maria", phone="11900000000", owner_id=ctx.owner_id))
    by_phone = customers.create(Customer(id=None, name="Joana", phone="11987654321", owner_id=ctx.owner_id))

    resolution = resolver.resolve("Maria", "11987654321", ctx)

    assert resolution.customer.id == by_phone.id


def test_resolve_name_only_match_is_suggestion(resolver, customers, ctx):
    by_name = customers.create(Customer(id=None, name="Maria Silva", phone="11900000000", owner_id=ctx.owner_id))

    resolution = resolver.resolve("MARIA  silva", "11987654321", ctx)

    assert resolution.kind == ResolutionKind.NEW_CUSTOMER
    assert resolution.customer is None
    assert resolution.suggestion.id == by_name.id


def test_resolve_by_name_without_phone(resolver, make_account, ctx):
    account = make_account("Maria Silva", "11987654321")

    resolution = resolver.resolve("maria silva", "", ctx)

    assert resolution.kind == ResolutionKind.EXISTING_CREDIT_ACCOUNT
    assert resolution.account.id == account.id


def test_resolve_ignores_other_owners(resolver, customers, ctx):
    customers.create(Customer(id=None, name="Maria", phone="11987654321", owner_id="owner-2"))

    assert resolver.resolve("Maria", "11987654321", ctx).kind == ResolutionKind.NEW_CUSTOMER
