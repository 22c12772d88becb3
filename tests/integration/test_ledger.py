"""Ledger tests against the SQLAlchemy credit store"""

import pytest
from decimal import Decimal
from crediario.domain.exceptions import AccountNotFound, DuplicateAccount, InvalidAmount, NonZeroBalance
from crediario.domain.models import Customer, StoreContext, TransactionType
from crediario.domain.installments import compute_schedule
from conftest import line_item


def test_create_account_starts_at_zero(make_account):
    account = make_account("João Souza", "11912345678")

    assert account.total_debt == Decimal("0.00")
    assert account.customer_phone == "11912345678"


@pytest.mark.parametrize(
    "name, phone",
    [
        ("JOÃO SOUZA", "11912345678"),
        ("  joão   souza ", "(11) 91234-5678"),
        ("Someone Else", "+11 91234 5678"),
    ],
)
def test_create_account_duplicate_phone(make_account, ledger, ctx, name, phone):
    """Same normalized phone -> DuplicateAccount regardless of name casing/spacing"""
    existing = make_account("João Souza", "11912345678")

    with pytest.raises(DuplicateAccount) as exc:
        ledger.create_account(Customer(id=None, name=name, phone=phone, owner_id=ctx.owner_id), ctx)

    assert exc.value.account.id == existing.id


def test_accounts_are_scoped_to_owner(make_account, ledger):
    """Another store owner may open an account for the same phone"""
    make_account("João Souza", "11912345678")
    other = StoreContext(owner_id="owner-2")

    account = ledger.create_account(Customer(id=None, name="João", phone="11912345678", owner_id="owner-2"), other)

    assert account.owner_id == "owner-2"
    assert [a.id for a in ledger.list_accounts(other)] == [account.id]


def test_apply_debt_and_payment(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001")

    assert ledger.apply_debt(account.id, Decimal("120.00"), ctx) == Decimal("120.00")
    assert ledger.apply_payment(account.id, Decimal("20.00"), ctx) == Decimal("100.00")
    assert ledger.get_account(account.id, ctx).total_debt == Decimal("100.00")


def test_apply_payment_clamps_at_zero(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001", debt=Decimal("50.00"))

    assert ledger.apply_payment(account.id, Decimal("80.00"), ctx) == Decimal("0.00")
    assert ledger.get_account(account.id, ctx).total_debt == Decimal("0.00")


def test_apply_rejects_non_positive_amount(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001", debt=Decimal("50.00"))

    with pytest.raises(InvalidAmount):
        ledger.apply_debt(account.id, Decimal("0"), ctx)
    with pytest.raises(InvalidAmount):
        ledger.apply_payment(account.id, Decimal("-1"), ctx)
    assert ledger.get_account(account.id, ctx).total_debt == Decimal("50.00")


def test_record_transaction_persists_schedule_and_items(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001")
    plan = compute_schedule(Decimal("300.00"), 3, "monthly", "15/01/2025")
    items = [line_item("prod-y", 3, "100.00", "Camiseta")]

    transaction, balance = ledger.record_transaction(
        account.id, TransactionType.DEBT, plan.total, ctx, description="Compra", plan=plan, line_items=items
    )

    assert balance == Decimal("300.00")
    stored = ledger.history(account.id, ctx)[0]
    assert stored.id == transaction.id
    assert stored.installments == 3
    assert stored.installment_value == Decimal("100.00")
    assert stored.final_due_date == plan.final_due_date
    assert stored.line_items[0].product_name == "Camiseta"
    assert stored.line_items[0].line_total == Decimal("300.00")


def test_record_transaction_invalid_amount_writes_nothing(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001")

    with pytest.raises(InvalidAmount):
        ledger.record_transaction(account.id, TransactionType.PAYMENT, Decimal("0"), ctx)

    assert ledger.history(account.id, ctx) == []


def test_history_is_most_recent_first(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001", debt=Decimal("100.00"))
    ledger.record_transaction(account.id, TransactionType.PAYMENT, Decimal("30.00"), ctx)

    history = ledger.history(account.id, ctx)

    assert [t.type for t in history] == [TransactionType.PAYMENT, TransactionType.DEBT]


def test_delete_account_with_balance_fails(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001", debt=Decimal("10.00"))

    with pytest.raises(NonZeroBalance):
        ledger.delete_account(account.id, ctx)

    assert ledger.get_account(account.id, ctx).total_debt == Decimal("10.00")


def test_delete_settled_account(make_account, ledger, ctx):
    account = make_account("Ana", "11900000001", debt=Decimal("10.00"))
    ledger.record_transaction(account.id, TransactionType.PAYMENT, Decimal("10.00"), ctx)

    ledger.delete_account(account.id, ctx)

    with pytest.raises(AccountNotFound):
        ledger.get_account(account.id, ctx)


def test_get_account_of_other_owner_not_found(make_account, ledger):
    account = make_account("Ana", "11900000001")

    with pytest.raises(AccountNotFound):
        ledger.get_account(account.id, StoreContext(owner_id="intruder"))


def test_list_accounts_and_summary(make_account, ledger, ctx):
    make_account("Ana", "11900000001", debt=Decimal("10.00"))
    make_account("Bia", "11900000002", debt=Decimal("250.00"))
    make_account("Caio", "11900000003")

    accounts = ledger.list_accounts(ctx)
    summary = ledger.summary(accounts)

    assert [a.customer_name for a in accounts] == ["Bia", "Ana", "Caio"]
    assert summary.total_debt == Decimal("260.00")
    assert summary.clients_with_debt == 2
    assert summary.total_clients == 3
