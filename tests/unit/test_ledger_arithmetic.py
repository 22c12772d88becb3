"""Unit tests for balance arithmetic and reminder links"""

import pytest
from datetime import datetime
from decimal import Decimal
from crediario.domain.exceptions import InvalidAmount
from crediario.domain.ledger import credit_balance, debit_balance, payment_reminder_link
from crediario.domain.models import CreditAccount


def test_debit_balance_adds():
    assert debit_balance(Decimal("50.00"), Decimal("120.00")) == Decimal("170.00")


@pytest.mark.parametrize(
    "balance, amount",
    [("0.00", "0.01"), ("50.00", "20.00"), ("50.00", "50.00"), ("50.00", "80.00"), ("0.00", "10.00"), ("99.99", "100")],
)
def test_credit_balance_never_negative(balance, amount):
    """Overpayment is absorbed at zero"""
    result = credit_balance(Decimal(balance), Decimal(amount))

    assert result == max(Decimal("0.00"), Decimal(balance) - Decimal(amount))
    assert result >= 0


@pytest.mark.parametrize("amount", ["0", "-5.00", "0.001", "abc"])
def test_non_positive_amounts_rejected(amount):
    with pytest.raises(InvalidAmount):
        debit_balance(Decimal("10.00"), amount)
    with pytest.raises(InvalidAmount):
        credit_balance(Decimal("10.00"), amount)


def _account(phone: str) -> CreditAccount:
    return CreditAccount(
        id="acc-1",
        owner_id="owner-1",
        customer_id=None,
        customer_name="Maria",
        customer_phone=phone,
        total_debt=Decimal("1250.00"),
        created_at=datetime(2025, 1, 1),
    )


def test_payment_reminder_link():
    link = payment_reminder_link(_account("11987654321"))

    assert link.startswith("https://wa.me/5511987654321?text=")
    assert "R%24%201.250%2C00" in link


def test_payment_reminder_link_without_phone():
    assert payment_reminder_link(_account("")) is None
