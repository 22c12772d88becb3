"""Unit tests for date text handling and money helpers"""

import pytest
from datetime import date
from decimal import Decimal
from crediario.domain.exceptions import InvalidDateInput
from crediario.utils.date_utils import add_months, format_br_date, format_date_input, parse_br_date
from crediario.utils.money import format_brl, to_money


@pytest.mark.parametrize(
    "typed, expected",
    [
        ("1", "1"),
        ("15", "15"),
        ("150", "15/0"),
        ("1501", "15/01"),
        ("15012", "15/01/2"),
        ("15012025", "15/01/2025"),
        ("150120259", "15/01/2025"),
        ("15/01/2025", "15/01/2025"),
        ("ab15c01", "15/01"),
        ("", ""),
    ],
)
def test_format_date_input(typed, expected):
    assert format_date_input(typed) == expected


def test_parse_br_date():
    assert parse_br_date("29/02/2024") == date(2024, 2, 29)


def test_parse_br_date_year_bounds_inclusive():
    assert parse_br_date("01/01/2020") == date(2020, 1, 1)
    assert parse_br_date("31/12/2030") == date(2030, 12, 31)


@pytest.mark.parametrize("text", ["29/02/2025", "00/01/2025", "1/1/2025", "15-01-2025", "31/12/2031", "abc"])
def test_parse_br_date_rejects(text):
    with pytest.raises(InvalidDateInput):
        parse_br_date(text)


def test_format_br_date():
    assert format_br_date(date(2025, 3, 5)) == "05/03/2025"


def test_add_months_leap_year():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)


def test_to_money_rounds_half_up():
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(0.1 + 0.2) == Decimal("0.30")


def test_format_brl():
    assert format_brl(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_brl(50) == "R$ 50,00"
