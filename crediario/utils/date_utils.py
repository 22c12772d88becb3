"""Date manipulation utilities"""

import re
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

from crediario.config import settings
from crediario.domain.exceptions import InvalidDateInput

BR_DATE_PATTERN = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


def format_date_input(raw: str) -> str:
    """
    Mask typed text as DD/MM/YYYY.

    Keeps at most 8 digits and inserts "/" after the 2nd and 4th digit, so
    "1501" becomes "15/01" and "15012025" becomes "15/01/2025".
    """
    digits = re.sub(r"\D", "", raw or "")[:8]
    if len(digits) > 4:
        return f"{digits[:2]}/{digits[2:4]}/{digits[4:]}"
    if len(digits) > 2:
        return f"{digits[:2]}/{digits[2:]}"
    return digits


def parse_br_date(text: str, min_year: int | None = None, max_year: int | None = None) -> date:
    """
    Parse a DD/MM/YYYY string into a date.

    Raises:
        InvalidDateInput: malformed text, impossible calendar date, or year
            outside [min_year, max_year]
    """
    min_year = min_year if min_year is not None else settings.min_due_year
    max_year = max_year if max_year is not None else settings.max_due_year

    match = BR_DATE_PATTERN.match((text or "").strip())
    if not match:
        raise InvalidDateInput(f"Data inválida: {text!r} (use DD/MM/AAAA)")

    day, month, year = (int(part) for part in match.groups())
    check_due_year(year, min_year, max_year)

    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateInput(f"Data inexistente: {text}") from e


def check_due_year(year: int, min_year: int | None = None, max_year: int | None = None) -> None:
    """Raise InvalidDateInput when ``year`` falls outside [min_year, max_year]"""
    min_year = min_year if min_year is not None else settings.min_due_year
    max_year = max_year if max_year is not None else settings.max_due_year
    if not min_year <= year <= max_year:
        raise InvalidDateInput(f"Ano deve estar entre {min_year} e {max_year}")


def format_br_date(value: date | datetime) -> str:
    """Render a date as DD/MM/YYYY"""
    return value.strftime("%d/%m/%Y")


def add_months(from_date: date, months: int) -> date:
    """Calendar month arithmetic; day is clamped to the end of shorter months"""
    return from_date + relativedelta(months=months)
