"""Installment plan generation for crediário repayment"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List

from crediario.config import settings
from crediario.domain.exceptions import InvalidScheduleInput
from crediario.domain.models import Frequency, InstallmentPlan
from crediario.utils.date_utils import add_months, check_due_year, parse_br_date
from crediario.utils.money import to_money

# Fixed-day spacing; monthly uses calendar arithmetic instead
_INTERVAL_DAYS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
}


def installment_options() -> List[str]:
    """Labels for the installment count selector: "1x" .. "24x" """
    return [f"{n}x" for n in range(1, settings.max_installments + 1)]


def due_date_for(first_due_date: date, frequency: Frequency, index: int) -> date:
    """Due date of the installment at zero-based ``index``"""
    if frequency == Frequency.MONTHLY:
        return add_months(first_due_date, index)
    return first_due_date + timedelta(days=index * _INTERVAL_DAYS[frequency])


def check_installment_count(count: int) -> int:
    """Raise InvalidScheduleInput unless ``count`` is an integer in 1..max_installments"""
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidScheduleInput(f"Número de parcelas inválido: {count!r}")
    if count <= 0 or count > settings.max_installments:
        raise InvalidScheduleInput(f"Número de parcelas deve estar entre 1 e {settings.max_installments}")
    return count


def check_frequency(frequency: Frequency | str) -> Frequency:
    try:
        return Frequency(frequency)
    except ValueError as e:
        raise InvalidScheduleInput(f"Frequência inválida: {frequency!r}") from e


def check_first_due_date(first_due_date: date | str) -> date:
    """Parse DD/MM/YYYY text or range-check a date; both paths share the year bounds"""
    if isinstance(first_due_date, str):
        return parse_br_date(first_due_date)
    if not isinstance(first_due_date, date):
        raise InvalidScheduleInput("Data do primeiro vencimento é obrigatória")
    check_due_year(first_due_date.year)
    return first_due_date


def compute_schedule(
    total: Decimal,
    count: int,
    frequency: Frequency | str,
    first_due_date: date | str,
) -> InstallmentPlan:
    """
    Split a debt into ``count`` installments.

    Requirements:
    - 1 to 24 installments
    - installment_value = round(total / count, 2), drift is not redistributed
      (installment_value * count may differ from total by up to count cents)
    - daily/weekly/biweekly offsets in days, monthly offsets in calendar months

    Args:
        total: Amount owed for the operation
        count: Number of installments
        frequency: daily, weekly, biweekly or monthly
        first_due_date: date or DD/MM/YYYY text

    Raises:
        InvalidScheduleInput: count out of range, unknown frequency or bad date

    Example:
        300.00 in 3x monthly from 15/01/2025 ->
        100.00 on 15/01/2025, 15/02/2025, 15/03/2025
    """
    check_installment_count(count)
    frequency = check_frequency(frequency)
    first_due_date = check_first_due_date(first_due_date)

    total = to_money(total)
    installment_value = to_money(total / count)

    due_dates = [due_date_for(first_due_date, frequency, i) for i in range(count)]

    return InstallmentPlan(
        total=total,
        count=count,
        frequency=frequency,
        first_due_date=first_due_date,
        installment_value=installment_value,
        due_dates=due_dates,
    )
