"""Folding mixed-currency amounts into a single reporting currency.

The engine guarantees arithmetic given a rate, never the accuracy of the rate
itself: rates are supplied by the caller on every call and no live or
historical exchange data is consulted.
"""

from decimal import Decimal
from typing import Dict, Iterable, Mapping, Protocol, Union

from paycycle.domain.exceptions import InvalidExchangeRateError
from paycycle.domain.models import Money, PaymentProgress, to_decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")

Rate = Union[Decimal, int, float, str, Mapping[str, Union[Decimal, int, float, str]]]


class Payable(Protocol):
    amount: Money
    is_paid: bool


def resolve_rate(rate: Rate, currency: str) -> Decimal:
    """
    Rate that converts `currency` into the reporting currency.

    A plain number applies to every foreign currency; a mapping gives one
    rate per currency code.
    """
    if isinstance(rate, Mapping):
        if currency not in rate:
            raise InvalidExchangeRateError(f"No exchange rate supplied for {currency}")
        value = to_decimal(rate[currency])
    else:
        value = to_decimal(rate)

    if value <= 0:
        raise InvalidExchangeRateError(f"Exchange rate for {currency} must be positive, got {value}")
    return value


def to_reporting_currency(amount: Decimal, currency: str, rate: Rate, reporting_currency: str) -> Decimal:
    """Identity for the reporting currency, a single multiply otherwise"""
    amount = to_decimal(amount)
    if currency == reporting_currency:
        return amount
    return amount * resolve_rate(rate, currency)


def aggregate(moneys: Iterable[Money], reporting_currency: str, rate: Rate) -> Decimal:
    """Sum of all amounts expressed in the reporting currency"""
    return sum(
        (to_reporting_currency(m.amount, m.currency, rate, reporting_currency) for m in moneys),
        ZERO,
    )


def totals_by_currency(moneys: Iterable[Money]) -> Dict[str, Decimal]:
    """Per-currency sums, no conversion"""
    totals: Dict[str, Decimal] = {}
    for m in moneys:
        totals[m.currency] = totals.get(m.currency, ZERO) + m.amount
    return totals


def distribution(
    groups: Mapping[str, Iterable[Money]],
    reporting_currency: str,
    rate: Rate,
) -> Dict[str, Decimal]:
    """Converted total per group, omitting groups that add up to zero"""
    result: Dict[str, Decimal] = {}
    for name, moneys in groups.items():
        total = aggregate(moneys, reporting_currency, rate)
        if total != 0:
            result[name] = total
    return result


def paid_progress(items: Iterable[Payable], reporting_currency: str, rate: Rate) -> PaymentProgress:
    """Paid versus pending totals for a list of fixed expenses"""
    paid = ZERO
    pending = ZERO
    for item in items:
        converted = to_reporting_currency(item.amount.amount, item.amount.currency, rate, reporting_currency)
        if item.is_paid:
            paid += converted
        else:
            pending += converted

    total = paid + pending
    percent = paid / total * HUNDRED if total > 0 else ZERO
    return PaymentProgress(total=total, paid=paid, pending=pending, percent=percent)
