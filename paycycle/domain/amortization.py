"""Loan and installment amortization"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import List

from paycycle.domain.exceptions import InvalidAmortizationInputError
from paycycle.domain.models import (
    AmortizationInput,
    AmortizationResult,
    PaymentSplit,
    ScheduleEntry,
    to_decimal,
)
from paycycle.utils.date_utils import add_months

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")
PRECISION = 28  # significant digits for (1 + i)^n


def round_money(amount: Decimal | int | float | str) -> Decimal:
    """Round to cents, half-up. The only place amounts are rounded for display or storage."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Nominal annual percentage -> monthly periodic rate (12% -> 0.01)"""
    return to_decimal(annual_rate_percent) / Decimal(12) / Decimal(100)


def calculate_monthly_payment(terms: AmortizationInput) -> AmortizationResult:
    """
    Fixed monthly payment for a loan or installment purchase.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where P is the principal, i the monthly periodic rate and n the number
    of months. With a zero rate the payment is simply P / n.

    The result is not rounded; use round_money() when displaying or storing it.

    Example:
        10000 over 24 months at 12% -> i = 0.01, payment ~ 470.73
    """
    with localcontext() as ctx:
        ctx.prec = PRECISION

        if terms.annual_rate_percent == 0:
            return AmortizationResult(monthly_payment=terms.principal / Decimal(terms.term_months))

        i = monthly_rate(terms.annual_rate_percent)
        factor = (1 + i) ** terms.term_months
        payment = terms.principal * (i * factor) / (factor - 1)

    return AmortizationResult(monthly_payment=payment)


def monthly_interest(balance: Decimal, annual_rate_percent: Decimal) -> Decimal:
    """Interest accrued on a balance over one month (unrounded)"""
    rate = to_decimal(annual_rate_percent)
    if rate <= 0:
        return ZERO
    return to_decimal(balance) * rate / Decimal(100) / Decimal(12)


def split_loan_payment(balance: Decimal, annual_rate_percent: Decimal, amount: Decimal) -> PaymentSplit:
    """
    Divide a loan payment into interest and capital.

    Requirements:
    - Interest is one month of interest on the current balance (zero without a rate)
    - Only the part of the payment above the interest reduces the balance
    - Neither the capital part nor the remaining balance goes below zero
    """
    balance = to_decimal(balance)
    amount = to_decimal(amount)
    if amount < 0:
        raise InvalidAmortizationInputError(f"payment amount must not be negative, got {amount}")

    interest = round_money(monthly_interest(balance, annual_rate_percent))
    capital = max(ZERO, amount - interest)
    remaining = max(ZERO, balance - capital)

    return PaymentSplit(interest=interest, principal=capital, remaining_balance=round_money(remaining))


def amortization_schedule(terms: AmortizationInput, first_due_date: date) -> List[ScheduleEntry]:
    """
    Month-by-month repayment schedule.

    Requirements:
    - One entry per month, due dates counted from first_due_date
      (a 31st stays on the 31st where the month has one)
    - Payment and interest are stored in cents; the balance is tracked in cents
    - Last payment absorbs the rounding remainder so the balance ends at exactly 0

    Example:
        100.00 over 3 months at 0% -> [33.33, 33.33, 33.34]
    """
    payment = round_money(calculate_monthly_payment(terms).monthly_payment)
    balance = round_money(terms.principal)

    entries = []
    for period in range(1, terms.term_months + 1):
        interest = round_money(monthly_interest(balance, terms.annual_rate_percent))

        # Last payment clears whatever is left
        if period == terms.term_months:
            principal_part = balance
        else:
            principal_part = min(balance, payment - interest)

        balance -= principal_part
        entries.append(
            ScheduleEntry(
                period=period,
                due_date=add_months(first_due_date, period - 1),
                payment=principal_part + interest,
                interest=interest,
                principal=principal_part,
                remaining_balance=balance,
            )
        )

    logger.debug("Built amortization schedule", extra={"term_months": terms.term_months, "payment": str(payment)})
    return entries


def installment_progress(current: int, total: int) -> float:
    """Percentage of installments already paid, clamped to [0, 100]"""
    if total <= 0:
        raise InvalidAmortizationInputError(f"total installments must be positive, got {total}")
    return min(100.0, max(0.0, current / total * 100))
