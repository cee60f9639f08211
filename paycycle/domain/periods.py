"""Financial-month periods and transaction bucketing"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from paycycle.domain.currency import Rate, to_reporting_currency
from paycycle.domain.models import (
    BudgetStatus,
    FinancialPeriod,
    PeriodBucket,
    PeriodReport,
    PeriodTotal,
    TransactionLike,
    to_decimal,
    validate_start_day,
)
from paycycle.utils.date_utils import add_months, as_date, shift_month

logger = logging.getLogger(__name__)

PAYMENT = "PAGO"
UNKNOWN_SOURCE = "other"
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def period_containing(value: date | datetime, start_day: int = 1) -> FinancialPeriod:
    """
    Financial month that contains the given date.

    Example (start_day=15):
        2024-03-10 -> [2024-02-15, 2024-03-15)
        2024-03-20 -> [2024-03-15, 2024-04-15)
    """
    validate_start_day(start_day)
    value = as_date(value)

    if value.day < start_day:
        year, month = shift_month(value.year, value.month, -1)
    else:
        year, month = value.year, value.month

    start = date(year, month, start_day)
    return FinancialPeriod(start=start, end=add_months(start, 1))


def current_period(today: date | datetime, start_day: int = 1) -> FinancialPeriod:
    return period_containing(today, start_day)


def shift_period(period: FinancialPeriod, periods: int) -> FinancialPeriod:
    """Period `periods` months after (negative: before) the given one"""
    start = add_months(period.start, periods)
    return FinancialPeriod(start=start, end=add_months(start, 1))


def period_label(period: FinancialPeriod) -> str:
    """'2024-03' for calendar months, '2024-03/2024-04' when the period spans two"""
    start_label = f"{period.start.year:04d}-{period.start.month:02d}"
    if period.start.day == 1:
        return start_label
    return f"{start_label}/{period.end.year:04d}-{period.end.month:02d}"


def bucket_by_period(transactions: Iterable[TransactionLike], start_day: int = 1) -> Dict[date, PeriodBucket]:
    """
    Group transactions by the financial period they fall into.

    Every transaction lands in exactly one bucket. Buckets are keyed by
    period start and ordered oldest first; periods without transactions
    are not included.
    """
    validate_start_day(start_day)

    grouped: Dict[date, PeriodBucket] = {}
    for tx in transactions:
        period = period_containing(tx.date, start_day)
        bucket = grouped.get(period.start)
        if bucket is None:
            bucket = PeriodBucket(period=period)
            grouped[period.start] = bucket
        bucket.transactions.append(tx)

    logger.debug("Bucketed transactions", extra={"bucket_count": len(grouped), "start_day": start_day})
    return {key: grouped[key] for key in sorted(grouped)}


def is_payment(tx: TransactionLike) -> bool:
    return getattr(tx, "type", PAYMENT) == PAYMENT


def payments_in_period(transactions: Iterable[TransactionLike], period: FinancialPeriod) -> List[TransactionLike]:
    """Payment records dated inside [period.start, period.end)"""
    return [tx for tx in transactions if is_payment(tx) and tx.date in period]


def should_reset_paid(last_payment: Optional[date | datetime], today: date | datetime, start_day: int = 1) -> bool:
    """
    Whether a fixed expense marked as paid has gone stale.

    The paid flag only covers the current financial period: once the last
    payment predates the period start, the expense is due again.
    """
    if last_payment is None:
        return False
    return as_date(last_payment) < current_period(today, start_day).start


def _total(transactions: Iterable[TransactionLike], rate: Rate, reporting_currency: str) -> Decimal:
    return sum(
        (to_reporting_currency(tx.amount, tx.currency, rate, reporting_currency) for tx in transactions),
        ZERO,
    )


def percent_change(current: Decimal, previous: Decimal) -> Decimal:
    """Period-over-period change; 100 for a first period with data"""
    if previous > 0:
        return (current - previous) / previous * HUNDRED
    if current > 0:
        return HUNDRED
    return ZERO


def budget_status(spent: Decimal, budget: Decimal, warning_percent: Decimal | int = 80) -> BudgetStatus:
    """Spend against a period budget; a zero budget reports 0%"""
    spent = to_decimal(spent)
    budget = to_decimal(budget)
    percent = spent / budget * HUNDRED if budget > 0 else ZERO

    return BudgetStatus(
        percent=percent,
        over_budget=percent > HUNDRED,
        warning=percent > to_decimal(warning_percent),
        overage=max(ZERO, spent - budget) if budget > 0 else ZERO,
    )


def period_report(
    transactions: Sequence[TransactionLike],
    reference: date | datetime,
    rate: Rate,
    reporting_currency: str,
    start_day: int = 1,
    budget: Optional[Decimal] = None,
    warning_percent: Decimal | int = 80,
) -> PeriodReport:
    """
    Payment totals for the period containing `reference`.

    Requirements:
    - Only payment records count towards totals
    - Amounts are converted into the reporting currency
    - Compared against the immediately preceding period
    - Totals broken down by transaction source (card, loan, expense)
    """
    period = period_containing(reference, start_day)
    previous = shift_period(period, -1)

    current_payments = payments_in_period(transactions, period)
    previous_payments = payments_in_period(transactions, previous)

    total = _total(current_payments, rate, reporting_currency)
    previous_total = _total(previous_payments, rate, reporting_currency)

    by_source: Dict[str, Decimal] = {}
    for tx in current_payments:
        source = getattr(tx, "source", None) or UNKNOWN_SOURCE
        by_source[source] = by_source.get(source, ZERO) + to_reporting_currency(
            tx.amount, tx.currency, rate, reporting_currency
        )

    return PeriodReport(
        period=period,
        total=total,
        previous_total=previous_total,
        percent_change=percent_change(total, previous_total),
        by_source=by_source,
        transaction_count=len(current_payments),
        budget_status=budget_status(total, budget, warning_percent) if budget is not None else None,
    )


def monthly_history(
    transactions: Iterable[TransactionLike],
    rate: Rate,
    reporting_currency: str,
    start_day: int = 1,
    limit: int = 6,
) -> List[PeriodTotal]:
    """Payment totals for the most recent `limit` periods with activity, oldest first"""
    buckets = bucket_by_period((tx for tx in transactions if is_payment(tx)), start_day)
    totals = [
        PeriodTotal(period=bucket.period, total=_total(bucket.transactions, rate, reporting_currency))
        for bucket in buckets.values()
    ]
    return totals[-limit:] if limit > 0 else []
