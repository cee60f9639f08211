"""Next due-date resolution for recurring obligations"""

import logging
from datetime import date, datetime
from typing import Iterable, List

from paycycle.domain.exceptions import InvalidDayError
from paycycle.domain.models import (
    AgendaItem,
    FixedDay,
    Obligation,
    RecurrenceRule,
    RelativeWindow,
    validate_day,
)
from paycycle.utils.date_utils import add_days, as_date, days_between, on_day, shift_month

logger = logging.getLogger(__name__)


def next_fixed_day_occurrence(today: date | datetime, day: int) -> date:
    """
    Next date on or after today that falls on the given day-of-month.

    The day is clamped per month: day 31 resolves to Apr 30 in April
    and to Feb 28/29 in February.
    """
    validate_day(day)
    today = as_date(today)

    this_month = on_day(today.year, today.month, day)
    if this_month >= today:
        return this_month

    year, month = shift_month(today.year, today.month, 1)
    return on_day(year, month, day)


def relative_candidates(today: date | datetime, anchor_day: int, window_days: int) -> List[date]:
    """Due dates produced by the previous, current and next month's anchor"""
    today = as_date(today)
    candidates = []
    for offset in (-1, 0, 1):
        year, month = shift_month(today.year, today.month, offset)
        candidates.append(add_days(on_day(year, month, anchor_day), window_days))
    return candidates


def next_relative_occurrence(today: date | datetime, anchor_day: int, window_days: int) -> date:
    """
    Next due date for an obligation due window_days after an anchor day.

    Example (anchor 31, window 22, today 2024-02-20):
        candidates: Jan 31 + 22 = Feb 22, Feb 29 + 22 = Mar 22, Mar 31 + 22 = Apr 22
        result: Feb 22, the earliest candidate not before today
    """
    validate_day(anchor_day, "anchor_day")
    if window_days < 0:
        raise InvalidDayError(f"window_days must not be negative, got {window_days}")

    today = as_date(today)
    candidates = relative_candidates(today, anchor_day, window_days)
    for candidate in candidates:
        if candidate >= today:
            return candidate

    # Unreachable for non-negative windows: the next month's anchor is always after today
    return candidates[-1]


def next_occurrence(today: date | datetime, rule: RecurrenceRule) -> date:
    """Dispatch on the recurrence rule variant"""
    if isinstance(rule, FixedDay):
        return next_fixed_day_occurrence(today, rule.day)
    if isinstance(rule, RelativeWindow):
        return next_relative_occurrence(today, rule.anchor_day, rule.window_days)
    raise TypeError(f"Unsupported recurrence rule: {rule!r}")


def days_until(today: date | datetime, due: date | datetime) -> int:
    """Signed calendar days from today to the due date"""
    return days_between(as_date(today), as_date(due))


def is_due_within(today: date | datetime, due: date | datetime, days: int) -> bool:
    """Notification threshold: due today or within the next `days` days"""
    remaining = days_until(today, due)
    return 0 <= remaining <= days


def _to_agenda_item(obligation: Obligation, today: date, urgent_days: int) -> AgendaItem:
    due_date = next_occurrence(today, obligation.rule)
    remaining = days_until(today, due_date)
    return AgendaItem(
        name=obligation.name,
        kind=obligation.kind,
        due_date=due_date,
        amount=obligation.amount,
        days_until=remaining,
        urgent=remaining <= urgent_days,
    )


def build_agenda(
    obligations: Iterable[Obligation],
    today: date | datetime,
    limit: int = 4,
    urgent_days: int = 3,
) -> List[AgendaItem]:
    """
    Upcoming payments across cards, loans and fixed expenses.

    Requirements:
    - Paid obligations are skipped
    - Sorted by next due date; ties keep input order
    - Truncated to `limit` items
    - Items due within `urgent_days` are flagged urgent
    """
    today = as_date(today)
    items = [_to_agenda_item(o, today, urgent_days) for o in obligations if not o.is_paid]
    items.sort(key=lambda item: item.due_date)
    logger.debug("Built agenda", extra={"item_count": len(items), "limit": limit})
    return items[:limit]


def upcoming_alerts(obligations: Iterable[Obligation], today: date | datetime, days: int = 3) -> List[AgendaItem]:
    """Unpaid obligations due within `days`, soonest first"""
    today = as_date(today)
    items = [
        _to_agenda_item(o, today, days)
        for o in obligations
        if not o.is_paid
    ]
    alerts = [item for item in items if 0 <= item.days_until <= days]
    alerts.sort(key=lambda item: item.due_date)
    return alerts


def count_due_soon(obligations: Iterable[Obligation], today: date | datetime, days: int = 7) -> int:
    """Number of unpaid obligations whose next due date is within `days`"""
    today = as_date(today)
    return sum(
        1
        for o in obligations
        if not o.is_paid and is_due_within(today, next_occurrence(today, o.rule), days)
    )
