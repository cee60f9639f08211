"""Billing cycle resolution for credit cards"""

import logging
from datetime import date, datetime

from paycycle.domain.models import CycleWindow, FixedDay, RecurrenceRule, RelativeWindow, validate_day
from paycycle.utils.date_utils import add_days, as_date, days_between, on_day, shift_month

logger = logging.getLogger(__name__)


def previous_cutoff(today: date, cutoff_day: int) -> date:
    """
    Most recent statement cutoff on or before today.

    The cutoff day is clamped to the month length, so a day-31 cutoff
    closes on Feb 29 in 2024 and on Apr 30 in April.
    """
    this_month = on_day(today.year, today.month, cutoff_day)
    if today >= this_month:
        return this_month

    year, month = shift_month(today.year, today.month, -1)
    return on_day(year, month, cutoff_day)


def next_cutoff(prev_cutoff: date, cutoff_day: int) -> date:
    """Cutoff that closes the cycle opened at prev_cutoff"""
    year, month = shift_month(prev_cutoff.year, prev_cutoff.month, 1)
    return on_day(year, month, cutoff_day)


def fixed_deadline(prev_cutoff: date, next_cutoff_date: date, cutoff_day: int, due_day: int) -> date:
    """
    Payment deadline for a card with a fixed due day.

    A due day on or after the cutoff day lands in the cutoff's own month,
    an earlier due day lands in the following month:
        cutoff 5, due 25: cycle Jan 5 -> Feb 5, deadline Jan 25
        cutoff 20, due 5: cycle Jan 20 -> Feb 20, deadline Feb 5
    """
    anchor = prev_cutoff if due_day >= cutoff_day else next_cutoff_date
    return on_day(anchor.year, anchor.month, due_day)


def cycle_progress(today: date, start: date, end: date) -> float:
    """Share of the cycle already elapsed, as a percentage clamped to [0, 100]"""
    total_days = days_between(start, end)
    if total_days <= 0:
        return 100.0

    elapsed = days_between(start, today)
    return min(100.0, max(0.0, elapsed / total_days * 100))


def resolve_cycle(today: date | datetime, cutoff_day: int, rule: RecurrenceRule) -> CycleWindow:
    """
    Compute the active billing cycle for a card.

    Args:
        today: Reference date (time of day is ignored)
        cutoff_day: Statement cutoff day-of-month (1-31)
        rule: FixedDay(due_day) or RelativeWindow(anchor_day, window_days).
            For a relative rule the window is counted from the cycle's cutoff;
            its anchor_day only needs to be a valid day.

    Returns:
        CycleWindow with [start, end) = [previous cutoff, next cutoff),
        the payment deadline and the elapsed progress percentage
    """
    validate_day(cutoff_day, "cutoff_day")
    today = as_date(today)

    start = previous_cutoff(today, cutoff_day)
    end = next_cutoff(start, cutoff_day)

    if isinstance(rule, RelativeWindow):
        deadline = add_days(start, rule.window_days)
    elif isinstance(rule, FixedDay):
        deadline = fixed_deadline(start, end, cutoff_day, rule.day)
    else:
        raise TypeError(f"Unsupported recurrence rule: {rule!r}")

    window = CycleWindow(
        start=start,
        end=end,
        deadline=deadline,
        progress_percent=cycle_progress(today, start, end),
    )
    logger.debug(
        "Resolved cycle",
        extra={"cutoff_day": cutoff_day, "cycle_start": start.isoformat(), "deadline": deadline.isoformat()},
    )
    return window


def resolve_fixed_cycle(today: date | datetime, cutoff_day: int, due_day: int) -> CycleWindow:
    """Cycle for a card whose deadline is a fixed day-of-month"""
    return resolve_cycle(today, cutoff_day, FixedDay(due_day))


def resolve_window_cycle(today: date | datetime, cutoff_day: int, window_days: int) -> CycleWindow:
    """Cycle for a card whose deadline is a number of days after cutoff"""
    return resolve_cycle(today, cutoff_day, RelativeWindow(cutoff_day, window_days))
