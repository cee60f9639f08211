"""Unit tests for financial periods, bucketing and period reports"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from paycycle.domain.exceptions import InvalidDayError
from paycycle.domain.models import FinancialPeriod, Transaction
from paycycle.domain.periods import (
    budget_status,
    bucket_by_period,
    current_period,
    monthly_history,
    payments_in_period,
    percent_change,
    period_containing,
    period_label,
    period_report,
    shift_period,
    should_reset_paid,
)


def test_period_containing_before_and_after_start_day():
    """Start day 15: Mar 10 belongs to Feb 15 - Mar 15, Mar 20 to Mar 15 - Apr 15"""
    assert period_containing(date(2024, 3, 10), 15) == FinancialPeriod(date(2024, 2, 15), date(2024, 3, 15))
    assert period_containing(date(2024, 3, 20), 15) == FinancialPeriod(date(2024, 3, 15), date(2024, 4, 15))


def test_period_containing_on_start_day():
    assert period_containing(date(2024, 3, 15), 15).start == date(2024, 3, 15)


def test_period_containing_year_rollover():
    assert period_containing(date(2024, 1, 10), 15) == FinancialPeriod(date(2023, 12, 15), date(2024, 1, 15))
    assert period_containing(date(2024, 12, 20), 15) == FinancialPeriod(date(2024, 12, 15), date(2025, 1, 15))


def test_default_start_day_is_calendar_month():
    period = current_period(datetime(2024, 2, 29, 12, 0))

    assert period == FinancialPeriod(date(2024, 2, 1), date(2024, 3, 1))


@pytest.mark.parametrize("start_day", [0, 29, 31, -5])
def test_invalid_start_day_rejected(start_day):
    with pytest.raises(InvalidDayError):
        period_containing(date(2024, 3, 10), start_day)


def test_period_contains_dates_and_datetimes():
    period = FinancialPeriod(date(2024, 2, 15), date(2024, 3, 15))

    assert date(2024, 2, 15) in period
    assert datetime(2024, 3, 14, 23, 59) in period
    assert date(2024, 3, 15) not in period


def test_shift_period():
    period = FinancialPeriod(date(2024, 1, 15), date(2024, 2, 15))

    assert shift_period(period, -1) == FinancialPeriod(date(2023, 12, 15), date(2024, 1, 15))
    assert shift_period(period, 1) == FinancialPeriod(date(2024, 2, 15), date(2024, 3, 15))
    assert shift_period(period, 12) == FinancialPeriod(date(2025, 1, 15), date(2025, 2, 15))


def test_period_label():
    assert period_label(FinancialPeriod(date(2024, 3, 1), date(2024, 4, 1))) == "2024-03"
    assert period_label(FinancialPeriod(date(2024, 12, 15), date(2025, 1, 15))) == "2024-12/2025-01"


def test_bucket_by_period(sample_transactions):
    buckets = bucket_by_period(sample_transactions, start_day=15)

    assert list(buckets) == [date(2024, 1, 15), date(2024, 2, 15), date(2024, 3, 15)]
    assert [len(b.transactions) for b in buckets.values()] == [2, 3, 1]
    assert buckets[date(2024, 2, 15)].period == FinancialPeriod(date(2024, 2, 15), date(2024, 3, 15))


def test_bucket_by_period_loses_and_duplicates_nothing(sample_transactions):
    buckets = bucket_by_period(sample_transactions, start_day=15)

    bucketed = [tx for b in buckets.values() for tx in b.transactions]
    assert len(bucketed) == len(sample_transactions)
    assert {id(tx) for tx in bucketed} == {id(tx) for tx in sample_transactions}

    for bucket in buckets.values():
        for tx in bucket.transactions:
            assert tx.date in bucket.period


def test_bucket_by_period_empty():
    assert bucket_by_period([], start_day=5) == {}


def test_buckets_never_overlap(sample_transactions):
    periods = [b.period for b in bucket_by_period(sample_transactions, start_day=15).values()]

    for earlier, later in zip(periods, periods[1:]):
        assert earlier.end <= later.start


def test_payments_in_period_skips_purchases(sample_transactions):
    period = FinancialPeriod(date(2024, 2, 15), date(2024, 3, 15))

    payments = payments_in_period(sample_transactions, period)

    assert [tx.amount for tx in payments] == [Decimal("2000.00"), Decimal("10.00")]


def test_should_reset_paid():
    today = date(2024, 2, 20)

    assert should_reset_paid(date(2024, 2, 10), today, start_day=15) is True
    assert should_reset_paid(datetime(2024, 2, 16, 8, 0), today, start_day=15) is False
    assert should_reset_paid(date(2024, 2, 15), today, start_day=15) is False
    assert should_reset_paid(None, today, start_day=15) is False


def test_percent_change():
    assert percent_change(Decimal("50"), Decimal("100")) == Decimal("-50")
    assert percent_change(Decimal("150"), Decimal("100")) == Decimal("50")
    assert percent_change(Decimal("100"), Decimal("0")) == Decimal("100")
    assert percent_change(Decimal("0"), Decimal("0")) == Decimal("0")


def test_budget_status():
    status = budget_status(Decimal("3500"), Decimal("3000"))
    assert status.over_budget is True
    assert status.warning is True
    assert status.overage == Decimal("500")

    status = budget_status(Decimal("2000"), Decimal("3000"))
    assert status.over_budget is False
    assert status.warning is False
    assert status.overage == Decimal("0")

    status = budget_status(Decimal("2000"), Decimal("0"))
    assert status.percent == Decimal("0")
    assert status.over_budget is False


def test_period_report(sample_transactions):
    report = period_report(
        sample_transactions,
        date(2024, 3, 10),
        Decimal("60"),
        "DOP",
        start_day=15,
        budget=Decimal("3000"),
    )

    assert report.period == FinancialPeriod(date(2024, 2, 15), date(2024, 3, 15))
    # 2000 DOP + 10 USD * 60
    assert report.total == Decimal("2600.00")
    # 1000 DOP + 50 USD * 60
    assert report.previous_total == Decimal("4000.00")
    assert report.percent_change == Decimal("-35")
    assert report.by_source == {"expense": Decimal("2000.00"), "card": Decimal("600.00")}
    assert report.transaction_count == 2

    assert report.budget_status.over_budget is False
    assert report.budget_status.warning is True


def test_period_report_without_budget_or_data():
    report = period_report([], date(2024, 3, 10), Decimal("60"), "DOP")

    assert report.total == Decimal("0")
    assert report.percent_change == Decimal("0")
    assert report.by_source == {}
    assert report.budget_status is None


def test_period_report_unknown_source():
    tx = Transaction(date(2024, 3, 2), Decimal("10"), "DOP")

    report = period_report([tx], date(2024, 3, 10), Decimal("60"), "DOP")

    assert report.by_source == {"other": Decimal("10")}


def test_monthly_history(sample_transactions):
    history = monthly_history(sample_transactions, Decimal("60"), "DOP", start_day=15)

    assert [h.period.start for h in history] == [date(2024, 1, 15), date(2024, 2, 15), date(2024, 3, 15)]
    assert [h.total for h in history] == [Decimal("4000.00"), Decimal("2600.00"), Decimal("500.00")]

    recent = monthly_history(sample_transactions, Decimal("60"), "DOP", start_day=15, limit=2)
    assert [h.period.start for h in recent] == [date(2024, 2, 15), date(2024, 3, 15)]
