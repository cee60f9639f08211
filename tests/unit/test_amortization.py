"""Unit tests for amortization and loan payment math"""

import pytest
from datetime import date
from decimal import Decimal
from paycycle.domain.amortization import (
    amortization_schedule,
    calculate_monthly_payment,
    installment_progress,
    monthly_interest,
    monthly_rate,
    round_money,
    split_loan_payment,
)
from paycycle.domain.exceptions import InvalidAmortizationInputError
from paycycle.domain.models import AmortizationInput


def test_zero_rate_divides_equally():
    """12000 over 12 months at 0% -> 1000.00"""
    result = calculate_monthly_payment(AmortizationInput(Decimal("12000"), 12, Decimal("0")))

    assert result.monthly_payment == Decimal("1000")
    assert round_money(result.monthly_payment) == Decimal("1000.00")


def test_standard_amortization_formula():
    """10000 over 24 months at 12% -> i = 0.01, payment 470.73"""
    terms = AmortizationInput(Decimal("10000"), 24, Decimal("12"))

    assert monthly_rate(terms.annual_rate_percent) == Decimal("0.01")
    assert round_money(calculate_monthly_payment(terms).monthly_payment) == Decimal("470.73")


def test_single_month_term():
    # No interest: the whole principal in one payment
    result = calculate_monthly_payment(AmortizationInput(Decimal("850.50"), 1))
    assert result.monthly_payment == Decimal("850.50")

    # With interest: principal plus one month of interest
    result = calculate_monthly_payment(AmortizationInput(Decimal("1000"), 1, Decimal("12")))
    assert round_money(result.monthly_payment) == Decimal("1010.00")


def test_payment_is_deterministic():
    terms = AmortizationInput(Decimal("37500"), 36, Decimal("18.5"))
    payments = {calculate_monthly_payment(terms).monthly_payment for _ in range(50)}

    assert len(payments) == 1


def test_accepts_plain_numbers():
    terms = AmortizationInput(10000, 24, 12)

    assert round_money(calculate_monthly_payment(terms).monthly_payment) == Decimal("470.73")


@pytest.mark.parametrize("principal, term", [(Decimal("100"), 3), (Decimal("12345.67"), 7), (Decimal("1"), 12)])
def test_zero_rate_payments_add_back_to_principal(principal, term):
    payment = round_money(calculate_monthly_payment(AmortizationInput(principal, term)).monthly_payment)

    assert abs(payment * term - principal) <= Decimal("0.01") * term


@pytest.mark.parametrize("rate", [Decimal("0.5"), Decimal("12"), Decimal("29.99")])
def test_positive_rate_costs_more_than_principal(rate):
    terms = AmortizationInput(Decimal("5000"), 18, rate)
    payment = calculate_monthly_payment(terms).monthly_payment

    assert payment * terms.term_months > terms.principal


@pytest.mark.parametrize(
    "principal, term, rate",
    [
        (Decimal("0"), 12, Decimal("0")),
        (Decimal("-100"), 12, Decimal("0")),
        (Decimal("100"), 0, Decimal("0")),
        (Decimal("100"), -2, Decimal("0")),
        (Decimal("100"), 12, Decimal("-1")),
    ],
)
def test_invalid_terms_rejected(principal, term, rate):
    with pytest.raises(InvalidAmortizationInputError):
        AmortizationInput(principal, term, rate)


def test_round_money_half_up():
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("0.004999")) == Decimal("0.00")
    assert round_money(0.1 + 0.2) == Decimal("0.30")


def test_schedule_zero_rate_last_payment_absorbs_remainder():
    """100.00 over 3 months -> 33.33, 33.33, 33.34"""
    entries = amortization_schedule(AmortizationInput(Decimal("100"), 3), date(2024, 1, 15))

    assert [e.payment for e in entries] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert all(e.interest == 0 for e in entries)
    assert sum(e.principal for e in entries) == Decimal("100.00")
    assert entries[-1].remaining_balance == Decimal("0.00")


def test_schedule_with_interest():
    entries = amortization_schedule(AmortizationInput(Decimal("10000"), 24, Decimal("12")), date(2024, 1, 10))

    assert len(entries) == 24
    assert [e.period for e in entries] == list(range(1, 25))

    first = entries[0]
    assert first.payment == Decimal("470.73")
    assert first.interest == Decimal("100.00")
    assert first.principal == Decimal("370.73")
    assert first.remaining_balance == Decimal("9629.27")

    assert sum(e.principal for e in entries) == Decimal("10000.00")
    assert entries[-1].remaining_balance == Decimal("0.00")
    assert abs(entries[-1].payment - Decimal("470.73")) < Decimal("0.50")

    # Balance only goes down
    balances = [e.remaining_balance for e in entries]
    assert balances == sorted(balances, reverse=True)


def test_schedule_due_dates_keep_day_of_month():
    entries = amortization_schedule(AmortizationInput(Decimal("300"), 4), date(2024, 1, 31))

    assert [e.due_date for e in entries] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_monthly_interest():
    assert monthly_interest(Decimal("120000"), Decimal("12")) == Decimal("1200")
    assert monthly_interest(Decimal("120000"), Decimal("0")) == Decimal("0")


def test_split_loan_payment_with_interest():
    split = split_loan_payment(Decimal("100000"), Decimal("12"), Decimal("5000"))

    assert split.interest == Decimal("1000.00")
    assert split.principal == Decimal("4000.00")
    assert split.remaining_balance == Decimal("96000.00")


def test_split_loan_payment_without_rate():
    split = split_loan_payment(Decimal("2500"), Decimal("0"), Decimal("500"))

    assert split.interest == Decimal("0.00")
    assert split.principal == Decimal("500")
    assert split.remaining_balance == Decimal("2000.00")


def test_split_loan_payment_below_interest_keeps_balance():
    split = split_loan_payment(Decimal("100000"), Decimal("12"), Decimal("500"))

    assert split.principal == Decimal("0")
    assert split.remaining_balance == Decimal("100000.00")


def test_split_loan_payment_never_negative_balance():
    split = split_loan_payment(Decimal("1000"), Decimal("0"), Decimal("1500"))

    assert split.remaining_balance == Decimal("0.00")


def test_split_loan_payment_rejects_negative_amount():
    with pytest.raises(InvalidAmortizationInputError):
        split_loan_payment(Decimal("1000"), Decimal("0"), Decimal("-1"))


def test_installment_progress():
    assert installment_progress(3, 12) == 25.0
    assert installment_progress(0, 6) == 0.0
    assert installment_progress(7, 6) == 100.0

    with pytest.raises(InvalidAmortizationInputError):
        installment_progress(1, 0)
