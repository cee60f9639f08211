"""POST /v1/amortization, /v1/amortization/schedule, /v1/loans/payment-split"""

import time
from fastapi import APIRouter, Request

from paycycle.api.dependencies import get_request_id
from paycycle.api.v1.schemas import (
    AmortizationRequest,
    AmortizationResponse,
    PaymentSplitRequest,
    PaymentSplitResponse,
    ScheduleEntrySchema,
    ScheduleRequest,
    ScheduleResponse,
)
from paycycle.domain.amortization import (
    amortization_schedule,
    calculate_monthly_payment,
    round_money,
    split_loan_payment,
)
from paycycle.domain.models import AmortizationInput
from paycycle.infrastructure.observability.logging import log_calculation
from paycycle.infrastructure.observability.metrics import record_calculation

router = APIRouter()


def _terms(request_body: AmortizationRequest) -> AmortizationInput:
    return AmortizationInput(
        principal=request_body.principal,
        term_months=request_body.term_months,
        annual_rate_percent=request_body.annual_rate_percent,
    )


@router.post("/amortization", response_model=AmortizationResponse)
def get_monthly_payment(request_body: AmortizationRequest, request: Request):
    """
    Fixed monthly payment for an installment purchase or loan.

    Returns:
        Monthly payment rounded to cents, plus the totals it implies
    """
    start_time = time.perf_counter()

    terms = _terms(request_body)
    result = calculate_monthly_payment(terms)
    total_paid = result.monthly_payment * terms.term_months

    record_calculation("amortization")
    log_calculation(
        get_request_id(request),
        "amortization",
        (time.perf_counter() - start_time) * 1000,
        term_months=terms.term_months,
    )

    return AmortizationResponse(
        monthly_payment=round_money(result.monthly_payment),
        total_paid=round_money(total_paid),
        total_interest=round_money(total_paid - terms.principal),
    )


@router.post("/amortization/schedule", response_model=ScheduleResponse)
def get_schedule(request_body: ScheduleRequest, request: Request):
    """Month-by-month repayment schedule starting at first_due_date"""
    start_time = time.perf_counter()

    terms = _terms(request_body)
    entries = amortization_schedule(terms, request_body.first_due_date)

    record_calculation("schedule")
    log_calculation(get_request_id(request), "schedule", (time.perf_counter() - start_time) * 1000)

    return ScheduleResponse(
        monthly_payment=round_money(calculate_monthly_payment(terms).monthly_payment),
        entries=[
            ScheduleEntrySchema(
                period=e.period,
                due_date=e.due_date,
                payment=e.payment,
                interest=e.interest,
                principal=e.principal,
                remaining_balance=e.remaining_balance,
            )
            for e in entries
        ],
    )


@router.post("/loans/payment-split", response_model=PaymentSplitResponse)
def get_payment_split(request_body: PaymentSplitRequest, request: Request):
    """Split a loan payment into interest and capital and return the new balance"""
    start_time = time.perf_counter()

    split = split_loan_payment(request_body.balance, request_body.annual_rate_percent, request_body.amount)

    record_calculation("payment_split")
    log_calculation(get_request_id(request), "payment_split", (time.perf_counter() - start_time) * 1000)

    return PaymentSplitResponse(
        interest=split.interest,
        principal=round_money(split.principal),
        remaining_balance=split.remaining_balance,
    )
