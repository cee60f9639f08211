"""POST /v1/periods/* - financial periods, bucketing and monthly reports"""

import time
from fastapi import APIRouter, Depends, Request

from paycycle.api.dependencies import get_request_id, get_settings
from paycycle.api.v1.schemas import (
    BucketRequest,
    BucketResponse,
    BucketSchema,
    BudgetStatusSchema,
    CurrentPeriodRequest,
    PeriodSchema,
    PeriodTotalSchema,
    ReportRequest,
    ReportResponse,
    TransactionSchema,
)
from paycycle.config import Settings
from paycycle.domain.amortization import round_money
from paycycle.domain.models import FinancialPeriod, Transaction
from paycycle.domain.periods import bucket_by_period, monthly_history, period_containing, period_label, period_report
from paycycle.infrastructure.observability.logging import log_calculation
from paycycle.infrastructure.observability.metrics import record_calculation

router = APIRouter()


def _period_schema(period: FinancialPeriod) -> PeriodSchema:
    return PeriodSchema(start=period.start, end=period.end, label=period_label(period))


def _transaction_schema(tx: Transaction) -> TransactionSchema:
    return TransactionSchema(
        date=tx.date,
        amount=tx.amount,
        currency=tx.currency,
        type=tx.type,
        source=tx.source,
        description=tx.description,
    )


@router.post("/periods/current", response_model=PeriodSchema)
def get_current_period(
    request_body: CurrentPeriodRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Financial period containing the given date"""
    start_time = time.perf_counter()
    start_day = request_body.start_day or config.default_financial_start_day
    period = period_containing(request_body.date, start_day)

    record_calculation("period")
    log_calculation(get_request_id(request), "period", (time.perf_counter() - start_time) * 1000)
    return _period_schema(period)


@router.post("/periods/buckets", response_model=BucketResponse)
def get_buckets(
    request_body: BucketRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Group transactions into financial periods.

    Returns:
        One bucket per period that has transactions, oldest first
    """
    start_time = time.perf_counter()
    start_day = request_body.start_day or config.default_financial_start_day

    transactions = [tx.to_domain() for tx in request_body.transactions]

    buckets = bucket_by_period(transactions, start_day)

    record_calculation("buckets", transaction_count=len(transactions))
    log_calculation(
        get_request_id(request),
        "buckets",
        (time.perf_counter() - start_time) * 1000,
        transaction_count=len(transactions),
    )

    return BucketResponse(
        buckets=[
            BucketSchema(
                period=_period_schema(bucket.period),
                transactions=[_transaction_schema(tx) for tx in bucket.transactions],
            )
            for bucket in buckets.values()
        ]
    )


@router.post("/periods/report", response_model=ReportResponse)
def get_report(
    request_body: ReportRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Monthly payment report for the period containing `reference`.

    Returns:
        Totals in the reporting currency, comparison with the previous
        period, breakdown by source, budget progress and recent history
    """
    start_time = time.perf_counter()
    start_day = request_body.start_day or config.default_financial_start_day
    rate = request_body.rate if request_body.rate is not None else config.default_exchange_rate
    transactions = [tx.to_domain() for tx in request_body.transactions]

    report = period_report(
        transactions,
        request_body.reference,
        rate,
        config.reporting_currency,
        start_day=start_day,
        budget=request_body.budget,
        warning_percent=config.budget_warning_percent,
    )
    history = monthly_history(transactions, rate, config.reporting_currency, start_day=start_day)

    record_calculation("report", transaction_count=len(transactions))
    log_calculation(
        get_request_id(request),
        "report",
        (time.perf_counter() - start_time) * 1000,
        transaction_count=len(transactions),
    )

    budget = None
    if report.budget_status is not None:
        budget = BudgetStatusSchema(
            percent=round_money(report.budget_status.percent),
            over_budget=report.budget_status.over_budget,
            warning=report.budget_status.warning,
            overage=round_money(report.budget_status.overage),
        )

    return ReportResponse(
        period=_period_schema(report.period),
        reporting_currency=config.reporting_currency,
        total=round_money(report.total),
        previous_total=round_money(report.previous_total),
        percent_change=round_money(report.percent_change),
        by_source={source: round_money(total) for source, total in report.by_source.items()},
        transaction_count=report.transaction_count,
        budget_status=budget,
        history=[
            PeriodTotalSchema(period=_period_schema(h.period), total=round_money(h.total))
            for h in history
        ],
    )
