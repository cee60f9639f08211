"""POST /v1/summary - dashboard totals folded into the reporting currency"""

import time
from typing import Dict, List
from fastapi import APIRouter, Depends, Request

from paycycle.api.dependencies import get_request_id, get_settings
from paycycle.api.v1.schemas import ProgressSchema, SummaryRequest, SummaryResponse
from paycycle.config import Settings
from paycycle.domain.amortization import round_money
from paycycle.domain.currency import aggregate, distribution, paid_progress, totals_by_currency
from paycycle.domain.models import Money
from paycycle.infrastructure.observability.logging import log_calculation
from paycycle.infrastructure.observability.metrics import record_calculation

router = APIRouter()


@router.post("/summary", response_model=SummaryResponse)
def get_summary(
    request_body: SummaryRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Financial summary for the dashboard.

    The rate is applied as given; its accuracy is the caller's responsibility.

    Returns:
        Per-currency totals, the converted grand total, the distribution
        across groups and paid/pending progress of the items
    """
    start_time = time.perf_counter()
    rate = request_body.rate if request_body.rate is not None else config.default_exchange_rate

    statuses = [item.to_domain() for item in request_body.items]
    moneys = [status.amount for status in statuses]

    groups: Dict[str, List[Money]] = {}
    for item, money in zip(request_body.items, moneys):
        groups.setdefault(item.group, []).append(money)

    progress = paid_progress(statuses, config.reporting_currency, rate)

    record_calculation("summary")
    log_calculation(get_request_id(request), "summary", (time.perf_counter() - start_time) * 1000)

    return SummaryResponse(
        reporting_currency=config.reporting_currency,
        totals_by_currency={c: round_money(t) for c, t in totals_by_currency(moneys).items()},
        total=round_money(aggregate(moneys, config.reporting_currency, rate)),
        distribution={g: round_money(t) for g, t in distribution(groups, config.reporting_currency, rate).items()},
        progress=ProgressSchema(
            total=round_money(progress.total),
            paid=round_money(progress.paid),
            pending=round_money(progress.pending),
            percent=round_money(progress.percent),
        ),
    )
