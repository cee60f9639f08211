"""POST /v1/cycle, /v1/next-due, /v1/agenda - billing cycles and upcoming due dates"""

import time
from fastapi import APIRouter, Depends, Request

from paycycle.api.dependencies import get_request_id, get_settings
from paycycle.api.v1.schemas import (
    AgendaItemSchema,
    AgendaRequest,
    AgendaResponse,
    CycleRequest,
    CycleResponse,
    MoneySchema,
    NextDueRequest,
    NextDueResponse,
)
from paycycle.config import Settings
from paycycle.domain.cycles import resolve_cycle
from paycycle.domain.models import AgendaItem
from paycycle.domain.occurrences import build_agenda, count_due_soon, days_until, next_occurrence, upcoming_alerts
from paycycle.infrastructure.observability.logging import log_calculation
from paycycle.infrastructure.observability.metrics import record_calculation

router = APIRouter()


def _agenda_item_schema(item: AgendaItem) -> AgendaItemSchema:
    return AgendaItemSchema(
        name=item.name,
        kind=item.kind,
        due_date=item.due_date,
        amount=MoneySchema(amount=item.amount.amount, currency=item.amount.currency),
        days_until=item.days_until,
        urgent=item.urgent,
    )


@router.post("/cycle", response_model=CycleResponse)
def get_cycle(request_body: CycleRequest, request: Request):
    """
    Resolve the active billing cycle of a card.

    Returns:
        Previous cutoff (start), next cutoff (end), payment deadline and
        the elapsed share of the cycle for progress bars
    """
    start_time = time.perf_counter()

    window = resolve_cycle(request_body.today, request_body.cutoff_day, request_body.to_rule())

    record_calculation("cycle")
    log_calculation(get_request_id(request), "cycle", (time.perf_counter() - start_time) * 1000)

    return CycleResponse(
        start=window.start,
        end=window.end,
        deadline=window.deadline,
        progress_percent=round(window.progress_percent, 2),
        days_until_deadline=days_until(request_body.today, window.deadline),
    )


@router.post("/next-due", response_model=NextDueResponse)
def get_next_due(request_body: NextDueRequest, request: Request):
    """Next concrete due date on or after today for a fixed-day or cutoff+window rule"""
    start_time = time.perf_counter()

    due_date = next_occurrence(request_body.today, request_body.to_rule())

    record_calculation("next_due")
    log_calculation(get_request_id(request), "next_due", (time.perf_counter() - start_time) * 1000)

    return NextDueResponse(due_date=due_date, days_until=days_until(request_body.today, due_date))


@router.post("/agenda", response_model=AgendaResponse)
def get_agenda(
    request_body: AgendaRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Upcoming payments across cards, loans and fixed expenses.

    Returns:
        The next payments sorted by date, the count of payments due soon,
        and the payments close enough to warrant a reminder
    """
    start_time = time.perf_counter()

    obligations = [o.to_domain() for o in request_body.obligations]
    limit = request_body.limit or config.agenda_limit
    urgent_days = request_body.urgent_days if request_body.urgent_days is not None else config.urgent_days
    due_soon_days = request_body.due_soon_days if request_body.due_soon_days is not None else config.due_soon_days

    items = build_agenda(obligations, request_body.today, limit=limit, urgent_days=urgent_days)
    alerts = upcoming_alerts(obligations, request_body.today, days=urgent_days)
    due_soon = count_due_soon(obligations, request_body.today, days=due_soon_days)

    record_calculation("agenda")
    log_calculation(
        get_request_id(request),
        "agenda",
        (time.perf_counter() - start_time) * 1000,
        obligation_count=len(obligations),
    )

    return AgendaResponse(
        items=[_agenda_item_schema(i) for i in items],
        due_soon_count=due_soon,
        alerts=[_agenda_item_schema(a) for a in alerts],
    )
