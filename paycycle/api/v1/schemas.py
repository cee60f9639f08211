"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from paycycle.domain.models import (
    FixedDay,
    Money,
    Obligation,
    PaymentStatus,
    RecurrenceRule,
    RelativeWindow,
    Transaction,
)

ExchangeRate = Union[Decimal, Dict[str, Decimal]]


class MoneySchema(BaseModel):
    """Amount in a given currency"""

    amount: Decimal
    currency: str = Field(..., min_length=3, max_length=3)

    def to_domain(self) -> Money:
        return Money(amount=self.amount, currency=self.currency)


# --- Cycles & due dates ---


class CycleRequest(BaseModel):
    """Request body for POST /v1/cycle"""

    today: date
    cutoff_day: int = Field(..., ge=1, le=31)
    due_day: Optional[int] = Field(None, ge=1, le=31, description="Fixed payment day")
    window_days: Optional[int] = Field(None, ge=0, description="Days after cutoff the payment is due")

    @model_validator(mode="after")
    def check_rule(self) -> "CycleRequest":
        if (self.due_day is None) == (self.window_days is None):
            raise ValueError("Exactly one of due_day or window_days is required")
        return self

    def to_rule(self) -> RecurrenceRule:
        if self.window_days is not None:
            return RelativeWindow(anchor_day=self.cutoff_day, window_days=self.window_days)
        return FixedDay(day=self.due_day)


class CycleResponse(BaseModel):
    """Response for POST /v1/cycle"""

    start: date
    end: date
    deadline: date
    progress_percent: float
    days_until_deadline: int


class NextDueRequest(BaseModel):
    """Request body for POST /v1/next-due"""

    today: date
    day: Optional[int] = Field(None, ge=1, le=31, description="Fixed day-of-month")
    anchor_day: Optional[int] = Field(None, ge=1, le=31)
    window_days: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_rule(self) -> "NextDueRequest":
        relative = self.anchor_day is not None or self.window_days is not None
        if self.day is not None and relative:
            raise ValueError("Use either day or anchor_day + window_days, not both")
        if self.day is None and (self.anchor_day is None or self.window_days is None):
            raise ValueError("day, or both anchor_day and window_days, are required")
        return self

    def to_rule(self) -> RecurrenceRule:
        if self.day is not None:
            return FixedDay(day=self.day)
        return RelativeWindow(anchor_day=self.anchor_day, window_days=self.window_days)


class NextDueResponse(BaseModel):
    """Response for POST /v1/next-due"""

    due_date: date
    days_until: int


class ObligationSchema(BaseModel):
    """Card, loan or fixed expense as supplied by the caller"""

    name: str = Field(..., min_length=1)
    kind: Literal["card", "loan", "expense"]
    day: Optional[int] = Field(None, ge=1, le=31)
    anchor_day: Optional[int] = Field(None, ge=1, le=31)
    window_days: Optional[int] = Field(None, ge=0)
    amount: MoneySchema
    is_paid: bool = False

    @model_validator(mode="after")
    def check_rule(self) -> "ObligationSchema":
        if self.day is None and (self.anchor_day is None or self.window_days is None):
            raise ValueError("day, or both anchor_day and window_days, are required")
        return self

    def to_domain(self) -> Obligation:
        if self.day is not None:
            rule: RecurrenceRule = FixedDay(day=self.day)
        else:
            rule = RelativeWindow(anchor_day=self.anchor_day, window_days=self.window_days)
        return Obligation(
            name=self.name,
            kind=self.kind,
            rule=rule,
            amount=self.amount.to_domain(),
            is_paid=self.is_paid,
        )


class AgendaRequest(BaseModel):
    """Request body for POST /v1/agenda"""

    today: date
    obligations: List[ObligationSchema]
    limit: Optional[int] = Field(None, ge=1)
    urgent_days: Optional[int] = Field(None, ge=0)
    due_soon_days: Optional[int] = Field(None, ge=0)


class AgendaItemSchema(BaseModel):
    """Single upcoming payment"""

    name: str
    kind: str
    due_date: date
    amount: MoneySchema
    days_until: int
    urgent: bool


class AgendaResponse(BaseModel):
    """Response for POST /v1/agenda"""

    items: List[AgendaItemSchema]
    due_soon_count: int
    alerts: List[AgendaItemSchema]


# --- Amortization ---


class AmortizationRequest(BaseModel):
    """Request body for POST /v1/amortization"""

    principal: Decimal = Field(..., gt=0)
    term_months: int = Field(..., gt=0)
    annual_rate_percent: Decimal = Field(Decimal("0"), ge=0)


class AmortizationResponse(BaseModel):
    """Response for POST /v1/amortization"""

    monthly_payment: Decimal
    total_paid: Decimal
    total_interest: Decimal


class ScheduleRequest(AmortizationRequest):
    """Request body for POST /v1/amortization/schedule"""

    first_due_date: date


class ScheduleEntrySchema(BaseModel):
    """Single month of a repayment schedule"""

    period: int
    due_date: date
    payment: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


class ScheduleResponse(BaseModel):
    """Response for POST /v1/amortization/schedule"""

    monthly_payment: Decimal
    entries: List[ScheduleEntrySchema]


class PaymentSplitRequest(BaseModel):
    """Request body for POST /v1/loans/payment-split"""

    balance: Decimal = Field(..., ge=0)
    annual_rate_percent: Decimal = Field(Decimal("0"), ge=0)
    amount: Decimal = Field(..., ge=0)


class PaymentSplitResponse(BaseModel):
    """Response for POST /v1/loans/payment-split"""

    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


# --- Periods ---


class TransactionSchema(BaseModel):
    """Dated money record from a card, loan or expense history"""

    date: Union[datetime, date]
    amount: Decimal
    currency: str = Field(..., min_length=3, max_length=3)
    type: str = "PAGO"
    source: Optional[str] = None
    description: str = ""

    def to_domain(self) -> Transaction:
        return Transaction(
            date=self.date,
            amount=self.amount,
            currency=self.currency,
            type=self.type,
            source=self.source,
            description=self.description,
        )


class PeriodSchema(BaseModel):
    """Financial period [start, end)"""

    start: date
    end: date
    label: str


class CurrentPeriodRequest(BaseModel):
    """Request body for POST /v1/periods/current"""

    date: Union[datetime, date]
    start_day: Optional[int] = Field(None, ge=1, le=28)


class BucketRequest(BaseModel):
    """Request body for POST /v1/periods/buckets"""

    start_day: Optional[int] = Field(None, ge=1, le=28)
    transactions: List[TransactionSchema]


class BucketSchema(BaseModel):
    """Transactions grouped into one period"""

    period: PeriodSchema
    transactions: List[TransactionSchema]


class BucketResponse(BaseModel):
    """Response for POST /v1/periods/buckets"""

    buckets: List[BucketSchema]


class ReportRequest(BaseModel):
    """Request body for POST /v1/periods/report"""

    reference: date
    start_day: Optional[int] = Field(None, ge=1, le=28)
    transactions: List[TransactionSchema]
    rate: Optional[ExchangeRate] = None
    budget: Optional[Decimal] = Field(None, ge=0)


class BudgetStatusSchema(BaseModel):
    percent: Decimal
    over_budget: bool
    warning: bool
    overage: Decimal


class PeriodTotalSchema(BaseModel):
    period: PeriodSchema
    total: Decimal


class ReportResponse(BaseModel):
    """Response for POST /v1/periods/report"""

    period: PeriodSchema
    reporting_currency: str
    total: Decimal
    previous_total: Decimal
    percent_change: Decimal
    by_source: Dict[str, Decimal]
    transaction_count: int
    budget_status: Optional[BudgetStatusSchema] = None
    history: List[PeriodTotalSchema]


# --- Currency summary ---


class SummaryItem(BaseModel):
    """Balance or expense contributing to the dashboard summary"""

    group: str = Field(..., min_length=1, description="e.g. cards, loans, expenses")
    amount: MoneySchema
    is_paid: bool = False

    def to_domain(self) -> PaymentStatus:
        return PaymentStatus(amount=self.amount.to_domain(), is_paid=self.is_paid)


class SummaryRequest(BaseModel):
    """Request body for POST /v1/summary"""

    items: List[SummaryItem]
    rate: Optional[ExchangeRate] = None


class ProgressSchema(BaseModel):
    total: Decimal
    paid: Decimal
    pending: Decimal
    percent: Decimal


class SummaryResponse(BaseModel):
    """Response for POST /v1/summary"""

    reporting_currency: str
    totals_by_currency: Dict[str, Decimal]
    total: Decimal
    distribution: Dict[str, Decimal]
    progress: ProgressSchema
