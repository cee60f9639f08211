"""Domain models - immutable value types passed into the calculation engine"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Protocol, Union

from paycycle.domain.exceptions import (
    InvalidAmortizationInputError,
    InvalidDayError,
)
from paycycle.utils.date_utils import as_date, in_half_open_range

MAX_DAY_OF_MONTH = 31
MAX_PERIOD_START_DAY = 28  # every month has a 28th


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """Coerce a numeric value to Decimal without binary float drift"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def validate_day(day: int, name: str = "day") -> None:
    if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= MAX_DAY_OF_MONTH:
        raise InvalidDayError(f"{name} must be an integer between 1 and {MAX_DAY_OF_MONTH}, got {day!r}")


def validate_start_day(start_day: int) -> None:
    if isinstance(start_day, bool) or not isinstance(start_day, int) or not 1 <= start_day <= MAX_PERIOD_START_DAY:
        raise InvalidDayError(
            f"financial start day must be an integer between 1 and {MAX_PERIOD_START_DAY}, got {start_day!r}"
        )


@dataclass(frozen=True)
class Money:
    """Decimal amount in a given currency"""

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))


@dataclass(frozen=True)
class FixedDay:
    """Obligation due on the same day every month (clamped to month length)"""

    day: int

    def __post_init__(self) -> None:
        validate_day(self.day)


@dataclass(frozen=True)
class RelativeWindow:
    """Obligation due a number of days after a recurring anchor day"""

    anchor_day: int
    window_days: int

    def __post_init__(self) -> None:
        validate_day(self.anchor_day, "anchor_day")
        if isinstance(self.window_days, bool) or not isinstance(self.window_days, int) or self.window_days < 0:
            raise InvalidDayError(f"window_days must be a non-negative integer, got {self.window_days!r}")


RecurrenceRule = Union[FixedDay, RelativeWindow]


@dataclass(frozen=True)
class CycleWindow:
    """Billing cycle [start, end) and the payment deadline for it"""

    start: date
    end: date
    deadline: date
    progress_percent: float = 0.0


@dataclass(frozen=True)
class AmortizationInput:
    """Loan or installment terms"""

    principal: Decimal
    term_months: int
    annual_rate_percent: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        object.__setattr__(self, "principal", to_decimal(self.principal))
        object.__setattr__(self, "annual_rate_percent", to_decimal(self.annual_rate_percent))

        if self.principal <= 0:
            raise InvalidAmortizationInputError(f"principal must be positive, got {self.principal}")
        if isinstance(self.term_months, bool) or not isinstance(self.term_months, int) or self.term_months <= 0:
            raise InvalidAmortizationInputError(f"term_months must be a positive integer, got {self.term_months!r}")
        if self.annual_rate_percent < 0:
            raise InvalidAmortizationInputError(
                f"annual_rate_percent must not be negative, got {self.annual_rate_percent}"
            )


@dataclass(frozen=True)
class AmortizationResult:
    """Fixed monthly payment, kept at full precision until display"""

    monthly_payment: Decimal


@dataclass(frozen=True)
class ScheduleEntry:
    """Single month in an amortization schedule"""

    period: int
    due_date: date
    payment: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class PaymentSplit:
    """How a loan payment divides into interest and capital"""

    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class FinancialPeriod:
    """User-defined financial month, half-open [start, end)"""

    start: date
    end: date

    def __contains__(self, value: Union[date, datetime]) -> bool:
        return in_half_open_range(as_date(value), self.start, self.end)


class TransactionLike(Protocol):
    """Shape every dated money record supplies to the engine"""

    date: Union[date, datetime]
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class Transaction:
    """Payment or charge recorded against a card, loan or expense"""

    date: Union[date, datetime]
    amount: Decimal
    currency: str
    type: str = "PAGO"  # "PAGO" (payment) | "CORTE" (statement) | "COMPRA" (purchase)
    source: Optional[str] = None  # "card" | "loan" | "expense"
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))


@dataclass(frozen=True)
class PeriodBucket:
    """Transactions that fall into one financial period"""

    period: FinancialPeriod
    transactions: List[TransactionLike] = field(default_factory=list)


@dataclass(frozen=True)
class Obligation:
    """Recurring card, loan or fixed-expense payment"""

    name: str
    kind: str  # "card" | "loan" | "expense"
    rule: RecurrenceRule
    amount: Money
    is_paid: bool = False


@dataclass(frozen=True)
class AgendaItem:
    """Upcoming payment resolved to a concrete date"""

    name: str
    kind: str
    due_date: date
    amount: Money
    days_until: int
    urgent: bool


@dataclass(frozen=True)
class BudgetStatus:
    """Spend against a period budget"""

    percent: Decimal
    over_budget: bool
    warning: bool
    overage: Decimal


@dataclass(frozen=True)
class PeriodReport:
    """Totals for one financial period compared with the previous one"""

    period: FinancialPeriod
    total: Decimal
    previous_total: Decimal
    percent_change: Decimal
    by_source: Dict[str, Decimal]
    transaction_count: int
    budget_status: Optional[BudgetStatus] = None


@dataclass(frozen=True)
class PaymentProgress:
    """Paid versus pending amounts for the current period"""

    total: Decimal
    paid: Decimal
    pending: Decimal
    percent: Decimal


@dataclass(frozen=True)
class PeriodTotal:
    """Converted total for one financial period"""

    period: FinancialPeriod
    total: Decimal


@dataclass(frozen=True)
class PaymentStatus:
    """Amount owed for the period and whether it has been paid"""

    amount: Money
    is_paid: bool = False
