"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidDayError(DomainException):
    """Day-of-month or financial start day is outside its allowed range"""

    pass


class InvalidAmortizationInputError(DomainException):
    """Principal, term or interest rate cannot be amortized"""

    pass


class InvalidExchangeRateError(DomainException):
    """Conversion rate is zero or negative"""

    pass
