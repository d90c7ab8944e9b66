"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnknownStrategyError(DomainException):
    """Strategy name has no fixed allocation"""

    pass


class ReallocationNotApplicableError(DomainException):
    """Suggestion does not carry a reallocation to apply"""

    pass
