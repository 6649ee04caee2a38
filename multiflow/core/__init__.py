"""Core financial primitives and ambient services."""

from .exceptions import (
    CommentPermissionError,
    GradeProfileError,
    InvalidParameterError,
    InvalidStatusTransitionError,
    MultiFlowError,
    NotAuthenticatedError,
    NotFoundError,
    OfferError,
    OfferLimitReachedError,
    RepositoryError,
    TerminalOfferError,
    ValidationFailedError,
)
from .financial import (
    annual_payment_per_loan_dollar,
    calculate_first_year_amortization,
    calculate_loan_amount,
    calculate_monthly_payment,
)

__all__ = [
    "annual_payment_per_loan_dollar",
    "calculate_first_year_amortization",
    "calculate_loan_amount",
    "calculate_monthly_payment",
    # Exceptions
    "MultiFlowError",
    "InvalidParameterError",
    "OfferError",
    "OfferLimitReachedError",
    "TerminalOfferError",
    "InvalidStatusTransitionError",
    "RepositoryError",
    "NotAuthenticatedError",
    "NotFoundError",
    "ValidationFailedError",
    "CommentPermissionError",
    "GradeProfileError",
]
