"""Custom exceptions for multiflow.

Domain-specific exception types for better error handling and debugging.
"""

from __future__ import annotations

from typing import Any


class MultiFlowError(Exception):
    """Base exception for all multiflow errors."""
    pass


class InvalidParameterError(MultiFlowError):
    """Invalid parameter value provided."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Offer Errors ---

class OfferError(MultiFlowError):
    """Offer negotiation rule violation."""
    pass


class OfferLimitReachedError(OfferError):
    """Active offer quota for the current plan is exhausted."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"Offer limit reached ({limit}). Archive an active offer or upgrade to add more."
        )


class TerminalOfferError(OfferError):
    """Offer is closed and no longer accepts revisions."""

    def __init__(self, offer_id: str, status: Any):
        self.offer_id = offer_id
        self.status = status
        label = getattr(status, "display_name", status)
        super().__init__(f"Offer is {label} and can no longer be revised.")


class InvalidStatusTransitionError(OfferError):
    """Requested status change is not allowed from the current status."""

    def __init__(self, current: Any, requested: Any):
        self.current = current
        self.requested = requested
        cur = getattr(current, "display_name", current)
        req = getattr(requested, "display_name", requested)
        super().__init__(f"Cannot move an offer from {cur} to {req}.")


# --- Repository Errors ---

class RepositoryError(MultiFlowError):
    """Failure reported by a persistence collaborator."""
    pass


class NotAuthenticatedError(RepositoryError):
    """No signed-in user for a user-scoped operation."""

    def __init__(self, message: str = "You need to sign in to continue."):
        super().__init__(message)


class NotFoundError(RepositoryError):
    """Requested record does not exist or is not visible to the user."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} '{identifier}' was not found.")


class ValidationFailedError(RepositoryError):
    """Record rejected by the store."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not save: {reason}")


class CommentPermissionError(RepositoryError):
    """Only the author may delete a comment."""

    def __init__(self, comment_id: str):
        self.comment_id = comment_id
        super().__init__("Only the author can delete this comment.")


# --- Grade Profile Errors ---

class GradeProfileError(MultiFlowError):
    """Grade profile rule violation."""
    pass
