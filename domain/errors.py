"""Domain error taxonomy shared by the pricing pipeline and the repositories."""
from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base class for errors that carry a stable kind and a readable detail."""

    kind = "DomainError"
    default_message = "Domain error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message}: {detail}")


class NotProvidedError(DomainError):
    """Raised when a request carries no body to work with."""

    kind = "NotProvidedError"
    default_message = "Not provided"


class OrderNotProvidedError(NotProvidedError):
    kind = "OrderNotProvidedError"
    default_message = "Order not provided"


class ValidationError(DomainError, ValueError):
    """Raised when a required field is missing or malformed."""

    kind = "ValidationError"
    default_message = "Invalid order"


class InvalidOrderItemsError(DomainError):
    """Raised when line items cannot be resolved against the catalog."""

    kind = "InvalidOrderItemsError"
    default_message = "Order with invalid items"


class NotFoundError(DomainError, LookupError):
    kind = "NotFoundError"
    default_message = "Not found"


class InvalidStateError(DomainError):
    kind = "InvalidStateError"
    default_message = "Invalid state transition"


class ConflictError(DomainError):
    """Raised when a row cannot be removed because other rows still point at it."""

    kind = "ConflictError"
    default_message = "Conflict"


class UnexpectedError(DomainError):
    """Wraps an unclassified failure together with its original cause."""

    kind = "UnexpectedError"
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, cause: Any = None):
        super().__init__(message)
        self.cause = cause


def parse_error(error: BaseException, default_message: str) -> DomainError:
    """Pass domain errors through, coerce anything else into UnexpectedError."""
    if isinstance(error, DomainError):
        return error
    return UnexpectedError(default_message, cause=error)
