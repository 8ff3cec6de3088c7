"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from decimal import Decimal


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input has the wrong shape or breaks a business rule."""


class NotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidStateError(DomainException):
    """The transition is not legal from the transfer's current status."""


class ConcurrencyConflictError(DomainException):
    """Another unit of work committed a conflicting change first.

    Safe to retry once: re-read the state and re-attempt the operation.
    """


class InsufficientStockError(DomainException):
    """A decrement would drive quantity-on-hand below zero."""

    def __init__(
        self,
        store_id: int,
        item_id: int,
        required: Decimal,
        available: Decimal,
        item_name: str | None = None,
    ) -> None:
        self.store_id = store_id
        self.item_id = item_id
        self.required = required
        self.available = available
        self.item_name = item_name
        label = item_name or f"item #{item_id}"
        super().__init__(
            f"Insufficient stock of {label} at store #{store_id} "
            f"(need {required}, have {available})"
        )
