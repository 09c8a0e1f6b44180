"""
Domain layer exceptions.

These exceptions represent domain-level errors that occur when
business rules are violated or domain invariants are broken.
They are raised before any storage is touched.
"""


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain exceptions should inherit from this class
    so they can be caught and handled uniformly.
    """

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    """
    Raised when a card draft or patch fails validation.

    Example: empty word, meaning longer than the allowed maximum.
    ``errors`` holds every problem found, ``message`` joins them.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: object = None,
        errors: list[str] | None = None,
    ) -> None:
        details: dict[str, object] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value
        self.errors = errors or [message]


class InvariantViolationError(DomainError):
    """
    Raised when an entity invariant is violated.

    Example: a flashcard whose updated_at precedes its created_at.
    """

    def __init__(self, aggregate: str, invariant: str) -> None:
        message = f"Invariant violation in {aggregate}: {invariant}"
        super().__init__(message, {"aggregate": aggregate, "invariant": invariant})
        self.aggregate = aggregate
        self.invariant = invariant
