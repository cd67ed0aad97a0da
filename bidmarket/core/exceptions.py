"""Custom exceptions for the bid marketplace core.

Every caller-facing failure is a ``MarketplaceError`` carrying one of the
error kinds below. The HTTP layer maps kinds to status codes; services never
raise bare library exceptions past their boundary.
"""

from __future__ import annotations

from typing import Any

NOT_FOUND = "not_found"
FORBIDDEN = "forbidden"
INVALID_STATE = "invalid_state"
CONFLICT = "conflict"
VALIDATION = "validation_error"
TIMEOUT = "timeout"
INTERNAL = "internal"


class MarketplaceError(Exception):
    """Base exception for marketplace operations."""

    kind = INTERNAL

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error_code": self.kind, "detail": self.message}
        if self.details:
            payload["errors"] = self.details
        return payload


class NotFoundError(MarketplaceError):
    """Raised when a resource is not found."""

    kind = NOT_FOUND


class ForbiddenError(MarketplaceError):
    """Raised when an authenticated caller does not own the resource."""

    kind = FORBIDDEN


class InvalidStateError(MarketplaceError):
    """Raised when an operation is not legal in the current lifecycle state."""

    kind = INVALID_STATE


class InvalidTransitionError(InvalidStateError):
    """Raised when a disallowed state transition is attempted."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Invalid status transition from {current} to {target}")
        self.current = current
        self.target = target


class ConflictError(MarketplaceError):
    """Raised on uniqueness violations such as a duplicate bid."""

    kind = CONFLICT


class ValidationError(MarketplaceError):
    """Raised when validation fails."""

    kind = VALIDATION


class EligibilityError(ValidationError):
    """Raised when a vendor may not bid on a project."""


class DependencyTimeoutError(MarketplaceError):
    """Raised when a bounded external collaborator exceeds its budget."""

    kind = TIMEOUT


class InternalError(MarketplaceError):
    """Raised for unexpected failures; detail is suppressed outside debug."""

    kind = INTERNAL


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""


class AuthenticationError(Exception):
    """Raised when authentication fails."""
