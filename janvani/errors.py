"""Domain errors raised by the Janvani stores.

All errors are recoverable and local: the store that raises leaves its
snapshot untouched, and the caller decides what to show the user.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base exception for all domain errors.

    All portal-specific exceptions inherit from this class so callers can
    handle every store failure with a single ``except`` clause.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)


class NotAuthenticatedError(PortalError):
    """Raised when an operation needs an active identity and there is none."""


class UnauthorizedError(PortalError):
    """Raised when the acting user's role or state forbids the operation."""


class NotFoundError(PortalError):
    """Raised when a referenced complaint, discussion or comment does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class ValidationError(PortalError):
    """Raised when required text is empty or blank."""


class InvalidTransitionError(ValidationError):
    """Raised when a complaint status change is outside the workflow graph."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"cannot move complaint from '{current}' to '{target}'")
