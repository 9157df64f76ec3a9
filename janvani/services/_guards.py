"""Precondition checks shared by the complaint and discussion stores."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from janvani.errors import NotAuthenticatedError, ValidationError
from janvani.models.user import User

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def require_actor(acting_user: User | None, action: str) -> User:
    if acting_user is None:
        raise NotAuthenticatedError(f"you must be logged in to {action}")
    return acting_user


def require_text(value: str, field: str) -> str:
    """Return *value* stripped, or raise if nothing is left."""
    stripped = value.strip() if value else ""
    if not stripped:
        raise ValidationError(f"{field} must not be empty")
    return stripped


def not_before(moment: datetime, floor: datetime) -> datetime:
    """Clamp *moment* so timestamps never run behind *floor*."""
    return moment if moment >= floor else floor
