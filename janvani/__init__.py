"""Janvani -- domain-state core of a civic-engagement portal.

Constituents file complaints and join discussions; MLA, district and
central representatives triage and respond.  This package owns the
entity model, the consistency rules and the derived read models.
"""

from janvani.errors import (
    InvalidTransitionError,
    NotAuthenticatedError,
    NotFoundError,
    PortalError,
    UnauthorizedError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidTransitionError",
    "NotAuthenticatedError",
    "NotFoundError",
    "PortalError",
    "UnauthorizedError",
    "ValidationError",
    "__version__",
]
