"""Session identity model.

A ``User`` is created at login or registration and stays immutable for the
rest of the session.  Exactly one user is active at a time; stores receive
it explicitly as ``acting_user`` instead of reading a global.
"""

from __future__ import annotations

from pydantic import BaseModel

from janvani.models.enums import Role


class User(BaseModel):
    """The active session identity."""

    model_config = {"frozen": True}

    id: str
    name: str
    email: str
    voter_reference: str
    role: Role = Role.VOTER

    @property
    def is_representative(self) -> bool:
        """True for MLA, district and central users."""
        return self.role != Role.VOTER
