"""Session identity holder.

Login here is a documented stub: the password is never checked and the
role is derived from the email text, so any non-blank email "succeeds".
It exists so the rest of the core has a real ``User`` to pass around as
``acting_user``; it is not a security mechanism.

The active user is persisted under the ``user`` key and restored on the
next start.  A corrupt stored record is cleared rather than raised.
"""

from __future__ import annotations

from typing import Final
from uuid import uuid4

import pydantic
import structlog

from janvani.errors import NotAuthenticatedError, ValidationError
from janvani.models.enums import Role
from janvani.models.user import User
from janvani.services.storage import SnapshotStorage

logger = structlog.get_logger(__name__)

USER_KEY: Final[str] = "user"

# Checked in order; the first substring found in the email wins.
_ROLE_MARKERS: Final[tuple[tuple[str, Role], ...]] = (
    ("mla", Role.MLA),
    ("district", Role.DISTRICT),
    ("central", Role.CENTRAL),
)


def role_for_email(email: str) -> Role:
    """Derive the demo role from substrings of *email*."""
    # Deliberately case-insensitive: "MLA.Office@gov.in" still maps to MLA.
    lowered = email.lower()
    for marker, role in _ROLE_MARKERS:
        if marker in lowered:
            return role
    return Role.VOTER


def _new_user_id() -> str:
    return uuid4().hex[:9]


def _new_voter_reference() -> str:
    return f"V{uuid4().int % 10**8:08d}"


class IdentityHolder:
    """Holds, persists and restores the current session's user."""

    __slots__ = ("_storage", "_user")

    def __init__(self, storage: SnapshotStorage) -> None:
        self._storage = storage
        self._user: User | None = self._restore()

    def _restore(self) -> User | None:
        raw = self._storage.load(USER_KEY)
        if raw is None:
            if self._storage.exists(USER_KEY):
                # Present but undecodable.
                self._storage.delete(USER_KEY)
            return None
        try:
            user = User.model_validate(raw)
        except pydantic.ValidationError:
            logger.warning("identity.restore_failed", exc_info=True)
            self._storage.delete(USER_KEY)
            return None
        logger.info("identity.restored", user_id=user.id, role=str(user.role))
        return user

    def _activate(self, user: User) -> User:
        self._storage.save(USER_KEY, user.model_dump(mode="json"))
        self._user = user
        return user

    # -- main API ------------------------------------------------------------

    def login(self, email: str, password: str) -> User:
        """Fabricate a session user from *email*.  *password* is ignored."""
        email = email.strip()
        if not email:
            raise ValidationError("email is required")

        user = User(
            id=_new_user_id(),
            name=email.split("@")[0],
            email=email,
            voter_reference=_new_voter_reference(),
            role=role_for_email(email),
        )
        self._activate(user)
        logger.info("identity.login", user_id=user.id, role=str(user.role))
        return user

    def register(self, name: str, email: str, voter_reference: str, password: str) -> User:
        """Create a voter-role user and make it the active identity."""
        user = User(
            id=_new_user_id(),
            name=name,
            email=email,
            voter_reference=voter_reference,
            role=Role.VOTER,
        )
        self._activate(user)
        logger.info("identity.registered", user_id=user.id)
        return user

    def logout(self) -> None:
        previous = self._user
        self._storage.delete(USER_KEY)
        self._user = None
        if previous is not None:
            logger.info("identity.logout", user_id=previous.id)

    def current_user(self) -> User | None:
        return self._user

    def require_user(self) -> User:
        """Return the active user or raise :class:`NotAuthenticatedError`."""
        if self._user is None:
            raise NotAuthenticatedError("no active session")
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None
