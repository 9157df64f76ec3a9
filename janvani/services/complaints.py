"""Complaint store.

Owns the complaints collection and each complaint's comment thread, and
enforces who may move a complaint through the workflow.  Complaints are
never deleted; comments are only ever appended.

Status update check order (first failure wins):

1. no acting user             -> NotAuthenticatedError
2. acting user is a voter     -> UnauthorizedError
3. unknown status value       -> ValidationError
4. unknown complaint id       -> NotFoundError
5. district, not escalated    -> UnauthorizedError
6. same status                -> no-op, nothing written
7. target not reachable       -> InvalidTransitionError (strict mode only)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final
from uuid import uuid4

import structlog

from janvani.data.seed import load_seed_complaints
from janvani.errors import InvalidTransitionError, NotFoundError, UnauthorizedError, ValidationError
from janvani.models.complaint import Complaint, ComplaintComment, ComplaintDraft
from janvani.models.enums import ComplaintStatus, Role
from janvani.models.user import User
from janvani.services import policy
from janvani.services._guards import Clock, not_before, require_actor, require_text, utc_now
from janvani.services.collection import SnapshotCollection
from janvani.services.storage import SnapshotStorage

logger = structlog.get_logger(__name__)

COMPLAINTS_KEY: Final[str] = "complaints"


class ComplaintStore(SnapshotCollection[Complaint]):
    """Persisted complaint collection with role-guarded mutations.

    Parameters
    ----------
    storage:
        Snapshot storage; the collection lives under ``complaints``.
    seed:
        When true and nothing is stored yet, load the bundled example
        complaints and persist them immediately.
    strict_transitions:
        Enforce the workflow graph from :mod:`janvani.services.policy`.
        When false any authorised actor may set any status.
    clock:
        Source of "now"; injectable for tests.
    """

    __slots__ = ("_clock", "_strict")

    def __init__(
        self,
        storage: SnapshotStorage,
        *,
        seed: bool = True,
        strict_transitions: bool = True,
        clock: Clock = utc_now,
    ) -> None:
        self._clock = clock
        self._strict = strict_transitions
        super().__init__(storage, COMPLAINTS_KEY, Complaint, _seed_loader(clock) if seed else None)

    def get(self, complaint_id: str) -> Complaint:
        complaint = self.find_by_id(complaint_id)
        if complaint is None:
            raise NotFoundError("complaint", complaint_id)
        return complaint

    @property
    def strict_transitions(self) -> bool:
        return self._strict

    # -- mutations -------------------------------------------------------------

    def create(self, draft: ComplaintDraft, acting_user: User | None) -> Complaint:
        """File a new complaint.  Only voters may file."""
        user = require_actor(acting_user, "file a complaint")
        if user.role != Role.VOTER:
            raise UnauthorizedError("only voters can file complaints")

        now = self._clock()
        complaint = Complaint(
            id=f"c{uuid4().hex[:9]}",
            title=require_text(draft.title, "title"),
            description=require_text(draft.description, "description"),
            category=require_text(draft.category, "category"),
            location=require_text(draft.location, "location"),
            status=ComplaintStatus.PENDING,
            created_at=now,
            updated_at=now,
            author_id=user.id,
            author_name=user.name,
        )
        self._prepend(complaint)

        logger.info(
            "complaint.created",
            complaint_id=complaint.id,
            author_id=user.id,
            category=complaint.category,
        )
        return complaint

    def update_status(
        self,
        complaint_id: str,
        new_status: ComplaintStatus,
        acting_user: User | None,
    ) -> Complaint:
        """Move a complaint to *new_status* and return the stored result."""
        user = require_actor(acting_user, "update a complaint")
        log = logger.bind(complaint_id=complaint_id, user_id=user.id, role=str(user.role))

        if user.role == Role.VOTER:
            log.info("complaint.status.denied", reason="voter")
            raise UnauthorizedError("voters cannot change complaint status")

        try:
            new_status = ComplaintStatus(new_status)
        except ValueError:
            raise ValidationError(f"unknown complaint status '{new_status}'") from None

        index = self._index_of(complaint_id)
        if index is None:
            raise NotFoundError("complaint", complaint_id)
        complaint = self._items[index]

        if not policy.can_change_status(user, complaint):
            log.info("complaint.status.denied", reason="not_escalated", current=str(complaint.status))
            raise UnauthorizedError("district officers can only act on escalated complaints")

        if new_status == complaint.status:
            return complaint

        if not policy.is_transition_allowed(complaint.status, new_status, strict=self._strict):
            raise InvalidTransitionError(complaint.status, new_status)

        updated = complaint.model_copy(
            update={
                "status": new_status,
                "updated_at": not_before(self._clock(), complaint.updated_at),
            }
        )
        self._replace_at(index, updated)

        log.info(
            "complaint.status.updated",
            previous=str(complaint.status),
            status=str(new_status),
        )
        return updated

    def add_comment(self, complaint_id: str, text: str, acting_user: User | None) -> ComplaintComment:
        """Append a comment, snapshotting the author's name and role."""
        user = require_actor(acting_user, "comment")
        index = self._index_of(complaint_id)
        if index is None:
            raise NotFoundError("complaint", complaint_id)
        body = require_text(text, "comment")

        complaint = self._items[index]
        now = not_before(self._clock(), complaint.created_at)
        comment = ComplaintComment(
            id=f"cmt{uuid4().hex[:9]}",
            text=body,
            created_at=now,
            author_id=user.id,
            author_name=user.name,
            author_role=user.role,
        )
        updated = complaint.model_copy(
            update={
                "comments": (*complaint.comments, comment),
                "updated_at": not_before(now, complaint.updated_at),
            }
        )
        self._replace_at(index, updated)

        logger.info(
            "complaint.comment.added",
            complaint_id=complaint_id,
            comment_id=comment.id,
            author_role=str(user.role),
        )
        return comment


def _seed_loader(clock: Clock) -> Callable[[], list[Complaint]]:
    def load() -> list[Complaint]:
        return load_seed_complaints(now=clock())

    return load
