"""Discussion store and like ledger.

Any authenticated user may start a discussion, comment, and like either a
discussion or one of its comments.  A like toggle flips the acting user's
membership in ``liked_by``; ``like_count`` is computed from that ledger,
so the two always agree.  Likes are ambient activity: they never bump a
discussion's ``updated_at``.  Only new comments do.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final
from uuid import uuid4

import structlog

from janvani.data.seed import load_seed_discussions
from janvani.errors import NotFoundError
from janvani.models.discussion import Discussion, DiscussionComment, DiscussionDraft
from janvani.models.user import User
from janvani.services._guards import Clock, not_before, require_actor, require_text, utc_now
from janvani.services.collection import SnapshotCollection
from janvani.services.storage import SnapshotStorage

logger = structlog.get_logger(__name__)

DISCUSSIONS_KEY: Final[str] = "discussions"


class DiscussionStore(SnapshotCollection[Discussion]):
    """Persisted discussion collection.

    Parameters
    ----------
    storage:
        Snapshot storage; the collection lives under ``discussions``.
    seed:
        When true and nothing is stored yet, load the bundled example
        discussions and persist them immediately.
    clock:
        Source of "now"; injectable for tests.
    """

    __slots__ = ("_clock",)

    def __init__(
        self,
        storage: SnapshotStorage,
        *,
        seed: bool = True,
        clock: Clock = utc_now,
    ) -> None:
        self._clock = clock
        super().__init__(storage, DISCUSSIONS_KEY, Discussion, _seed_loader(clock) if seed else None)

    def get(self, discussion_id: str) -> Discussion:
        discussion = self.find_by_id(discussion_id)
        if discussion is None:
            raise NotFoundError("discussion", discussion_id)
        return discussion

    def _locate(self, discussion_id: str) -> tuple[int, Discussion]:
        index = self._index_of(discussion_id)
        if index is None:
            raise NotFoundError("discussion", discussion_id)
        return index, self._items[index]

    # -- mutations -------------------------------------------------------------

    def create(self, draft: DiscussionDraft, acting_user: User | None) -> Discussion:
        user = require_actor(acting_user, "start a discussion")

        now = self._clock()
        discussion = Discussion(
            id=f"d{uuid4().hex[:9]}",
            title=require_text(draft.title, "title"),
            content=require_text(draft.content, "content"),
            category=require_text(draft.category, "category"),
            created_at=now,
            updated_at=now,
            author_id=user.id,
            author_name=user.name,
        )
        self._prepend(discussion)

        logger.info("discussion.created", discussion_id=discussion.id, author_id=user.id)
        return discussion

    def add_comment(self, discussion_id: str, text: str, acting_user: User | None) -> DiscussionComment:
        """Append a comment with an empty like ledger."""
        user = require_actor(acting_user, "comment")
        index, discussion = self._locate(discussion_id)
        body = require_text(text, "comment")

        now = not_before(self._clock(), discussion.created_at)
        comment = DiscussionComment(
            id=f"dcmt{uuid4().hex[:9]}",
            text=body,
            created_at=now,
            author_id=user.id,
            author_name=user.name,
            author_role=user.role,
        )
        updated = discussion.model_copy(
            update={
                "comments": (*discussion.comments, comment),
                "updated_at": not_before(now, discussion.updated_at),
            }
        )
        self._replace_at(index, updated)

        logger.info(
            "discussion.comment.added",
            discussion_id=discussion_id,
            comment_id=comment.id,
            author_role=str(user.role),
        )
        return comment

    def toggle_like(self, discussion_id: str, acting_user: User | None) -> Discussion:
        """Like the discussion, or remove the like if already given."""
        user = require_actor(acting_user, "like a discussion")
        index, discussion = self._locate(discussion_id)

        updated = discussion.model_copy(update={"liked_by": discussion.toggled_like(user.id)})
        self._replace_at(index, updated)

        logger.info(
            "discussion.like.toggled",
            discussion_id=discussion_id,
            user_id=user.id,
            liked=updated.is_liked_by(user.id),
            like_count=updated.like_count,
        )
        return updated

    def toggle_like_comment(
        self,
        discussion_id: str,
        comment_id: str,
        acting_user: User | None,
    ) -> DiscussionComment:
        """Like a comment, or remove the like if already given."""
        user = require_actor(acting_user, "like a comment")
        index, discussion = self._locate(discussion_id)

        comments = list(discussion.comments)
        for pos, comment in enumerate(comments):
            if comment.id == comment_id:
                break
        else:
            raise NotFoundError("comment", comment_id)

        toggled = comment.model_copy(update={"liked_by": comment.toggled_like(user.id)})
        comments[pos] = toggled
        self._replace_at(index, discussion.model_copy(update={"comments": tuple(comments)}))

        logger.info(
            "discussion.comment_like.toggled",
            discussion_id=discussion_id,
            comment_id=comment_id,
            user_id=user.id,
            liked=toggled.is_liked_by(user.id),
            like_count=toggled.like_count,
        )
        return toggled


def _seed_loader(clock: Clock) -> Callable[[], list[Discussion]]:
    def load() -> list[Discussion]:
        return load_seed_discussions(now=clock())

    return load
