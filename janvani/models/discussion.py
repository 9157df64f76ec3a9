"""Discussion models and the like ledger.

``like_count`` is never stored independently: it is computed from
``liked_by`` so the two cannot drift apart.  It is still emitted when a
model is dumped (for readers of the persisted JSON) but ignored on load.
"""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, computed_field, field_validator, model_validator

from janvani.models.enums import Role


def _dedupe(user_ids: tuple[str, ...]) -> tuple[str, ...]:
    """Drop repeated ids, keeping the first occurrence."""
    return tuple(dict.fromkeys(user_ids))


class _Likeable(BaseModel):
    """Shared like-ledger behaviour for discussions and their comments."""

    model_config = {"frozen": True}

    liked_by: tuple[str, ...] = ()

    @field_validator("liked_by")
    @classmethod
    def _unique_likers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(value)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def like_count(self) -> int:
        return len(self.liked_by)

    def is_liked_by(self, user_id: str) -> bool:
        return user_id in self.liked_by

    def toggled_like(self, user_id: str) -> tuple[str, ...]:
        """Return the ``liked_by`` ledger with *user_id*'s membership flipped."""
        if user_id in self.liked_by:
            return tuple(uid for uid in self.liked_by if uid != user_id)
        return (*self.liked_by, user_id)


class DiscussionComment(_Likeable):
    """A comment on a discussion.  Text and attribution are immutable."""

    id: str
    text: str
    created_at: AwareDatetime
    author_id: str
    author_name: str
    author_role: Role


class DiscussionDraft(BaseModel):
    """Data for a new discussion thread."""

    title: str
    content: str
    category: str


class Discussion(_Likeable):
    """A public discussion thread."""

    id: str
    title: str
    content: str
    category: str
    created_at: AwareDatetime
    updated_at: AwareDatetime
    author_id: str
    author_name: str
    comments: tuple[DiscussionComment, ...] = ()

    @model_validator(mode="after")
    def _check_timestamps(self) -> Discussion:
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    @property
    def comment_count(self) -> int:
        return len(self.comments)

    def find_comment(self, comment_id: str) -> DiscussionComment | None:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None
