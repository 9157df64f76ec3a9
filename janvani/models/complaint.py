"""Complaint models.

Complaints are filed by voters and triaged by representatives.  Comments
are historical records: the author's name and role are snapshotted at the
time of writing and never re-fetched.
"""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, model_validator

from janvani.models.enums import ComplaintStatus, Role


class ComplaintComment(BaseModel):
    """A single comment on a complaint.  Immutable once created."""

    model_config = {"frozen": True}

    id: str
    text: str
    created_at: AwareDatetime
    author_id: str
    author_name: str
    author_role: Role


class ComplaintDraft(BaseModel):
    """Voter-submitted data for a new complaint."""

    title: str
    description: str
    category: str
    location: str


class Complaint(BaseModel):
    """A constituent complaint and its append-only comment thread."""

    model_config = {"frozen": True}

    id: str
    title: str
    description: str
    category: str
    location: str
    status: ComplaintStatus = ComplaintStatus.PENDING
    created_at: AwareDatetime
    updated_at: AwareDatetime
    author_id: str
    author_name: str
    comments: tuple[ComplaintComment, ...] = ()

    @model_validator(mode="after")
    def _check_timestamps(self) -> Complaint:
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    @property
    def comment_count(self) -> int:
        return len(self.comments)
