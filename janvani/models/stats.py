"""Read-model records produced by the derivation functions."""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field


class DashboardStats(BaseModel):
    """Complaint counts per status."""

    total: int = 0
    pending: int = 0
    reviewing: int = 0
    escalated: int = 0
    resolved: int = 0
    rejected: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def in_progress(self) -> int:
        return self.reviewing + self.escalated


class CategoryCount(BaseModel):
    category: str
    count: int


class DiscussionStats(BaseModel):
    """Aggregate engagement figures for the discussion board."""

    total_discussions: int = 0
    total_comments: int = 0
    top_categories: list[CategoryCount] = Field(default_factory=list)
    engagement_rate: float = 0.0


class ProfileStats(BaseModel):
    """Per-user activity counters shown on the profile page."""

    complaints_filed: int = 0
    discussions_started: int = 0
    comments_posted: int = 0
