"""Tests for data models: enums, complaints, discussions and read models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pydantic
import pytest

from janvani.models import (
    Complaint,
    ComplaintStatus,
    DashboardStats,
    Discussion,
    DiscussionComment,
    Role,
    User,
)

NOW = datetime(2025, 2, 1, 10, 0, tzinfo=UTC)


def _discussion(**overrides) -> Discussion:
    fields = {
        "id": "d1",
        "title": "Library hours",
        "content": "Keep the library open till 9pm",
        "category": "Education",
        "created_at": NOW,
        "updated_at": NOW,
        "author_id": "v1",
        "author_name": "V1",
    }
    fields.update(overrides)
    return Discussion(**fields)


# -----------------------------------------------------------------------
# Enum tests
# -----------------------------------------------------------------------


class TestEnums:
    def test_role_values(self) -> None:
        assert {r.value for r in Role} == {"voter", "mla", "district", "central"}

    def test_status_values(self) -> None:
        expected = {"pending", "reviewing", "escalated", "resolved", "rejected"}
        assert {s.value for s in ComplaintStatus} == expected

    def test_str_enum_formats_as_value(self) -> None:
        assert f"{ComplaintStatus.ESCALATED}" == "escalated"


# -----------------------------------------------------------------------
# User
# -----------------------------------------------------------------------


class TestUser:
    def test_defaults_to_voter(self) -> None:
        user = User(id="u1", name="A", email="a@example.org", voter_reference="V1")
        assert user.role == Role.VOTER
        assert not user.is_representative

    def test_frozen(self) -> None:
        user = User(id="u1", name="A", email="a@example.org", voter_reference="V1", role=Role.MLA)
        assert user.is_representative
        with pytest.raises(pydantic.ValidationError):
            user.role = Role.VOTER  # type: ignore[misc]


# -----------------------------------------------------------------------
# Complaint
# -----------------------------------------------------------------------


class TestComplaint:
    def test_defaults(self) -> None:
        complaint = Complaint(
            id="c1",
            title="t",
            description="d",
            category="Roads",
            location="here",
            created_at=NOW,
            updated_at=NOW,
            author_id="v1",
            author_name="V1",
        )
        assert complaint.status == ComplaintStatus.PENDING
        assert complaint.comments == ()
        assert complaint.comment_count == 0

    def test_updated_before_created_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Complaint(
                id="c1",
                title="t",
                description="d",
                category="Roads",
                location="here",
                created_at=NOW,
                updated_at=NOW - timedelta(seconds=1),
                author_id="v1",
                author_name="V1",
            )


# -----------------------------------------------------------------------
# Discussion like ledger
# -----------------------------------------------------------------------


class TestLikeLedger:
    def test_like_count_is_computed(self) -> None:
        discussion = _discussion(liked_by=("a", "b"))
        assert discussion.like_count == 2

    def test_duplicates_are_dropped(self) -> None:
        discussion = _discussion(liked_by=("a", "b", "a", "c", "b"))
        assert discussion.liked_by == ("a", "b", "c")
        assert discussion.like_count == 3

    def test_stored_like_count_is_ignored(self) -> None:
        payload = _discussion(liked_by=("a",)).model_dump(mode="json")
        payload["like_count"] = 500
        assert Discussion.model_validate(payload).like_count == 1

    def test_like_count_is_dumped(self) -> None:
        assert _discussion(liked_by=("a",)).model_dump()["like_count"] == 1

    def test_toggled_like(self) -> None:
        discussion = _discussion(liked_by=("a", "b"))
        assert discussion.toggled_like("c") == ("a", "b", "c")
        assert discussion.toggled_like("a") == ("b",)
        assert discussion.liked_by == ("a", "b"), "toggling returns a new ledger"

    def test_comment_ledger(self) -> None:
        comment = DiscussionComment(
            id="k",
            text="+1",
            created_at=NOW,
            author_id="u2",
            author_name="U2",
            author_role=Role.VOTER,
            liked_by=("x", "x"),
        )
        assert comment.like_count == 1
        assert comment.is_liked_by("x")
        assert not comment.is_liked_by("y")

    def test_find_comment(self) -> None:
        comment = DiscussionComment(
            id="k", text="+1", created_at=NOW, author_id="u2", author_name="U2", author_role=Role.MLA
        )
        discussion = _discussion(comments=(comment,))
        assert discussion.find_comment("k") == comment
        assert discussion.find_comment("missing") is None
        assert discussion.comment_count == 1

    def test_timestamp_order_enforced(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            _discussion(updated_at=NOW - timedelta(minutes=1))


class TestDashboardStats:
    def test_in_progress(self) -> None:
        stats = DashboardStats(total=4, reviewing=1, escalated=2, pending=1)
        assert stats.in_progress == 3
        assert stats.model_dump()["in_progress"] == 3
