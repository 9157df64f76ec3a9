"""Read models derived from complaint and discussion snapshots.

Every function here is pure: no stored state, no I/O, the same inputs
always produce the same output.  Sorting is stable and ties are broken by
entity id so the output order is deterministic even when timestamps
collide.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol, TypeVar

from janvani.models.complaint import Complaint, ComplaintComment
from janvani.models.discussion import Discussion, DiscussionComment
from janvani.models.enums import ComplaintStatus, DiscussionSort, NotificationKind, Role
from janvani.models.notification import Notification
from janvani.models.stats import CategoryCount, DashboardStats, DiscussionStats, ProfileStats
from janvani.models.user import User

DEFAULT_RECENT_LIMIT = 5
DEFAULT_TOP_CATEGORIES = 3


class _Timestamped(Protocol):
    id: str
    created_at: datetime


class _Categorised(Protocol):
    category: str


T = TypeVar("T", bound=_Timestamped)
C = TypeVar("C", bound=_Categorised)


def _newest_first(items: Iterable[T]) -> list[T]:
    # Two stable passes: id ascending, then created_at descending.
    ordered = sorted(items, key=lambda item: item.id)
    return sorted(ordered, key=lambda item: item.created_at, reverse=True)


# ---------------------------------------------------------------------------
# Complaint dashboards
# ---------------------------------------------------------------------------


def dashboard_stats(complaints: Sequence[Complaint]) -> DashboardStats:
    """Count complaints per status."""
    counts = Counter(c.status for c in complaints)
    return DashboardStats(
        total=len(complaints),
        pending=counts[ComplaintStatus.PENDING],
        reviewing=counts[ComplaintStatus.REVIEWING],
        escalated=counts[ComplaintStatus.ESCALATED],
        resolved=counts[ComplaintStatus.RESOLVED],
        rejected=counts[ComplaintStatus.REJECTED],
    )


def recent_complaints_for_role(
    complaints: Sequence[Complaint],
    role: Role,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[Complaint]:
    """Newest complaints visible on *role*'s dashboard.

    MLA and central users see everything; district users only see
    escalated complaints; voters have no dashboard and get nothing.
    """
    role = Role(role)
    if role in (Role.MLA, Role.CENTRAL):
        visible: Iterable[Complaint] = complaints
    elif role == Role.DISTRICT:
        visible = (c for c in complaints if c.status == ComplaintStatus.ESCALATED)
    else:
        return []
    return _newest_first(visible)[: max(limit, 0)]


def status_counts_by_category(complaints: Sequence[Complaint]) -> dict[str, DashboardStats]:
    """Per-category breakdown of :func:`dashboard_stats`, categories in first-seen order."""
    grouped: dict[str, list[Complaint]] = {}
    for complaint in complaints:
        grouped.setdefault(complaint.category, []).append(complaint)
    return {category: dashboard_stats(items) for category, items in grouped.items()}


# ---------------------------------------------------------------------------
# Discussion dashboards
# ---------------------------------------------------------------------------


def discussion_stats(
    discussions: Sequence[Discussion],
    top_n: int = DEFAULT_TOP_CATEGORIES,
) -> DiscussionStats:
    """Totals, busiest categories and comments-per-discussion."""
    total = len(discussions)
    total_comments = sum(d.comment_count for d in discussions)

    counts = Counter(d.category for d in discussions)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    top = [CategoryCount(category=category, count=count) for category, count in ranked[: max(top_n, 0)]]

    return DiscussionStats(
        total_discussions=total,
        total_comments=total_comments,
        top_categories=top,
        engagement_rate=(total_comments / total) if total else 0.0,
    )


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


def notifications_for(
    user: User,
    complaints: Sequence[Complaint],
    discussions: Sequence[Discussion],
    read_ids: Iterable[str] = (),
) -> list[Notification]:
    """Build *user*'s notification feed, newest event first.

    Each notification id is derived from its source event, so recomputing
    the feed yields the same ids and ``read_ids`` can be reattached.
    """
    read = frozenset(read_ids)
    feed: list[Notification] = []

    for complaint in complaints:
        if complaint.author_id != user.id:
            continue
        link = f"/complaints/{complaint.id}"
        if complaint.status != ComplaintStatus.PENDING:
            feed.append(
                Notification(
                    id=f"notif-{complaint.id}-status",
                    kind=NotificationKind.COMPLAINT_STATUS,
                    title="Complaint Status Updated",
                    description=f'Your complaint "{complaint.title}" has been updated to {complaint.status}',
                    created_at=complaint.updated_at,
                    target_link=link,
                )
            )
        for index, comment in enumerate(complaint.comments):
            if comment.author_id == user.id:
                continue
            feed.append(
                Notification(
                    id=f"notif-{complaint.id}-comment-{index}",
                    kind=NotificationKind.COMPLAINT_COMMENT,
                    title="New Comment on Your Complaint",
                    description=f'{comment.author_name} commented on your complaint "{complaint.title}"',
                    created_at=comment.created_at,
                    target_link=link,
                )
            )

    for discussion in discussions:
        if discussion.author_id != user.id:
            continue
        link = f"/discussions/{discussion.id}"
        for index, comment in enumerate(discussion.comments):
            if comment.author_id == user.id:
                continue
            feed.append(
                Notification(
                    id=f"notif-{discussion.id}-comment-{index}",
                    kind=NotificationKind.DISCUSSION_COMMENT,
                    title="New Comment on Your Discussion",
                    description=f'{comment.author_name} commented on your discussion "{discussion.title}"',
                    created_at=comment.created_at,
                    target_link=link,
                )
            )
        if discussion.like_count > 0:
            feed.append(
                Notification(
                    id=f"notif-{discussion.id}-likes",
                    kind=NotificationKind.DISCUSSION_LIKE,
                    title="Your Discussion is Getting Attention",
                    description=f'Your discussion "{discussion.title}" has received {discussion.like_count} likes',
                    created_at=discussion.updated_at,
                    target_link=link,
                )
            )

    for i, notification in enumerate(feed):
        if notification.id in read:
            feed[i] = notification.model_copy(update={"read": True})

    return _newest_first(feed)


# ---------------------------------------------------------------------------
# List projections
# ---------------------------------------------------------------------------


def _matches(term: str, *fields: str) -> bool:
    return any(term in field.lower() for field in fields)


def filter_complaints(
    complaints: Sequence[Complaint],
    viewer: User | None = None,
    *,
    search: str = "",
    status: ComplaintStatus | None = None,
    category: str | None = None,
) -> list[Complaint]:
    """Complaint list as shown on the index page, newest first.

    Voters only ever see their own complaints.  ``search`` is a
    case-insensitive substring match over title, description and
    location.
    """
    term = search.strip().lower()
    result: list[Complaint] = []
    for complaint in complaints:
        if term and not _matches(term, complaint.title, complaint.description, complaint.location):
            continue
        if status is not None and complaint.status != status:
            continue
        if category is not None and complaint.category != category:
            continue
        if viewer is not None and viewer.role == Role.VOTER and complaint.author_id != viewer.id:
            continue
        result.append(complaint)
    return _newest_first(result)


def filter_discussions(
    discussions: Sequence[Discussion],
    *,
    search: str = "",
    category: str | None = None,
    sort: DiscussionSort = DiscussionSort.RECENT,
) -> list[Discussion]:
    """Discussion list as shown on the index page.

    ``recent`` orders by creation time, ``popular`` by like count (newer
    first among equals).
    """
    term = search.strip().lower()
    result = [
        d
        for d in discussions
        if (not term or _matches(term, d.title, d.content))
        and (category is None or d.category == category)
    ]
    ordered = _newest_first(result)
    if DiscussionSort(sort) == DiscussionSort.POPULAR:
        ordered = sorted(ordered, key=lambda d: d.like_count, reverse=True)
    return ordered


def categories(items: Iterable[C]) -> list[str]:
    """Distinct categories in first-seen order, for filter dropdowns."""
    return list(dict.fromkeys(item.category for item in items))


def comments_newest_first(
    comments: Sequence[ComplaintComment] | Sequence[DiscussionComment],
) -> list:
    """Display order for a comment thread.  The stored order is untouched."""
    return _newest_first(comments)


def profile_stats(
    user: User,
    complaints: Sequence[Complaint],
    discussions: Sequence[Discussion],
) -> ProfileStats:
    """Activity counters for *user*'s profile page.

    ``comments_posted`` counts discussion comments only, matching what
    the profile page labels as community participation.
    """
    return ProfileStats(
        complaints_filed=sum(1 for c in complaints if c.author_id == user.id),
        discussions_started=sum(1 for d in discussions if d.author_id == user.id),
        comments_posted=sum(
            1 for d in discussions for comment in d.comments if comment.author_id == user.id
        ),
    )
