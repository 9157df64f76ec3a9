from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    __slots__ = ()

    VOTER = "voter"
    MLA = "mla"            # constituency representative
    DISTRICT = "district"  # district-level authority
    CENTRAL = "central"    # central authority


class ComplaintStatus(StrEnum):
    __slots__ = ()

    PENDING = "pending"
    REVIEWING = "reviewing"
    ESCALATED = "escalated"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class NotificationKind(StrEnum):
    __slots__ = ()

    COMPLAINT_STATUS = "complaint_status"
    COMPLAINT_COMMENT = "complaint_comment"
    DISCUSSION_COMMENT = "discussion_comment"
    DISCUSSION_LIKE = "discussion_like"


class DiscussionSort(StrEnum):
    __slots__ = ()

    RECENT = "recent"
    POPULAR = "popular"
