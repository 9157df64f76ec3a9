from janvani.models.complaint import Complaint, ComplaintComment, ComplaintDraft
from janvani.models.discussion import Discussion, DiscussionComment, DiscussionDraft
from janvani.models.enums import ComplaintStatus, DiscussionSort, NotificationKind, Role
from janvani.models.notification import Notification
from janvani.models.stats import CategoryCount, DashboardStats, DiscussionStats, ProfileStats
from janvani.models.user import User

__all__ = [
    "CategoryCount",
    "Complaint",
    "ComplaintComment",
    "ComplaintDraft",
    "ComplaintStatus",
    "DashboardStats",
    "Discussion",
    "DiscussionComment",
    "DiscussionDraft",
    "DiscussionSort",
    "DiscussionStats",
    "Notification",
    "NotificationKind",
    "ProfileStats",
    "Role",
    "User",
]
