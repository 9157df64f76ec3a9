"""Session facade wiring identity, stores and read models together.

The presentation layer talks to a :class:`PortalSession`.  Each mutating
method takes the current identity as ``acting_user``, reports the outcome
to a :class:`NoticeSink` (the toast channel), and re-raises any error
unchanged so callers can still branch on them.  A notice is emitted only
after the store has committed, and nothing a sink does can undo that
commit.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable

import structlog

from config.settings import Settings, settings
from janvani.errors import PortalError
from janvani.models.complaint import Complaint, ComplaintComment, ComplaintDraft
from janvani.models.discussion import Discussion, DiscussionComment, DiscussionDraft
from janvani.models.enums import ComplaintStatus, DiscussionSort
from janvani.models.notification import Notification
from janvani.models.stats import DashboardStats, DiscussionStats, ProfileStats
from janvani.models.user import User
from janvani.services import derivations, policy
from janvani.services._guards import Clock, utc_now
from janvani.services.complaints import ComplaintStore
from janvani.services.discussions import DiscussionStore
from janvani.services.identity import IdentityHolder
from janvani.services.notifications import NotificationInbox
from janvani.services.storage import SnapshotStorage

logger = structlog.get_logger(__name__)

ResultT = TypeVar("ResultT")

UNEXPECTED_ERROR_MESSAGE = "Something went wrong, please try again"


# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------


@runtime_checkable
class NoticeSink(Protocol):
    """Transient user-facing messages (toasts)."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class LoggingNoticeSink:
    """Default sink: writes notices to the structured log."""

    __slots__ = ()

    def success(self, message: str) -> None:
        logger.info("notice.success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notice.error", message=message)

    def info(self, message: str) -> None:
        logger.info("notice.info", message=message)


class RecordingNoticeSink:
    """Keeps every notice in memory as ``(level, message)`` pairs."""

    __slots__ = ("notices",)

    def __init__(self) -> None:
        self.notices: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.notices.append(("success", message))

    def error(self, message: str) -> None:
        self.notices.append(("error", message))

    def info(self, message: str) -> None:
        self.notices.append(("info", message))


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class PortalSession:
    """One user's view of the portal over a local snapshot.

    Parameters
    ----------
    storage:
        Snapshot storage shared by identity and both stores.
    config:
        Settings controlling seeding, workflow strictness and dashboard
        sizes.  Defaults to the module-level ``settings``.
    notices:
        Where success and failure messages go.  Defaults to the log.
    clock:
        Source of "now" for both stores.
    """

    __slots__ = (
        "_config",
        "_notices",
        "complaints",
        "discussions",
        "identity",
        "inbox",
    )

    def __init__(
        self,
        storage: SnapshotStorage,
        *,
        config: Settings | None = None,
        notices: NoticeSink | None = None,
        clock: Clock = utc_now,
    ) -> None:
        config = config if config is not None else settings
        self._config = config
        self._notices: NoticeSink = notices if notices is not None else LoggingNoticeSink()
        self.identity = IdentityHolder(storage)
        self.complaints = ComplaintStore(
            storage,
            seed=config.seed_on_first_load,
            strict_transitions=config.strict_status_transitions,
            clock=clock,
        )
        self.discussions = DiscussionStore(storage, seed=config.seed_on_first_load, clock=clock)
        self.inbox = NotificationInbox()

    # -- internals -------------------------------------------------------------

    def _run(
        self,
        action: str,
        operation: Callable[[], ResultT],
        success: Callable[[ResultT], str] | str,
    ) -> ResultT:
        try:
            result = operation()
        except PortalError as exc:
            logger.info("session.action_failed", action=action, error=type(exc).__name__)
            self._notices.error(str(exc))
            raise
        except Exception:
            # Storage write or other non-domain failure.
            logger.error("session.action_error", action=action, exc_info=True)
            self._notices.error(UNEXPECTED_ERROR_MESSAGE)
            raise
        message = success(result) if callable(success) else success
        self._notices.success(message)
        return result

    @property
    def user(self) -> User | None:
        return self.identity.current_user()

    @property
    def is_authenticated(self) -> bool:
        return self.identity.is_authenticated

    # -- identity --------------------------------------------------------------

    def login(self, email: str, password: str) -> User:
        user = self._run("login", lambda: self.identity.login(email, password), "Logged in successfully")
        self.inbox.clear()
        return user

    def register(self, name: str, email: str, voter_reference: str, password: str) -> User:
        user = self._run(
            "register",
            lambda: self.identity.register(name, email, voter_reference, password),
            "Registration successful",
        )
        self.inbox.clear()
        return user

    def logout(self) -> None:
        self.identity.logout()
        self.inbox.clear()
        self._notices.info("Logged out successfully")

    # -- complaints ------------------------------------------------------------

    def file_complaint(self, draft: ComplaintDraft) -> Complaint:
        return self._run(
            "file_complaint",
            lambda: self.complaints.create(draft, self.user),
            "Complaint submitted successfully",
        )

    def update_complaint_status(self, complaint_id: str, status: ComplaintStatus) -> Complaint:
        return self._run(
            "update_complaint_status",
            lambda: self.complaints.update_status(complaint_id, status, self.user),
            lambda complaint: f"Complaint status updated to {complaint.status}",
        )

    def comment_on_complaint(self, complaint_id: str, text: str) -> ComplaintComment:
        return self._run(
            "comment_on_complaint",
            lambda: self.complaints.add_comment(complaint_id, text, self.user),
            "Comment added successfully",
        )

    def status_options(self, complaint_id: str) -> list[ComplaintStatus]:
        """Statuses the current user may pick for a complaint."""
        complaint = self.complaints.get(complaint_id)
        return policy.allowed_status_targets(
            self.user, complaint, strict=self.complaints.strict_transitions
        )

    # -- discussions -----------------------------------------------------------

    def start_discussion(self, draft: DiscussionDraft) -> Discussion:
        return self._run(
            "start_discussion",
            lambda: self.discussions.create(draft, self.user),
            "Discussion created successfully",
        )

    def comment_on_discussion(self, discussion_id: str, text: str) -> DiscussionComment:
        return self._run(
            "comment_on_discussion",
            lambda: self.discussions.add_comment(discussion_id, text, self.user),
            "Comment added successfully",
        )

    def toggle_discussion_like(self, discussion_id: str) -> Discussion:
        user = self.user
        return self._run(
            "toggle_discussion_like",
            lambda: self.discussions.toggle_like(discussion_id, user),
            lambda d: "Discussion liked" if user and d.is_liked_by(user.id) else "Like removed",
        )

    def toggle_comment_like(self, discussion_id: str, comment_id: str) -> DiscussionComment:
        user = self.user
        return self._run(
            "toggle_comment_like",
            lambda: self.discussions.toggle_like_comment(discussion_id, comment_id, user),
            lambda c: "Comment liked" if user and c.is_liked_by(user.id) else "Like removed",
        )

    # -- read models -----------------------------------------------------------

    def dashboard_stats(self) -> DashboardStats:
        return derivations.dashboard_stats(self.complaints.list())

    def recent_complaints(self) -> list[Complaint]:
        user = self.identity.require_user()
        return derivations.recent_complaints_for_role(
            self.complaints.list(),
            user.role,
            limit=self._config.recent_complaints_limit,
        )

    def discussion_stats(self) -> DiscussionStats:
        return derivations.discussion_stats(
            self.discussions.list(),
            top_n=self._config.top_categories_limit,
        )

    def visible_complaints(
        self,
        *,
        search: str = "",
        status: ComplaintStatus | None = None,
        category: str | None = None,
    ) -> list[Complaint]:
        return derivations.filter_complaints(
            self.complaints.list(),
            self.user,
            search=search,
            status=status,
            category=category,
        )

    def browse_discussions(
        self,
        *,
        search: str = "",
        category: str | None = None,
        sort: DiscussionSort = DiscussionSort.RECENT,
    ) -> list[Discussion]:
        return derivations.filter_discussions(
            self.discussions.list(),
            search=search,
            category=category,
            sort=sort,
        )

    def notifications(self) -> list[Notification]:
        user = self.identity.require_user()
        return self.inbox.feed(user, self.complaints.list(), self.discussions.list())

    def mark_notification_read(self, notification_id: str) -> None:
        self.inbox.mark_read(notification_id)

    def mark_all_notifications_read(self) -> int:
        return self.inbox.mark_all_read(self.notifications())

    def profile_stats(self) -> ProfileStats:
        user = self.identity.require_user()
        return derivations.profile_stats(user, self.complaints.list(), self.discussions.list())
