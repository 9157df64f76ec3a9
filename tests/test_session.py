"""Tests for the session facade and the bootstrap factory."""

from __future__ import annotations

import pytest
import structlog

from config.settings import Settings, StorageBackendKind
from janvani.errors import NotAuthenticatedError, UnauthorizedError, ValidationError
from janvani.main import configure_logging, create_session
from janvani.models import ComplaintDraft, ComplaintStatus, DiscussionDraft, DiscussionSort, Role, User
from janvani.services.storage import SnapshotStorage
from janvani.session import (
    UNEXPECTED_ERROR_MESSAGE,
    LoggingNoticeSink,
    NoticeSink,
    PortalSession,
    RecordingNoticeSink,
)

from conftest import FailingWritesBackend, FakeClock


@pytest.fixture
def config() -> Settings:
    return Settings(storage_backend=StorageBackendKind.MEMORY, seed_on_first_load=False)


@pytest.fixture
def notices() -> RecordingNoticeSink:
    return RecordingNoticeSink()


@pytest.fixture
def session(storage: SnapshotStorage, config: Settings, notices: RecordingNoticeSink, clock: FakeClock) -> PortalSession:
    return PortalSession(storage, config=config, notices=notices, clock=clock)


class TestNoticeSinks:
    def test_sinks_satisfy_protocol(self) -> None:
        assert isinstance(RecordingNoticeSink(), NoticeSink)
        assert isinstance(LoggingNoticeSink(), NoticeSink)


class TestIdentityFlow:
    def test_login_and_logout_notices(self, session: PortalSession, notices: RecordingNoticeSink) -> None:
        user = session.login("mla.office@gov.in", "pw")
        assert user.role == Role.MLA
        assert session.is_authenticated
        session.logout()
        assert session.user is None
        assert notices.notices == [("success", "Logged in successfully"), ("info", "Logged out successfully")]

    def test_failed_login_reports_error(self, session: PortalSession, notices: RecordingNoticeSink) -> None:
        with pytest.raises(ValidationError):
            session.login("", "pw")
        assert notices.notices == [("error", "email is required")]

    def test_register(self, session: PortalSession, notices: RecordingNoticeSink) -> None:
        user = session.register("Asha", "asha@example.org", "V12345678", "pw")
        assert user.role == Role.VOTER
        assert notices.notices[-1] == ("success", "Registration successful")

    def test_login_clears_read_receipts(self, session: PortalSession) -> None:
        session.inbox.mark_read("notif-c1-status")
        session.login("a@example.org", "pw")
        assert session.inbox.read_ids == frozenset()


class TestComplaintFlow:
    def test_status_workflow_through_the_session(
        self, session: PortalSession, notices: RecordingNoticeSink, pothole: ComplaintDraft
    ) -> None:
        session.login("asha@example.org", "pw")
        complaint = session.file_complaint(pothole)

        session.login("mla@gov.in", "pw")
        updated = session.update_complaint_status(complaint.id, ComplaintStatus.ESCALATED)
        assert updated.status == ComplaintStatus.ESCALATED

        session.login("district@gov.in", "pw")
        assert session.status_options(complaint.id) == [
            ComplaintStatus.ESCALATED,
            ComplaintStatus.RESOLVED,
            ComplaintStatus.REJECTED,
        ]
        session.update_complaint_status(complaint.id, ComplaintStatus.RESOLVED)

        with pytest.raises(UnauthorizedError):
            session.update_complaint_status(complaint.id, ComplaintStatus.PENDING)

        assert ("success", "Complaint submitted successfully") in notices.notices
        assert ("success", "Complaint status updated to escalated") in notices.notices
        assert ("success", "Complaint status updated to resolved") in notices.notices
        assert notices.notices[-1][0] == "error"
        assert session.complaints.get(complaint.id).status == ComplaintStatus.RESOLVED

    def test_anonymous_cannot_file(
        self, session: PortalSession, notices: RecordingNoticeSink, pothole: ComplaintDraft
    ) -> None:
        with pytest.raises(NotAuthenticatedError):
            session.file_complaint(pothole)
        assert notices.notices[-1][0] == "error"
        assert len(session.complaints) == 0

    def test_voter_sees_only_own_complaints(self, session: PortalSession, pothole: ComplaintDraft) -> None:
        session.login("one@example.org", "pw")
        mine = session.file_complaint(pothole)
        session.login("two@example.org", "pw")
        session.file_complaint(pothole)
        assert len(session.visible_complaints()) == 1

        session.login("central@gov.in", "pw")
        assert len(session.visible_complaints()) == 2
        assert session.visible_complaints(search="pothole")[-1].id == mine.id

    def test_dashboard(self, session: PortalSession, pothole: ComplaintDraft) -> None:
        session.login("voter@example.org", "pw")
        session.file_complaint(pothole)
        assert session.recent_complaints() == []

        session.login("mla@gov.in", "pw")
        assert len(session.recent_complaints()) == 1
        assert session.dashboard_stats().pending == 1

    def test_recent_requires_login(self, session: PortalSession) -> None:
        with pytest.raises(NotAuthenticatedError):
            session.recent_complaints()


class TestDiscussionFlow:
    def test_like_notices(
        self, session: PortalSession, notices: RecordingNoticeSink, park_proposal: DiscussionDraft
    ) -> None:
        session.login("u9@example.org", "pw")
        discussion = session.start_discussion(park_proposal)

        assert session.toggle_discussion_like(discussion.id).like_count == 1
        assert notices.notices[-1] == ("success", "Discussion liked")
        assert session.toggle_discussion_like(discussion.id).like_count == 0
        assert notices.notices[-1] == ("success", "Like removed")

        comment = session.comment_on_discussion(discussion.id, "Count me in")
        assert session.toggle_comment_like(discussion.id, comment.id).like_count == 1
        assert notices.notices[-1] == ("success", "Comment liked")

    def test_browse_and_stats(self, session: PortalSession, park_proposal: DiscussionDraft) -> None:
        session.login("a@example.org", "pw")
        first = session.start_discussion(park_proposal)
        second = session.start_discussion(park_proposal.model_copy(update={"category": "Transportation"}))
        session.toggle_discussion_like(first.id)

        assert [d.id for d in session.browse_discussions()] == [second.id, first.id]
        assert [d.id for d in session.browse_discussions(sort=DiscussionSort.POPULAR)] == [first.id, second.id]

        stats = session.discussion_stats()
        assert stats.total_discussions == 2
        assert stats.engagement_rate == 0.0

    def test_profile_stats(self, session: PortalSession, pothole: ComplaintDraft, park_proposal: DiscussionDraft) -> None:
        session.login("a@example.org", "pw")
        session.file_complaint(pothole)
        discussion = session.start_discussion(park_proposal)
        session.comment_on_discussion(discussion.id, "Bump")
        session.comment_on_complaint(session.complaints.list()[0].id, "Any update?")

        stats = session.profile_stats()
        assert (stats.complaints_filed, stats.discussions_started, stats.comments_posted) == (1, 1, 1)


class TestFailureNotices:
    def test_storage_failure_reports_error(
        self,
        failing_backend: FailingWritesBackend,
        config: Settings,
        notices: RecordingNoticeSink,
        clock: FakeClock,
        park_proposal: DiscussionDraft,
    ) -> None:
        session = PortalSession(SnapshotStorage(failing_backend), config=config, notices=notices, clock=clock)
        session.login("u9@example.org", "pw")
        discussion = session.start_discussion(park_proposal)

        failing_backend.fail_writes = True
        with pytest.raises(OSError):
            session.toggle_discussion_like(discussion.id)

        assert notices.notices[-1] == ("error", UNEXPECTED_ERROR_MESSAGE)
        assert session.discussions.get(discussion.id).like_count == 0

    def test_unknown_status_reports_error(
        self, session: PortalSession, notices: RecordingNoticeSink, pothole: ComplaintDraft
    ) -> None:
        session.login("asha@example.org", "pw")
        complaint = session.file_complaint(pothole)
        session.login("mla@gov.in", "pw")

        with pytest.raises(ValidationError):
            session.update_complaint_status(complaint.id, "archived")  # type: ignore[arg-type]
        assert notices.notices[-1] == ("error", "unknown complaint status 'archived'")


class TestNotificationFlow:
    def test_mark_read(self, session: PortalSession, mla: User, pothole: ComplaintDraft) -> None:
        session.login("asha@example.org", "pw")
        complaint = session.file_complaint(pothole)
        session.complaints.update_status(complaint.id, ComplaintStatus.REVIEWING, mla)
        session.complaints.add_comment(complaint.id, "On it", mla)

        feed = session.notifications()
        assert len(feed) == 2
        session.mark_notification_read(feed[0].id)
        assert session.mark_all_notifications_read() == 1
        assert all(n.read for n in session.notifications())


class TestCreateSession:
    def test_seeds_on_first_start(self, notices: RecordingNoticeSink) -> None:
        config = Settings(storage_backend=StorageBackendKind.MEMORY)
        session = create_session(config, notices=notices)
        assert len(session.complaints) == 3
        assert len(session.discussions) == 2
        assert not session.is_authenticated

    def test_restores_user_from_storage(self, config: Settings) -> None:
        storage = SnapshotStorage.in_memory()
        user = create_session(config, storage=storage).login("central@gov.in", "pw")
        assert create_session(config, storage=storage).user == user

    def test_relaxed_transitions_from_settings(self, pothole: ComplaintDraft) -> None:
        config = Settings(
            storage_backend=StorageBackendKind.MEMORY,
            seed_on_first_load=False,
            strict_status_transitions=False,
        )
        session = create_session(config)
        session.login("voter@example.org", "pw")
        complaint = session.file_complaint(pothole)
        session.login("mla@gov.in", "pw")
        session.update_complaint_status(complaint.id, ComplaintStatus.RESOLVED)
        assert session.update_complaint_status(complaint.id, ComplaintStatus.PENDING).status == ComplaintStatus.PENDING


class TestConfigureLogging:
    @pytest.mark.parametrize(("level", "fmt"), [("DEBUG", "console"), ("WARNING", "json")])
    def test_accepts_level_names(self, level: str, fmt: str) -> None:
        configure_logging(Settings(log_level=level, log_format=fmt, storage_backend=StorageBackendKind.MEMORY))
        structlog.get_logger("janvani.test").warning("logging.configured", level=level)
