"""Notification inbox with session-local read receipts.

Notification content is never stored: it is recomputed from the current
complaint and discussion snapshots by
:func:`janvani.services.derivations.notifications_for` every time the feed
is requested.  What the inbox keeps is only the set of notification ids
the user has acknowledged.  Because notification ids are derived from
their source events, recomputing the feed never clobbers a read flag.

Receipts live for the session only; they are not part of the persisted
snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from janvani.models.complaint import Complaint
from janvani.models.discussion import Discussion
from janvani.models.notification import Notification
from janvani.models.user import User
from janvani.services.derivations import notifications_for

logger = structlog.get_logger(__name__)


class NotificationInbox:
    """Merges recomputed notifications with acknowledged ids.

    Example::

        inbox = NotificationInbox()
        feed = inbox.feed(user, complaints.list(), discussions.list())
        inbox.mark_read(feed[0].id)
        inbox.feed(user, complaints.list(), discussions.list())[0].read  # True
    """

    __slots__ = ("_read_ids",)

    def __init__(self, read_ids: Iterable[str] = ()) -> None:
        self._read_ids: set[str] = set(read_ids)

    def feed(
        self,
        user: User,
        complaints: Sequence[Complaint],
        discussions: Sequence[Discussion],
    ) -> list[Notification]:
        """Recompute *user*'s notifications with read flags reattached."""
        return notifications_for(user, complaints, discussions, read_ids=self._read_ids)

    def mark_read(self, notification_id: str) -> None:
        self._read_ids.add(notification_id)
        logger.debug("notifications.marked_read", notification_id=notification_id)

    def mark_all_read(self, notifications: Iterable[Notification]) -> int:
        """Acknowledge every notification in *notifications*.  Returns how many were new."""
        ids = {n.id for n in notifications}
        newly_read = len(ids - self._read_ids)
        self._read_ids |= ids
        logger.debug("notifications.marked_all_read", count=newly_read)
        return newly_read

    def is_read(self, notification_id: str) -> bool:
        return notification_id in self._read_ids

    @staticmethod
    def unread_count(notifications: Iterable[Notification]) -> int:
        return sum(1 for n in notifications if not n.read)

    def clear(self) -> None:
        """Forget all receipts, e.g. when the session user changes."""
        self._read_ids.clear()

    @property
    def read_ids(self) -> frozenset[str]:
        return frozenset(self._read_ids)
