"""Derived notification model.

Notifications are recomputed from complaint and discussion snapshots on
every request.  Their ``id`` is a deterministic function of the source
event, so a read flag acknowledged earlier in the session can be
reattached after recomputation.
"""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel

from janvani.models.enums import NotificationKind


class Notification(BaseModel):
    """A single entry in a user's notification feed."""

    id: str
    kind: NotificationKind
    title: str
    description: str
    created_at: AwareDatetime
    read: bool = False
    target_link: str
