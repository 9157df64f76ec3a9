"""Janvani service layer -- storage, identity, stores and read models."""

from __future__ import annotations

from janvani.services.complaints import ComplaintStore
from janvani.services.discussions import DiscussionStore
from janvani.services.identity import IdentityHolder
from janvani.services.notifications import NotificationInbox
from janvani.services.storage import (
    FileStorageBackend,
    InMemoryStorageBackend,
    SnapshotStorage,
    StorageBackend,
)

__all__ = [
    "ComplaintStore",
    "DiscussionStore",
    "FileStorageBackend",
    "IdentityHolder",
    "InMemoryStorageBackend",
    "NotificationInbox",
    "SnapshotStorage",
    "StorageBackend",
]
