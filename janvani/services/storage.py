"""Keyed snapshot storage with in-memory and file-backed backends.

Each store persists its whole collection under a single key (``user``,
``complaints``, ``discussions``).  Values are encoded with *orjson*.

Reads degrade instead of failing: an unreadable file or corrupt JSON is
logged and reported as absent, so a broken snapshot never prevents the
session from starting.  Writes propagate their errors so the caller can
leave its in-memory snapshot untouched.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import orjson
import structlog

from config.settings import StorageBackendKind

if TYPE_CHECKING:
    from config.settings import Settings

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Storage backend protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class StorageBackend(Protocol):
    """Synchronous key/value byte storage."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...

    def exists(self, key: str) -> bool: ...


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------


class InMemoryStorageBackend:
    """Dict-backed storage for tests and ephemeral sessions."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self._data

    @property
    def size(self) -> int:
        """Return the number of stored keys."""
        return len(self._data)


# ---------------------------------------------------------------------------
# File backend
# ---------------------------------------------------------------------------


class FileStorageBackend:
    """One JSON file per key inside *directory*.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a reader never sees a half-written
    snapshot.
    """

    __slots__ = ("_directory",)

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = key.replace("/", "_").replace(":", "_")
        return self._directory / f"{safe}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError:
            logger.warning("storage.file_read_failed", key=key, path=str(path), exc_info=True)
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    @property
    def directory(self) -> Path:
        return self._directory


# ---------------------------------------------------------------------------
# SnapshotStorage  --  public API
# ---------------------------------------------------------------------------


class SnapshotStorage:
    """JSON facade over a :class:`StorageBackend`.

    Parameters
    ----------
    backend:
        Where the bytes live.  Defaults to a fresh in-memory backend.
    namespace:
        Optional prefix prepended to every key (e.g. ``"demo:"``).
    """

    __slots__ = ("_backend", "_namespace")

    def __init__(self, backend: StorageBackend | None = None, *, namespace: str = "") -> None:
        self._backend: StorageBackend = backend if backend is not None else InMemoryStorageBackend()
        self._namespace = namespace

    def _make_key(self, key: str) -> str:
        if self._namespace:
            return f"{self._namespace}{key}"
        return key

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def load(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for *key*, or *default* if absent or corrupt."""
        full_key = self._make_key(key)
        raw = self._backend.get(full_key)
        if raw is None:
            return default
        try:
            return orjson.loads(raw)
        except (orjson.JSONDecodeError, ValueError):
            logger.warning("storage.corrupt_value", key=full_key, size=len(raw))
            return default

    def save(self, key: str, value: Any) -> None:
        """Encode *value* with orjson and write it under *key*."""
        full_key = self._make_key(key)
        self._backend.set(full_key, orjson.dumps(value))

    def delete(self, key: str) -> None:
        self._backend.delete(self._make_key(key))

    def exists(self, key: str) -> bool:
        return self._backend.exists(self._make_key(key))

    def raw(self, key: str) -> bytes | None:
        """Return the stored bytes for *key* without decoding."""
        return self._backend.get(self._make_key(key))

    # -- Convenience constructors ----------------------------------------------

    @staticmethod
    def in_memory(namespace: str = "") -> SnapshotStorage:
        return SnapshotStorage(InMemoryStorageBackend(), namespace=namespace)

    @staticmethod
    def from_settings(config: Settings) -> SnapshotStorage:
        """Build the storage selected by ``storage_backend``.

        Example::

            storage = SnapshotStorage.from_settings(settings)
        """
        if config.storage_backend == StorageBackendKind.MEMORY:
            backend: StorageBackend = InMemoryStorageBackend()
        else:
            backend = FileStorageBackend(config.storage_dir)
        logger.info(
            "storage.initialised",
            backend=str(config.storage_backend),
            namespace=config.storage_namespace,
        )
        return SnapshotStorage(backend, namespace=config.storage_namespace)
