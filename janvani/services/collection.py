"""Persisted, ordered entity collection shared by the two stores.

A collection owns one storage key.  Every mutation goes through
:meth:`SnapshotCollection._commit`, which writes the *entire* new list and
only then swaps it in, so a failed write leaves both the stored bytes and
the in-memory snapshot unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

import pydantic
import structlog

from janvani.services.storage import SnapshotStorage

logger = structlog.get_logger(__name__)

EntityT = TypeVar("EntityT", bound=pydantic.BaseModel)


class SnapshotCollection(Generic[EntityT]):
    """Ordered list of frozen pydantic entities persisted under *key*.

    Parameters
    ----------
    storage:
        Where the snapshot is persisted.
    key:
        Storage key for the whole collection.
    model:
        Entity class used to validate stored records.
    seed:
        Called when the key is absent (or unreadable) to produce initial
        records.  ``None`` starts empty.
    """

    __slots__ = ("_items", "_key", "_model", "_storage")

    def __init__(
        self,
        storage: SnapshotStorage,
        key: str,
        model: type[EntityT],
        seed: Callable[[], list[EntityT]] | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._model = model
        self._items: tuple[EntityT, ...] = self._load(seed)

    # -- loading ---------------------------------------------------------------

    def _load(self, seed: Callable[[], list[EntityT]] | None) -> tuple[EntityT, ...]:
        raw = self._storage.load(self._key)

        if raw is None and not self._storage.exists(self._key):
            return self._initialise(seed, reason="absent")

        if not isinstance(raw, list):
            logger.warning("collection.corrupt_snapshot", key=self._key, kind=type(raw).__name__)
            return self._initialise(seed, reason="corrupt")

        items: list[EntityT] = []
        for record in raw:
            try:
                items.append(self._model.model_validate(record))
            except pydantic.ValidationError:
                record_id = record.get("id", "unknown") if isinstance(record, dict) else "unknown"
                logger.warning("collection.invalid_record", key=self._key, id=record_id, exc_info=True)

        logger.info("collection.loaded", key=self._key, count=len(items))
        return tuple(items)

    def _initialise(
        self,
        seed: Callable[[], list[EntityT]] | None,
        *,
        reason: str,
    ) -> tuple[EntityT, ...]:
        items = tuple(seed()) if seed is not None else ()
        self._storage.save(self._key, [item.model_dump(mode="json") for item in items])
        logger.info("collection.initialised", key=self._key, reason=reason, seeded=len(items))
        return items

    # -- mutation --------------------------------------------------------------

    def _commit(self, items: tuple[EntityT, ...]) -> None:
        self._storage.save(self._key, [item.model_dump(mode="json") for item in items])
        self._items = items

    def _index_of(self, entity_id: str) -> int | None:
        for i, item in enumerate(self._items):
            if item.id == entity_id:  # type: ignore[attr-defined]
                return i
        return None

    def _replace_at(self, index: int, entity: EntityT) -> None:
        items = list(self._items)
        items[index] = entity
        self._commit(tuple(items))

    def _prepend(self, entity: EntityT) -> None:
        self._commit((entity, *self._items))

    # -- queries ---------------------------------------------------------------

    def list(self) -> list[EntityT]:
        """Entities in store order (most recently created first)."""
        return list(self._items)

    def find_by_id(self, entity_id: str) -> EntityT | None:
        index = self._index_of(entity_id)
        return None if index is None else self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[EntityT]:
        return iter(self._items)

    @property
    def key(self) -> str:
        return self._key
