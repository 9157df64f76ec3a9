"""Example records used to populate an empty portal.

The bundled ``seed/complaints.json`` and ``seed/discussions.json`` files
express their timestamps as day offsets (``created_days_ago``) so the seed
always looks recent relative to the moment it is loaded.  The content is
illustrative only.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import structlog

from janvani.models.complaint import Complaint, ComplaintComment
from janvani.models.discussion import Discussion, DiscussionComment

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

_DATA_DIR: Path = Path(__file__).resolve().parent / "seed"
_COMPLAINTS_PATH: Path = _DATA_DIR / "complaints.json"
_DISCUSSIONS_PATH: Path = _DATA_DIR / "discussions.json"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _read(path: Path) -> list[dict]:
    if not path.exists():
        raise FileNotFoundError(f"Seed data file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _days_ago(now: datetime, raw: dict, key: str) -> datetime:
    return now - timedelta(days=raw.get(key, 0))


def load_seed_complaints(path: Path | None = None, *, now: datetime | None = None) -> list[Complaint]:
    """Load the example complaints, newest-filed order as stored in the file.

    Raises
    ------
    FileNotFoundError
        If the JSON file does not exist.
    json.JSONDecodeError
        If the JSON is malformed.
    """
    file_path = path or _COMPLAINTS_PATH
    now = now or datetime.now(UTC)

    complaints: list[Complaint] = []
    for raw in _read(file_path):
        try:
            complaints.append(_parse_complaint(raw, now))
        except Exception:
            logger.warning("seed.parse_error", entity="complaint", id=raw.get("id", "unknown"), exc_info=True)

    logger.info("seed.loaded_complaints", count=len(complaints), source=str(file_path))
    return complaints


def load_seed_discussions(path: Path | None = None, *, now: datetime | None = None) -> list[Discussion]:
    """Load the example discussions.  Same contract as :func:`load_seed_complaints`."""
    file_path = path or _DISCUSSIONS_PATH
    now = now or datetime.now(UTC)

    discussions: list[Discussion] = []
    for raw in _read(file_path):
        try:
            discussions.append(_parse_discussion(raw, now))
        except Exception:
            logger.warning("seed.parse_error", entity="discussion", id=raw.get("id", "unknown"), exc_info=True)

    logger.info("seed.loaded_discussions", count=len(discussions), source=str(file_path))
    return discussions


def _parse_complaint(raw: dict, now: datetime) -> Complaint:
    comments = tuple(
        ComplaintComment(
            id=c["id"],
            text=c["text"],
            created_at=_days_ago(now, c, "created_days_ago"),
            author_id=c["author_id"],
            author_name=c["author_name"],
            author_role=c["author_role"],
        )
        for c in raw.get("comments", [])
    )
    return Complaint(
        id=raw["id"],
        title=raw["title"],
        description=raw["description"],
        category=raw["category"],
        location=raw["location"],
        status=raw.get("status", "pending"),
        created_at=_days_ago(now, raw, "created_days_ago"),
        updated_at=_days_ago(now, raw, "updated_days_ago"),
        author_id=raw["author_id"],
        author_name=raw["author_name"],
        comments=comments,
    )


def _parse_discussion(raw: dict, now: datetime) -> Discussion:
    comments = tuple(
        DiscussionComment(
            id=c["id"],
            text=c["text"],
            created_at=_days_ago(now, c, "created_days_ago"),
            author_id=c["author_id"],
            author_name=c["author_name"],
            author_role=c["author_role"],
            liked_by=tuple(c.get("liked_by", [])),
        )
        for c in raw.get("comments", [])
    )
    return Discussion(
        id=raw["id"],
        title=raw["title"],
        content=raw["content"],
        category=raw["category"],
        created_at=_days_ago(now, raw, "created_days_ago"),
        updated_at=_days_ago(now, raw, "updated_days_ago"),
        author_id=raw["author_id"],
        author_name=raw["author_name"],
        comments=comments,
        liked_by=tuple(raw.get("liked_by", [])),
    )
