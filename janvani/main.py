"""Janvani bootstrap.

Configures structured logging and builds a :class:`PortalSession` over
the storage selected in settings.  Presentation layers call
:func:`create_session` once at start-up and keep the returned session.
"""

from __future__ import annotations

import structlog

from config.settings import Settings, settings
from janvani.session import NoticeSink, PortalSession
from janvani.services.storage import SnapshotStorage

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def configure_logging(config: Settings | None = None) -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    config = config or settings
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            structlog.stdlib.NAME_TO_LEVEL[config.log_level.lower()],
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------


def create_session(
    config: Settings | None = None,
    *,
    notices: NoticeSink | None = None,
    storage: SnapshotStorage | None = None,
) -> PortalSession:
    """Build a ready-to-use session.

    On first start this seeds and persists the example complaints and
    discussions (when ``seed_on_first_load`` is enabled) and restores any
    previously logged-in user.
    """
    config = config or settings
    configure_logging(config)
    storage = storage or SnapshotStorage.from_settings(config)
    session = PortalSession(storage, config=config, notices=notices)
    logger.info(
        "app.session_ready",
        env=config.env,
        complaints=len(session.complaints),
        discussions=len(session.discussions),
        authenticated=session.is_authenticated,
    )
    return session
