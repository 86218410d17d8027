"""
Event Logger

Every store mutation and every client-side reconciliation step is
written to the structured log, tagged with a correlation ID so that
one user action (edit -> send -> rollback) can be followed end to end.

Events are log lines only. Nothing here is persisted.
"""

import logging
from uuid import UUID, uuid4

import structlog

from src.models.events import EventSeverity, StoreEvent


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through a stdout handler at `level`.

    structlog filters by the stdlib level, so without this only
    warnings and above would be emitted.
    """
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


class EventLogger:
    """Writes StoreEvents to the structured log."""

    def __init__(self, name: str = "networth"):
        self._logger = structlog.get_logger(name)

    def log(self, event: StoreEvent) -> None:
        """Log an event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("store_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("store_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("store_event", **log_dict)
        else:
            self._logger.info("store_event", **log_dict)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a client action and pass it through
    all subsequent operations.
    """
    return uuid4()

