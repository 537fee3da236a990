"""
Logging for protoid.

All library records go to the ``protoid`` logger namespace, which carries
only a NullHandler until an application calls configure_logging or attaches
handlers of its own.

Usage:
    from protoid.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Identity registered", extra={"identity_id": str(identity.id)})

Passwords, tokens and hashes are never passed to a logger.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from protoid.config import Settings, get_settings

LIBRARY_LOGGER = "protoid"

# Set by the transport layer (request handler, job runner) around one operation
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Structured fields the identity modules pass via extra=
IDENTITY_FIELDS = ("identity_id", "error_code", "merged_proto")


class CorrelationIdFilter(logging.Filter):
    """Stamps each record with the correlation id of the current operation."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "-"  # type: ignore[attr-defined]
        return True


class IdentityJsonFormatter(logging.Formatter):
    """One JSON object per record, carrying the identity fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", "-")
        if correlation_id != "-":
            entry["correlation_id"] = correlation_id

        for field in IDENTITY_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    settings: Optional[Settings] = None,
    *,
    stream: Any = None,
) -> logging.Handler:
    """
    Send protoid records to a stream.

    JSON lines when ``settings.environment`` is production, one text line per
    record otherwise. ``debug`` forces DEBUG regardless of ``log_level``.
    Calling it again replaces the handler installed by the previous call.

    Returns:
        The installed handler
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )

    logger = logging.getLogger(LIBRARY_LOGGER)
    for existing in logger.handlers[:]:
        if not isinstance(existing, logging.NullHandler):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(CorrelationIdFilter())
    if settings.environment == "production":
        handler.setFormatter(IdentityJsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-5s [%(name)s] corr=%(correlation_id)s %(message)s",
            datefmt="%H:%M:%S",
        ))

    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return handler


def get_logger(name: str) -> logging.Logger:
    """Logger inside the protoid namespace."""
    if name != LIBRARY_LOGGER and not name.startswith(LIBRARY_LOGGER + "."):
        name = f"{LIBRARY_LOGGER}.{name}"
    return logging.getLogger(name)


logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())
