"""Observability logger utilities.

Provides:
- ``get_logger``: standard human-readable logger.
- ``JSONFormatter``: custom :class:`logging.Formatter` that emits JSON.
- ``configure_logging``: applies the ``observability`` settings section
  to the ``ai_dispatch`` logger hierarchy.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

ROOT_LOGGER_NAME = "ai_dispatch"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


# ── Human-readable logger ───────────────────────────────────────────


def get_logger(name: str = ROOT_LOGGER_NAME, log_level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger.

    Args:
        name: Logger name.
        log_level: Optional log level string (e.g., "INFO").

    Returns:
        Configured logger instance.
    """

    if log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=_TEXT_FORMAT,
        stream=sys.stderr,
    )

    # urllib3 logs full request lines at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logging.getLogger(name)


# ── JSON Lines formatter ────────────────────────────────────────────


class JSONFormatter(logging.Formatter):
    """Logging formatter that outputs one JSON object per line.

    Each log record is serialised to a dict containing at least:
    ``timestamp``, ``level``, ``logger``, ``message``.  If the record
    carries an ``exc_info`` tuple the traceback is included as
    ``exception``.

    Extra attributes attached via *extra=* on the logger call are
    merged into the top-level dict (except internal Python fields).
    """

    _INTERNAL_ATTRS = frozenset({
        "args", "created", "exc_info", "exc_text", "filename",
        "funcName", "levelname", "levelno", "lineno", "module",
        "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread",
        "threadName", "taskName",
    })

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        """Return the log record as a single-line JSON string."""
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, val in record.__dict__.items():
            if key not in self._INTERNAL_ATTRS and key not in payload:
                try:
                    json.dumps(val)
                    payload[key] = val
                except (TypeError, ValueError):
                    payload[key] = str(val)

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


# ── Settings-driven setup ───────────────────────────────────────────


def configure_logging(observability: Optional[Mapping[str, Any]] = None) -> logging.Logger:
    """Attach a stderr handler to the package logger from settings.

    Recognized keys: ``log_level`` (default ``INFO``) and ``log_format``
    (``text`` or ``json``, default ``text``). Repeated calls replace the
    handler instead of stacking a new one.

    Args:
        observability: The ``observability`` settings section.

    Returns:
        The configured ``ai_dispatch`` logger.
    """
    observability = observability or {}
    level_name = str(observability.get("log_level") or "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    log_format = str(observability.get("log_format") or "text").lower()
    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    elif log_format == "text":
        formatter = logging.Formatter(_TEXT_FORMAT)
    else:
        raise ValueError(f"Unsupported log format: {log_format}")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, "_ai_dispatch_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler._ai_dispatch_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logger
