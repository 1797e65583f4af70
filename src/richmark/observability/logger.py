"""Structured JSON logger for richmark.

Every log record is emitted as a single-line JSON object so editor-side
events (debounced pushes, external updates, upload completions) can be
correlated by a log pipeline without extra parsing.

Typical structured output::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "INFO",
     "logger": "richmark.image", "message": "image inserted",
     "op": "upload", "filename": "cat.png", "position": 12}

Usage::

    from richmark.observability import get_logger

    log = get_logger("richmark.session")
    log.debug("debounce flushed", extra={"extra_fields": {"chars": 42}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Fields passed via ``extra={"extra_fields": {...}}`` are merged into the
    top-level object; ``exc_info`` and ``stack_info`` are serialised when
    present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


ROOT_LOGGER_NAME = "richmark"
"""Every richmark logger is this logger or a child of it."""

# The one handler shared by the whole ``richmark`` tree; created lazily.
_root_handler: logging.StreamHandler | None = None


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return logging.getLevelName(level.upper())
    return level


def _root_logger() -> logging.Logger:
    global _root_handler

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _root_handler is None:
        _root_handler = logging.StreamHandler(sys.stderr)
        _root_handler.setFormatter(StructuredFormatter())
        root.addHandler(_root_handler)
        root.setLevel(logging.WARNING)
        root.propagate = False
    return root


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    level: int | str | None = None,
    stream: Any | None = None,
) -> logging.Logger:
    """Get a logger in the ``richmark`` tree.

    Only the ``richmark`` logger owns a handler; component loggers
    (``richmark.session``, ``richmark.image``, ...) carry none and
    propagate to it, so one call such as
    ``get_logger(level="DEBUG")`` turns on debug output for the whole
    editor.

    Parameters
    ----------
    name:
        Logger name, e.g. ``"richmark.session"``.  A name outside the
        tree is nested under it (``"host"`` becomes ``"richmark.host"``).
    level:
        Minimum level for this logger, as an ``int`` or a case-insensitive
        name.  When omitted the logger inherits from ``richmark``, which
        defaults to ``WARNING``: editor sessions log one ``DEBUG`` record
        per keystroke burst.
    stream:
        Redirect the shared handler to this stream.  Defaults to
        ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The logger.  Repeated calls never add handlers.
    """
    root = _root_logger()
    if stream is not None:
        _root_handler.setStream(stream)

    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = root if name == ROOT_LOGGER_NAME else logging.getLogger(name)

    if level is not None:
        logger.setLevel(_resolve_level(level))
    return logger
