"""
Logging setup for Inventory Signals.

``configure_logging(config)`` is called once per CLI command, before the
session is built. Library modules only ever use ``logging.getLogger(__name__)``.

Store mutations, price commits and CSV row rejections attach context through
``extra=``, built with ``event_context``::

    logger.debug("Price for %s changed", pid, extra=event_context("price_changed", [pid]))

Both formatters render that context. Text lines get a bracketed tail::

    2026-10-19T12:00:00Z [DEBUG] inventory_signals.store.entity_store: Price for 1 changed [event=price_changed product_ids=1]

JSON lines (``json_format = true`` in config/default.toml [logging]) carry it as
top-level keys::

    {"ts": "...", "level": "DEBUG", "logger": "...", "msg": "...", "event": "price_changed", "product_ids": ["1"]}

Timestamps are UTC in both formats.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from inventory_signals.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Record attributes rendered as context, in output order.
CONTEXT_FIELDS = ("event", "product_ids", "line_no")

_NOISY_LOGGERS = ("httpx", "httpcore")


def event_context(
    kind: str,
    product_ids: Iterable[str] = (),
    *,
    line_no: Optional[int] = None,
) -> dict[str, Any]:
    """Build the ``extra=`` mapping for a store or import log record.

    Args:
        kind:        Event name, e.g. a ``StoreEvent.kind`` or ``"csv_row_skipped"``.
        product_ids: Products the record is about; order kept.
        line_no:     1-based CSV line number, for import records.
    """
    ctx: dict[str, Any] = {"event": kind, "product_ids": list(product_ids)}
    if line_no is not None:
        ctx["line_no"] = line_no
    return ctx


def _context_of(record: logging.LogRecord) -> dict[str, Any]:
    ctx = {}
    for key in CONTEXT_FIELDS:
        value = getattr(record, key, None)
        if value is None or value == []:
            continue
        ctx[key] = value
    return ctx


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class _ContextFormatter(logging.Formatter):
    """Plain text lines with store/import context appended to the message."""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        ctx = _context_of(record)
        if not ctx:
            return line
        tail = " ".join(f"{key}={_render(value)}" for key, value in ctx.items())
        return f"{line} [{tail}]"


class _JsonFormatter(logging.Formatter):
    """One JSON object per line; context fields become top-level keys."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(_context_of(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: "LoggingConfig") -> None:
    """Configure the root logger from the ``[logging]`` config section.

    Installs a stdout handler and, when ``config.log_file`` is set, a file
    handler (parent directories are created). Any handlers from an earlier
    call are replaced, so each CLI command starts clean.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter: logging.Formatter = (
        _JsonFormatter() if config.json_format else _ContextFormatter()
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # The insight client's HTTP stack logs every request at INFO.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
