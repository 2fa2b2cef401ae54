"""Structured logging configuration helpers for the Kraken adapter."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

DEFAULT_ENV = os.getenv("KRAKEN_ADAPTER_ENV", os.getenv("ENV", "local"))

_RESERVED_RECORD_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)


class JsonFormatter(logging.Formatter):
    """Emits one JSON object per log line.

    Every value passed through the logging ``extra`` dictionary is kept, so
    callers can attach identifiers such as ``event``, ``endpoint``, ``pair`` or
    ``order_id``. ``event`` is a short machine-readable label for the line.
    """

    def __init__(self, env: str | None = None) -> None:
        super().__init__()
        self.env = env or DEFAULT_ENV

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_time = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": log_time.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "event": getattr(record, "event", None),
            "env": getattr(record, "env", self.env),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_FIELDS:
                continue
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: int = logging.INFO, env: str | None = None) -> None:
    """Configure root logging with a JSON formatter and stdout handler."""

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(env=env))
    root_logger.addHandler(handler)


def structured_log_extra(
    *,
    env: str | None = None,
    event: str | None = None,
    endpoint: str | None = None,
    pair: str | None = None,
    symbol: str | None = None,
    order_id: str | None = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Build a consistent set of logging extras.

    ``event`` and ``env`` are always present. The optional identifiers are only
    added when given; any other keyword is forwarded as-is.
    """

    extra: Dict[str, Any] = {
        "event": event,
        "env": env or DEFAULT_ENV,
    }

    identifier_fields = {
        "endpoint": endpoint,
        "pair": pair,
        "symbol": symbol,
        "order_id": order_id,
    }
    for key, value in identifier_fields.items():
        if value is not None:
            extra[key] = value

    extra.update(kwargs)
    return extra


__all__: list[str] = [
    "JsonFormatter",
    "configure_logging",
    "structured_log_extra",
]
