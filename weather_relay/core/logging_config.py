"""JSON logging for the relay plus an in-memory tail served at ``/logs``.

Records may carry a ``city`` via ``extra=``; the cache and refresh paths set it
so the tail can be filtered to a single location.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from pythonjsonlogger import jsonlogger

_CONFIGURED = False
_LOG_BUFFER: deque[dict[str, str]] = deque(maxlen=200)


class _RelayContextFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        if not hasattr(record, "city"):
            record.city = None
        return True


class _TailHandler(logging.Handler):
    """Keep the newest records as plain dicts, newest first."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "service": getattr(record, "service", ""),
                "message": record.getMessage(),
            }
        except (TypeError, ValueError):
            self.handleError(record)
            return
        city = getattr(record, "city", None)
        if city:
            entry["city"] = city
        _LOG_BUFFER.appendleft(entry)


def setup_logging(service_name: Optional[str] = None) -> None:
    """Route the root logger to stdout as JSON and into the ``/logs`` tail."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    context = _RelayContextFilter(service_name or os.getenv("SERVICE_NAME", "weather-relay"))

    stream = logging.StreamHandler()
    stream.setFormatter(
        jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(service)s %(city)s %(message)s")
    )
    stream.addFilter(context)
    tail = _TailHandler()
    tail.addFilter(context)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stream)
    root.addHandler(tail)
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    logging.captureWarnings(True)
    _CONFIGURED = True


def get_log_buffer(limit: int = 100, city: Optional[str] = None) -> list[dict[str, str]]:
    entries = [entry for entry in _LOG_BUFFER if city is None or entry.get("city") == city]
    return entries[:limit]


__all__ = ["setup_logging", "get_log_buffer"]
