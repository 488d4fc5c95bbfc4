"""Logging setup and log-safe formatting helpers."""

import json
import logging
import re
import sys
from datetime import datetime, timezone

from .config import settings

_NUMBER_RE = re.compile(r"\b\d{4,}\b")
_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

MAX_LOGGED_QUERY_CHARS = 200


class JsonLineFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Install a stderr handler on the root logger.

    Does nothing when the root logger already has handlers, so it is safe to
    call from both the server lifespan and library entry points.

    Args:
        level: Log level name, defaults to ``settings.log_level``
        log_format: ``"text"`` or ``"json"``, defaults to ``settings.log_format``
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = (level or settings.log_level).upper()
    resolved_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if (log_format or settings.log_format).lower() == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root_logger.setLevel(resolved_level)
    root_logger.addHandler(handler)


def sanitize_query(query: str) -> str:
    """Mask long numbers and e-mail addresses and truncate a query for logging."""
    masked = _NUMBER_RE.sub("[NUM]", query)
    masked = _EMAIL_RE.sub("[EMAIL]", masked)
    return masked[:MAX_LOGGED_QUERY_CHARS]
