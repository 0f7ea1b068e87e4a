"""
Core Module - Logging Setup.

Installs a single stdout handler on the root logger. Modules log
through logging.getLogger(__name__) and never configure handlers
themselves.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from core.config import LoggingConfig


class JsonFormatter(logging.Formatter):
    """One JSON object per record. A ``context`` dict passed via ``extra`` is included."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        super().__init__()
        self._correlation_id = correlation_id or ""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": self._correlation_id,
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload["context"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(
    config: Optional[LoggingConfig] = None,
    correlation_id: Optional[str] = None,
) -> logging.Logger:
    """
    Set up structured logging.

    Args:
        config: Level and output format (json or text)
        correlation_id: Correlation ID for tracing, e.g. a batch id

    Returns:
        The indexer's top-level logger
    """
    config = config or LoggingConfig()
    log_level = getattr(logging, config.level, logging.INFO)

    if config.format == "json":
        formatter = JsonFormatter(correlation_id)
    else:
        formatter = logging.Formatter(
            f"%(asctime)s | %(levelname)-8s | %(name)s | {correlation_id or ''} | %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    return logging.getLogger("move_resources")
