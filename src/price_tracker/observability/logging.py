"""Logging configuration and event emission."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from pydantic import BaseModel
from pythonjsonlogger.json import JsonFormatter

JSON_FIELDS = "%(timestamp)s %(level)s %(name)s %(message)s"


class CustomJsonFormatter(JsonFormatter):
    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname


def _log_format(environment: str | None) -> str:
    """``LOG_FORMAT`` wins; otherwise development logs text and the rest JSON."""

    default = "text" if environment == "development" else "json"
    return os.environ.get("LOG_FORMAT", default).lower()


def setup_logging(
    level: str = "INFO",
    service_name: str = "price-tracker",
    *,
    environment: str | None = None,
) -> None:
    """Configure the root logger for the tracker client.

    JSON records carry ``service`` and, when given, ``environment`` as static
    fields. Text output goes through rich.
    """

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if _log_format(environment) == "json":
        static_fields = {"service": service_name}
        if environment:
            static_fields["environment"] = environment
        log_handler = logging.StreamHandler(sys.stdout)
        log_handler.setFormatter(
            CustomJsonFormatter(JSON_FIELDS, json_ensure_ascii=False, static_fields=static_fields)
        )
        root_logger.addHandler(log_handler)
    else:
        from rich.logging import RichHandler

        root_logger.addHandler(
            RichHandler(rich_tracebacks=True, markup=False, show_time=True, show_path=False)
        )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def log_event(event: BaseModel, *, level: int = logging.INFO) -> None:
    """Log a structured domain event."""
    logger = logging.getLogger("price_tracker.event")
    if not logger.isEnabledFor(level):
        return

    payload = event.model_dump(mode="json", exclude_none=True)
    extra = {"event_type": event.__class__.__name__, "event_data": payload}
    logger.log(level, f"Event: {event.__class__.__name__}", extra=extra)


__all__ = ["CustomJsonFormatter", "log_event", "setup_logging"]
