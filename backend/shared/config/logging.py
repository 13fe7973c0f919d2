"""
Structured logging for the order core.

Loggers accept keyword context, which formatters render as a JSON "data"
object in production or as `key=value` pairs in development.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import Settings, get_settings


def _record_data(record: logging.LogRecord) -> dict[str, Any] | None:
    return getattr(record, "extra_data", None)


class StructuredFormatter(logging.Formatter):
    """JSON lines for log aggregation. Source location is added when include_source is set."""

    def __init__(self, include_source: bool = False):
        super().__init__()
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        data = _record_data(record)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            log_data["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Colored single-line output for local runs."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now().strftime("%H:%M:%S")
        message = f"{color}[{timestamp}] {record.levelname:8}{self.RESET} {record.name}: {record.getMessage()}"

        data = _record_data(record)
        if data:
            message += " (" + " | ".join(f"{k}={v}" for k, v in data.items()) + ")"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


class StructuredLogger(logging.Logger):
    """Logger whose debug/info/warning/error take keyword context as structured data."""

    def _log_with_data(self, level: int, msg: str, args: tuple, exc_info: Any = None, **data: Any) -> None:
        if not self.isEnabledFor(level):
            return
        self._log(level, msg, args, exc_info=exc_info, extra={"extra_data": data or None})

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.DEBUG, msg, args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.INFO, msg, args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.WARNING, msg, args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_with_data(logging.ERROR, msg, args, **kwargs)


logging.setLoggerClass(StructuredLogger)


def setup_logging(app_settings: Settings | None = None) -> None:
    """
    Send logs to stdout: JSON in production, colored lines otherwise.
    DEBUG level when debug is on. Call once at startup.
    """
    app_settings = app_settings or get_settings()
    log_level = logging.DEBUG if app_settings.debug else logging.INFO

    if app_settings.environment == "production":
        formatter: logging.Formatter = StructuredFormatter(include_source=app_settings.debug)
    else:
        formatter = DevelopmentFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """
    Usage:
        logger = get_logger(__name__)
        logger.info("Order created", order_id="order-1f2e", order_number=12)
        logger.error("Listener failed", event_type="ORDER_CREATED", exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore


# Order lifecycle messages from the store
kitchen_logger = get_logger("order_core.kitchen")
