"""Structured logging for the address book utility."""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict
from uuid import uuid4


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def numeric(self) -> int:
        """Level number understood by the logging module."""
        if self is LogLevel.WARN:
            return logging.WARNING
        return getattr(logging, self.value.upper())


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "component": getattr(record, "component", "addressbook"),
            "message": record.getMessage(),
        }

        if hasattr(record, "operationId"):
            log_entry["operationId"] = record.operationId

        # Keyword fields passed through AddressBookLogger
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            log_entry.update(fields)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Plain one-line formatter: timestamp, level, component, message, then key=value fields."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        component = getattr(record, "component", "addressbook")
        line = f"{timestamp} {record.levelname.lower()} [{component}] {record.getMessage()}"

        fields = getattr(record, "fields", None)
        if isinstance(fields, dict) and fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


FORMATTERS = {
    "json": StructuredFormatter,
    "text": TextFormatter,
}


class AddressBookLogger:
    """Component logger with structured output."""

    def __init__(self, level: LogLevel = LogLevel.WARN, component: str = "addressbook",
                 destination: str = "stderr", fmt: str = "json"):
        self.component = component
        self.operation_id = str(uuid4())

        self.logger = logging.getLogger(f"addressbook.{component}")
        self.logger.setLevel(LogLevel(level).numeric)

        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        stream = sys.stdout if destination == "stdout" else sys.stderr
        handler = logging.StreamHandler(stream)
        handler.setFormatter(FORMATTERS[fmt]())
        self.logger.addHandler(handler)

        self.logger.propagate = False

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        extra: Dict[str, Any] = {
            "component": self.component,
            "operationId": self.operation_id,
            "fields": kwargs,
        }
        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)

    def warn(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, message, **kwargs)

    def mapping_decision(self, decision: str, xml_construct: str, json_output: str, **kwargs: Any) -> None:
        """Log how an XML construct was mapped to JSON or back."""
        self.debug(
            f"Mapping decision: {decision}",
            xmlConstruct=xml_construct,
            jsonOutput=json_output,
            **kwargs
        )

    def performance_metric(self, metric_name: str, value: Any, unit: str = "", **kwargs: Any) -> None:
        """Log performance metrics."""
        self.info(
            f"Performance: {metric_name}",
            metricName=metric_name,
            value=value,
            unit=unit,
            **kwargs
        )


def create_logger(level: LogLevel = LogLevel.WARN, component: str = "addressbook",
                  destination: str = "stderr", fmt: str = "json") -> AddressBookLogger:
    """Create a configured logger instance ("json" or "text" output)."""
    return AddressBookLogger(level=level, component=component, destination=destination, fmt=fmt)
