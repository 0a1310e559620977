"""
Structured logging for the backend.

Keyword arguments passed to any logger call become structured fields:

    logger.info("Ronda opened", ronda_id=12, table_id=5)

Production writes one JSON object per line; development writes a coloured
single line. Both include the request correlation ID when there is one.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

SERVICE_NAME = "ronda-api"

# Marks the handler installed by setup_logging so repeated calls replace it
_HANDLER_MARK = "_ronda_handler"


def _record_fields(record: logging.LogRecord) -> tuple[str | None, dict[str, Any]]:
    """(request_id, structured fields) carried by a record."""
    request_id = getattr(record, "request_id", None)
    if request_id == "-":
        request_id = None
    return request_id, getattr(record, "extra_data", None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON document per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        request_id, fields = _record_fields(record)
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if request_id:
            payload["request_id"] = request_id
        if fields:
            payload["data"] = fields
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            payload["at"] = f"{record.pathname}:{record.lineno}"
        return json.dumps(payload, default=str, ensure_ascii=False)


class DevelopmentFormatter(logging.Formatter):
    """Readable single-line output: time, level, request, logger, message, fields."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{self.RESET}" if self.use_color else text

    def format(self, record: logging.LogRecord) -> str:
        request_id, fields = _record_fields(record)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        level = self._paint(f"{record.levelname:<8}", self.LEVEL_COLORS.get(record.levelno, ""))

        parts = [clock, level]
        if request_id:
            parts.append(self._paint(f"[{request_id[:8]}]", self.DIM))
        parts.append(f"{record.name}: {record.getMessage()}")
        line = " ".join(parts)

        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger that turns call keyword arguments into `record.extra_data`."""

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **fields: Any,
    ) -> None:
        extra = dict(extra or {})
        extra["extra_data"] = fields or None
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """
    Install the application handler on the root logger.

    Safe to call more than once (the test client runs the lifespan per test).
    """
    # Import here to avoid circular imports
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = logging.getLevelName(settings.log_level.upper()) if settings.log_level else None
    if not isinstance(level, int):
        level = logging.DEBUG if settings.debug else logging.INFO

    use_json = settings.log_format == "json" or (
        settings.log_format is None and settings.environment == "production"
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        StructuredFormatter() if use_json else DevelopmentFormatter(use_color=sys.stdout.isatty())
    )
    setattr(handler, _HANDLER_MARK, True)

    root = logging.getLogger()
    root.setLevel(level)
    for existing in [h for h in root.handlers if getattr(h, _HANDLER_MARK, False)]:
        root.removeHandler(existing)
    root.addHandler(handler)

    # Quiet third-party chatter
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a logger instance with the given name.

    Usage:
        from shared.config.logging import get_logger
        logger = get_logger(__name__)

        logger.info("Ronda opened", ronda_id=12, table_id=5)
        logger.error("Failed to close table", table_id=5, exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore


def mask_email(email: str | None) -> str:
    """Mask an address for logs: juan.perez@ronda.com -> ju***@ronda.com."""
    if not email or "@" not in email:
        return "<no-email>" if not email else "***"
    local, domain = email.split("@", 1)
    return f"{local[:2] if len(local) > 2 else local[:1]}***@{domain}"


# Loggers per concern
api_logger = get_logger("ronda_api")
floor_logger = get_logger("ronda_api.floor")
billing_logger = get_logger("ronda_api.billing")
reservations_logger = get_logger("ronda_api.reservations")
