import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

APP_LOGGER_NAME = "homebase"

REQUEST_ID_CTX: contextvars.ContextVar[str] = contextvars.ContextVar(
    "homebase_request_id", default=""
)

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_RECORD_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "structured"}


def iso_utc(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": iso_utc(datetime.now(timezone.utc)),
            "level": record.levelname,
            "logger": record.name,
        }
        request_id = get_active_request_id()
        if request_id:
            entry["request_id"] = request_id

        structured = getattr(record, "structured", None)
        if structured:
            entry.update(structured)
        else:
            entry["event"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS and key not in entry:
                entry[key] = value

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Attach the JSON formatter to the application logger once."""
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(level.upper())
    if any(getattr(h, "_homebase", False) for h in logger.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    handler._homebase = True
    logger.addHandler(handler)


def set_active_request_id(value: str) -> contextvars.Token:
    return REQUEST_ID_CTX.set(value)


def reset_active_request_id(token: contextvars.Token) -> None:
    REQUEST_ID_CTX.reset(token)


def get_active_request_id() -> str:
    return REQUEST_ID_CTX.get() or ""


def log_structured(level: int, event: str, **fields: Any) -> None:
    logging.getLogger(APP_LOGGER_NAME).log(
        level, event, extra={"structured": {"event": event, **fields}}
    )
