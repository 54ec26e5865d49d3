"""
Security event channel.

Events are written as sanitized JSON lines to the ``homebase.security``
logger, which does not propagate to the application logger so that audit
tooling can consume it on its own.
"""
import hashlib
import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from homebase.config import settings
from homebase.core.observability import get_active_request_id, iso_utc

logger = logging.getLogger(__name__)

SECURITY_LOGGER_NAME = "homebase.security"
MAX_BYTES = 10 * 1024 * 1024
MAX_FILES = 5
MAX_LINE_LENGTH = 8192

EVENT_SENSITIVE_KEYS = {
    "authorization",
    "cookie",
    "token",
    "password",
    "secret",
    "csrf",
}

# Event names
AUTH_MISSING = "AUTH_MISSING"
AUTH_INVALID = "AUTH_INVALID"
CSRF_MISSING = "CSRF_MISSING"
CSRF_INVALID = "CSRF_INVALID"
RATE_LIMITED = "RATE_LIMITED"
AUTHZ_DENY = "AUTHZ_DENY"
HANDLER_ERROR = "HANDLER_ERROR"


def get_security_logger() -> logging.Logger:
    security_logger = logging.getLogger(SECURITY_LOGGER_NAME)
    if security_logger.handlers:
        return security_logger

    security_logger.propagate = False
    security_logger.setLevel(logging.INFO)

    handler: Optional[logging.Handler] = None
    if settings.SECURITY_LOG_DIR:
        try:
            log_dir = Path(settings.SECURITY_LOG_DIR)
            log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                log_dir / "security_events.jsonl",
                maxBytes=MAX_BYTES,
                backupCount=MAX_FILES,
                encoding="utf-8",
            )
        except OSError:
            logger.warning(
                "Security log directory unusable, falling back to stderr",
                extra={"security_log_dir": settings.SECURITY_LOG_DIR},
            )
            handler = None
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    security_logger.addHandler(handler)
    return security_logger


def sanitize_str(value: Optional[Any], max_len: int = 256) -> str:
    if value is None:
        return ""
    s = str(value).replace("\r", " ").replace("\n", " ").strip()
    return s[:max_len]


def safe_hash(value: Optional[str]) -> str:
    if not value:
        return ""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _scrub(key: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    lower_key = key.lower()
    if any(term in lower_key for term in EVENT_SENSITIVE_KEYS):
        return "REDACTED"
    if "email" in lower_key:
        return safe_hash(value)
    return sanitize_str(value)


def _scrub_mapping(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {sanitize_str(k): _scrub(str(k), v) for k, v in (data or {}).items()}


def emit_security_event(
    event: str,
    *,
    severity: str = "WARNING",
    outcome: str = "DENY",
    actor: Optional[Dict[str, Any]] = None,
    source: Optional[Dict[str, Any]] = None,
    target: Optional[Dict[str, Any]] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload = {
        "ts": iso_utc(datetime.now(timezone.utc)),
        "event": sanitize_str(event),
        "severity": sanitize_str(severity),
        "request_id": get_active_request_id(),
        "actor": _scrub_mapping(actor),
        "source": _scrub_mapping(source),
        "target": _scrub_mapping(target),
        "outcome": sanitize_str(outcome),
        "meta": _scrub_mapping(meta),
    }
    line = json.dumps(payload, ensure_ascii=True, separators=(",", ":"), default=str)
    level = logging.getLevelName(payload["severity"])
    get_security_logger().log(
        level if isinstance(level, int) else logging.WARNING,
        line[:MAX_LINE_LENGTH],
    )
    return payload


def request_source(request) -> Dict[str, Any]:
    """Describe where a request came from, for the `source` block."""
    return {
        "ip": client_address(request),
        "method": request.method,
        "path": request.url.path,
        "user_agent": request.headers.get("user-agent", ""),
    }


def client_address(request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip", "")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"