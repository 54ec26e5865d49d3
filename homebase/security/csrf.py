"""
Session-bound CSRF tokens.

A token is ``<user_id>:<nonce>:<issued_ms>:<signature>`` where the signature
is an HMAC-SHA256 over the first three parts. Tokens are stateless; they are
checked on state-changing requests only.
"""
import hashlib
import hmac
import secrets
import time
from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import Request

from homebase.config import settings

CSRF_HEADER = "X-CSRF-Token"
PROTECTED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _secret() -> bytes:
    # Fall back to the session secret so a missing CSRF_SECRET never means "no check".
    return (settings.CSRF_SECRET or settings.AUTH_JWT_SECRET).encode("utf-8")


def _sign(payload: str) -> str:
    return hmac.new(_secret(), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_csrf_token(user_id: str, now_ms: Optional[int] = None) -> Tuple[str, datetime]:
    """
    Issue a token bound to `user_id`.

    Returns:
        The token and its expiry time
    """
    issued_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    payload = f"{user_id}:{secrets.token_hex(32)}:{issued_ms}"
    expires_at = datetime.fromtimestamp(
        issued_ms / 1000 + settings.CSRF_TOKEN_TTL_SECONDS, tz=timezone.utc
    )
    return f"{payload}:{_sign(payload)}", expires_at


def validate_csrf_token(token: Optional[str], user_id: str, now_ms: Optional[int] = None) -> bool:
    if not token or not _secret():
        return False

    # The user id itself may contain ':' so split from the right.
    parts = token.rsplit(":", 3)
    if len(parts) != 4:
        return False
    token_user, nonce, issued, signature = parts
    if not nonce:
        return False

    # compare_digest only accepts ASCII str, so compare the encoded bytes.
    expected = _sign(f"{token_user}:{nonce}:{issued}")
    if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
        return False
    if not hmac.compare_digest(token_user.encode("utf-8"), user_id.encode("utf-8")):
        return False

    try:
        issued_ms = int(issued)
    except ValueError:
        return False
    now = now_ms if now_ms is not None else int(time.time() * 1000)
    age_ms = now - issued_ms
    return 0 <= age_ms <= settings.CSRF_TOKEN_TTL_SECONDS * 1000


def requires_csrf(request: Request) -> bool:
    return request.method.upper() in PROTECTED_METHODS


def extract_csrf_token(request: Request) -> Optional[str]:
    return request.headers.get(CSRF_HEADER) or None
