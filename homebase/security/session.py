from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request
from jwt.exceptions import PyJWTError
from pydantic import BaseModel

from homebase.config import settings
from homebase.core.exception import AuthenticationException


class Identity(BaseModel):
    """A verified caller as asserted by the identity provider."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None


def extract_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    cookie = request.cookies.get(settings.AUTH_SESSION_COOKIE)
    return cookie or None


def decode_session_token(token: str) -> Optional[dict]:
    """
    Verify a session token.

    Returns:
        Decoded claims or None if the token is invalid or expired
    """
    if not settings.AUTH_JWT_SECRET:
        return None
    options = {"require": ["sub"], "verify_aud": bool(settings.AUTH_JWT_AUDIENCE)}
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            issuer=settings.AUTH_JWT_ISSUER,
            options=options,
        )
    except PyJWTError:
        return None


def create_session_token(identity: Identity, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a session token in the identity provider's format. Used for local
    development and tests; production tokens come from the provider.
    """
    now = datetime.now(timezone.utc)
    claims = {
        "sub": identity.id,
        "email": identity.email,
        "name": identity.name,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
    }
    if settings.AUTH_JWT_ISSUER:
        claims["iss"] = settings.AUTH_JWT_ISSUER
    if settings.AUTH_JWT_AUDIENCE:
        claims["aud"] = settings.AUTH_JWT_AUDIENCE
    return jwt.encode(claims, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


class SessionResolver:
    """
    Turns a request into an Identity or a definite 401. No refresh or retry
    happens here; that belongs to the identity provider's client.
    """

    def resolve_optional(self, request: Request) -> Optional[Identity]:
        token = extract_token(request)
        if not token:
            return None
        claims = decode_session_token(token)
        if claims is None:
            return None
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return Identity(id=subject, email=claims.get("email"), name=claims.get("name"))

    def resolve(self, request: Request) -> Identity:
        identity = self.resolve_optional(request)
        if identity is None:
            raise AuthenticationException()
        return identity
