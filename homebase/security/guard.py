"""
Request security gate.

Every protected route goes through the same fixed sequence:

1. rate limit, keyed on the client address, before any auth work;
2. authentication (401);
3. CSRF on state-changing methods, bound to the authenticated user (403);
4. optional household resolution (404 when the caller has none);
5. the handler itself. Unexpected handler errors surface as a generic 500.

`SecurityGate` is the FastAPI dependency form; `with_security` wraps a
plain handler coroutine with the same steps.
"""
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from homebase.core.exception import (
    AuthenticationException,
    CSRFException,
    CustomException,
    InternalServerException,
    RateLimitException,
)
from homebase.database import get_db
from homebase.security import events
from homebase.security.csrf import extract_csrf_token, requires_csrf, validate_csrf_token
from homebase.security.membership import HouseholdContext, MembershipResolver
from homebase.security.rate_limit import RateLimitDecision, RateLimiter
from homebase.security.session import Identity, SessionResolver, extract_token

logger = logging.getLogger(__name__)


class SecurityContext:
    """What the gate established about the current request."""

    def __init__(
        self,
        request: Request,
        identity: Optional[Identity],
        household: Optional[HouseholdContext] = None,
        rate_limit: Optional[RateLimitDecision] = None,
    ):
        self.request = request
        self.identity = identity
        self.household = household
        self.rate_limit = rate_limit

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.id if self.identity else None

    @property
    def household_id(self) -> Optional[int]:
        return self.household.household_id if self.household else None


class SecurityGate:
    """
    Usage:
        @router.post("")
        async def create(ctx: SecurityContext = Depends(SecurityGate(rate_limit="shopping"))):
            ...
    """

    def __init__(
        self,
        require_auth: bool = True,
        require_csrf: bool = True,
        rate_limit: Optional[str] = "api",
        require_household: bool = False,
    ):
        self.require_auth = require_auth or require_household
        self.require_csrf = require_csrf
        self.rate_limit = rate_limit
        self.require_household = require_household
        self.session_resolver = SessionResolver()

    async def __call__(self, request: Request, db: Session = Depends(get_db)) -> SecurityContext:
        return self.check(request, db)

    def check(self, request: Request, db: Session) -> SecurityContext:
        decision = self._check_rate_limit(request, db)
        identity = self._authenticate(request)
        self._check_csrf(request, identity)

        household = None
        if self.require_household:
            household = MembershipResolver(db).resolve(identity.id)

        return SecurityContext(request, identity, household=household, rate_limit=decision)

    def _check_rate_limit(self, request: Request, db: Session) -> Optional[RateLimitDecision]:
        if self.rate_limit is None:
            return None
        try:
            return RateLimiter(db).enforce(
                events.client_address(request), self.rate_limit, request.url.path
            )
        except RateLimitException:
            events.emit_security_event(
                events.RATE_LIMITED,
                source=events.request_source(request),
                meta={"rate_limit_key": self.rate_limit},
            )
            raise

    def _authenticate(self, request: Request) -> Optional[Identity]:
        identity = self.session_resolver.resolve_optional(request)
        if identity is None and self.require_auth:
            event = events.AUTH_INVALID if extract_token(request) else events.AUTH_MISSING
            events.emit_security_event(event, source=events.request_source(request))
            raise AuthenticationException()
        return identity

    def _check_csrf(self, request: Request, identity: Optional[Identity]) -> None:
        if not self.require_csrf or not requires_csrf(request):
            return

        token = extract_csrf_token(request)
        actor = {"user_id": identity.id if identity else None}
        if not token:
            events.emit_security_event(
                events.CSRF_MISSING, actor=actor, source=events.request_source(request)
            )
            raise CSRFException("CSRF token is required for this operation")

        # A token can only be bound to a known user.
        if identity is None or not validate_csrf_token(token, identity.id):
            events.emit_security_event(
                events.CSRF_INVALID, actor=actor, source=events.request_source(request)
            )
            raise CSRFException()


Handler = Callable[[Request, Optional[Identity], SecurityContext], Union[Any, Awaitable[Any]]]


async def with_security(
    request: Request,
    handler: Handler,
    db: Session,
    *,
    require_auth: bool = True,
    require_csrf: bool = True,
    rate_limit: Optional[str] = "api",
    require_household: bool = False,
) -> Any:
    """
    Run `handler(request, identity, context)` behind the security gate.

    Application exceptions keep their status. Anything else is logged with
    full detail and replaced by a generic 500.
    """
    gate = SecurityGate(
        require_auth=require_auth,
        require_csrf=require_csrf,
        rate_limit=rate_limit,
        require_household=require_household,
    )
    context = gate.check(request, db)

    try:
        result = handler(request, context.identity, context)
        if inspect.isawaitable(result):
            result = await result
        return result
    except (CustomException, ValidationError):
        raise
    except Exception as ex:
        db.rollback()
        logger.error(
            f"Handler failed on {request.method} {request.url.path}",
            exc_info=ex,
            extra={"path": request.url.path, "method": request.method, "user_id": context.user_id},
        )
        events.emit_security_event(
            events.HANDLER_ERROR,
            severity="ERROR",
            outcome="ERROR",
            actor={"user_id": context.user_id},
            source=events.request_source(request),
            meta={"error_type": type(ex).__name__},
        )
        raise InternalServerException()
