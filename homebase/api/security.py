from fastapi import APIRouter, Depends

from homebase.core.routing import GatedRoute
from homebase.schemas.result import Result
from homebase.schemas.security import CsrfTokenResponse
from homebase.security.csrf import generate_csrf_token
from homebase.security.guard import SecurityContext, SecurityGate

router = APIRouter(route_class=GatedRoute)


@router.get("/csrf-token", response_model=Result[CsrfTokenResponse])
async def issue_csrf_token(
    ctx: SecurityContext = Depends(SecurityGate(require_csrf=False, rate_limit="auth")),
):
    """Issue a CSRF token bound to the caller. Clients cache it until expiry."""
    token, expires_at = generate_csrf_token(ctx.identity.id)
    return Result.successful(data=CsrfTokenResponse(csrf_token=token, expires_at=expires_at))
