from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from homebase.core.exception import ResourceNotFoundException
from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.repositories.household_repository import HouseholdRepository
from homebase.schemas.result import Result
from homebase.schemas.user import MeResponse, MembershipResponse, UserResponse, UserSyncResponse
from homebase.security.guard import SecurityContext, SecurityGate, with_security
from homebase.services.user_service import UserService

router = APIRouter(route_class=GatedRoute)


@router.post("/sync", response_model=Result[UserSyncResponse])
async def sync_user(request: Request, db: Session = Depends(get_db)):
    """
    Mirror the signed-in identity locally and make sure it has a household.
    Called by the client right after sign-in, before it holds a CSRF token.
    """

    async def handler(request, identity, context):
        user, household, created = UserService(db).sync(identity)
        return Result.successful(
            data=UserSyncResponse(
                user=UserResponse.model_validate(user),
                household_id=household.household_id,
                role=household.role,
                created_household=created,
            )
        )

    return await with_security(request, handler, db, require_csrf=False, rate_limit="auth")


@router.get("/me", response_model=Result[MeResponse])
async def get_me(
    ctx: SecurityContext = Depends(SecurityGate()),
    db: Session = Depends(get_db),
):
    """Get the current user and their membership, if any."""
    user = UserService(db).get_user(ctx.identity.id)
    if user is None:
        raise ResourceNotFoundException("User", message="User not synced")

    membership = None
    row = HouseholdRepository(db).get_membership(user.id)
    if row is not None:
        membership = MembershipResponse(
            household_id=row.household_id, role=row.role, plan=row.plan.value
        )
    return Result.successful(
        data=MeResponse(user=UserResponse.model_validate(user), membership=membership)
    )
