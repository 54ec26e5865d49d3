from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from homebase.core.routing import GatedRoute
from homebase.core.plans import feature_flags, upgrade_required_features
from homebase.database import get_db
from homebase.schemas.entitlement import (
    CanPerformActionResponse,
    EntitlementResponse,
    FeatureFlagsResponse,
    SubscriptionUpdate,
)
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.security.ownership import PRIVILEGED_ROLES, require_household_match, require_role
from homebase.services.entitlement_service import EntitlementService

router = APIRouter(route_class=GatedRoute)

household_access = SecurityGate(require_household=True)


@router.get("/entitlements", response_model=Result[EntitlementResponse])
async def get_entitlements(
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """Get the limits and quota usage of the caller's household."""
    snapshot = EntitlementService(db).snapshot(ctx.household_id)
    return Result.successful(data=EntitlementResponse(**snapshot))


@router.get("/feature-flags", response_model=Result[FeatureFlagsResponse])
async def get_feature_flags(ctx: SecurityContext = Depends(household_access)):
    """Evaluate every feature against the household plan. No database access beyond membership."""
    plan = ctx.household.plan
    return Result.successful(
        data=FeatureFlagsResponse(
            plan=plan,
            flags=feature_flags(plan),
            upgrade_required=[f.value for f in upgrade_required_features(plan)],
        )
    )


@router.post("/entitlements/can-perform-action", response_model=Result[CanPerformActionResponse])
async def can_perform_action(
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    allowed = EntitlementService(db).can_perform_action(ctx.household_id)
    return Result.successful(data=CanPerformActionResponse(allowed=allowed))


@router.post("/entitlements/{household_id}/update-subscription", response_model=Result[EntitlementResponse])
async def update_subscription(
    household_id: int,
    data: SubscriptionUpdate,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """
    Change the household tier. Only owners and admins of that household may
    do this; any other household id is reported as not found.
    """
    require_household_match(ctx.household, household_id)
    require_role(ctx.household, *PRIVILEGED_ROLES, user_id=ctx.user_id, action="subscription.update")

    snapshot = EntitlementService(db).update_for_subscription(
        household_id,
        data.tier,
        user_id=ctx.user_id,
        stripe_subscription_id=data.stripe_subscription_id,
    )
    return Result.successful(data=EntitlementResponse(**snapshot))
