from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.household import (
    CurrentHouseholdResponse,
    HouseholdMemberResponse,
    HouseholdResponse,
)
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.household_service import HouseholdService

router = APIRouter(route_class=GatedRoute)

household_access = SecurityGate(require_household=True)


@router.get("/current", response_model=Result[CurrentHouseholdResponse])
async def get_current_household(
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """Get the caller's household and their role in it."""
    household = HouseholdService(db).get_current(ctx.household)
    return Result.successful(
        data=CurrentHouseholdResponse(
            household=HouseholdResponse.model_validate(household),
            role=ctx.household.role,
        )
    )


@router.get("/current/members", response_model=Result[List[HouseholdMemberResponse]])
async def get_members(
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """Get all members of the caller's household."""
    members = HouseholdService(db).get_members(ctx.household)
    return Result.successful(data=[HouseholdMemberResponse.model_validate(m) for m in members])
