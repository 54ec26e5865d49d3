from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.result import Result
from homebase.schemas.rewards import RedeemResult, RedemptionResponse, RewardCreate, RewardRedeem, RewardResponse
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.reward_service import RewardService

router = APIRouter(route_class=GatedRoute)

household_access = SecurityGate(require_household=True)


@router.get("", response_model=Result[List[RewardResponse]])
async def list_rewards(
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    rewards = RewardService(db).list_rewards(ctx.household)
    return Result.successful(data=[RewardResponse.model_validate(r) for r in rewards])


@router.post("", response_model=Result[RewardResponse], status_code=status.HTTP_201_CREATED)
async def create_reward(
    data: RewardCreate,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """Add a reward to the household catalogue. Owners and admins only."""
    reward = RewardService(db).create_reward(ctx.household, ctx.user_id, data)
    return Result.successful(data=RewardResponse.model_validate(reward))


@router.get("/redemptions", response_model=Result[List[RedemptionResponse]])
async def list_redemptions(
    mine: bool = Query(False, description="Only the caller's redemptions"),
    limit: int = Query(50, ge=1, le=200),
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    redemptions = RewardService(db).list_redemptions(
        ctx.household, user_id=ctx.user_id if mine else None, limit=limit
    )
    return Result.successful(data=[RedemptionResponse.model_validate(r) for r in redemptions])


@router.post("/{reward_id}/redeem", response_model=Result[RedeemResult])
async def redeem_reward(
    reward_id: int,
    data: RewardRedeem,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """Spend the caller's coins on a reward. A short balance is a 400 and changes nothing."""
    result = RewardService(db).redeem(ctx.household, ctx.user_id, reward_id, data.quantity)
    return Result.successful(data=result)
