from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.result import Result
from homebase.schemas.user import LeaderboardEntry
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.user_service import UserService

router = APIRouter(route_class=GatedRoute)


@router.get("", response_model=Result[List[LeaderboardEntry]])
async def get_leaderboard(
    limit: int = Query(50, ge=1, le=100),
    ctx: SecurityContext = Depends(SecurityGate(require_household=True)),
    db: Session = Depends(get_db),
):
    """Rank household members by XP."""
    entries = UserService(db).leaderboard(ctx.household_id, limit=limit)
    return Result.successful(data=entries)
