from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.calendar import ConflictResolve, ConflictResponse
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.calendar_service import ConflictService

router = APIRouter(route_class=GatedRoute)

household_access = SecurityGate(require_household=True)


@router.get("", response_model=Result[List[ConflictResponse]])
async def list_conflicts(
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """List unresolved calendar conflicts of the caller's household."""
    conflicts = ConflictService(db).list_open(ctx.household)
    return Result.successful(data=[ConflictResponse.model_validate(c) for c in conflicts])


@router.post("/{conflict_id}/resolve", response_model=Result[ConflictResponse])
async def resolve_conflict(
    conflict_id: int,
    data: ConflictResolve,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    conflict = ConflictService(db).resolve(ctx.household, ctx.user_id, conflict_id, data)
    return Result.successful(data=ConflictResponse.model_validate(conflict))
