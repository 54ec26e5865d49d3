from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.chores import ChoreCompleteResult, ChoreCompletionResponse, ChoreCreate, ChoreResponse
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.chore_service import ChoreService

router = APIRouter(route_class=GatedRoute)

chores_access = SecurityGate(rate_limit="chores", require_household=True)


@router.get("", response_model=Result[List[ChoreResponse]])
async def list_chores(
    assigned_to: Optional[str] = Query(None, description="Only chores assigned to this member"),
    ctx: SecurityContext = Depends(chores_access),
    db: Session = Depends(get_db),
):
    """List chores by due date, undated chores last."""
    chores = ChoreService(db).list_chores(ctx.household, assigned_to_id=assigned_to)
    return Result.successful(data=[ChoreResponse.model_validate(c) for c in chores])


@router.post("", response_model=Result[ChoreResponse], status_code=status.HTTP_201_CREATED)
async def create_chore(
    data: ChoreCreate,
    ctx: SecurityContext = Depends(chores_access),
    db: Session = Depends(get_db),
):
    chore = ChoreService(db).create_chore(ctx.household, ctx.user_id, data)
    return Result.successful(data=ChoreResponse.model_validate(chore))


@router.get("/completions", response_model=Result[List[ChoreCompletionResponse]])
async def list_completions(
    limit: int = Query(50, ge=1, le=200),
    ctx: SecurityContext = Depends(chores_access),
    db: Session = Depends(get_db),
):
    completions = ChoreService(db).list_completions(ctx.household, limit=limit)
    return Result.successful(data=[ChoreCompletionResponse.model_validate(c) for c in completions])


@router.post(
    "/{chore_id}/complete",
    response_model=Result[ChoreCompleteResult],
    status_code=status.HTTP_201_CREATED,
)
async def complete_chore(
    chore_id: int,
    ctx: SecurityContext = Depends(chores_access),
    db: Session = Depends(get_db),
):
    """Record a completion by the caller and award the chore's XP and coins."""
    result = ChoreService(db).complete_chore(ctx.household, ctx.user_id, chore_id)
    return Result.successful(data=result)


@router.delete("/{chore_id}", response_model=Result[dict])
async def delete_chore(
    chore_id: int,
    ctx: SecurityContext = Depends(chores_access),
    db: Session = Depends(get_db),
):
    ChoreService(db).delete_chore(ctx.household, ctx.user_id, chore_id)
    return Result.successful(data={"message": "Chore deleted successfully"})
