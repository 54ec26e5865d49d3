from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.meal_plan import MealAssign, MealAssignResponse, MealPlanClear, MealPlanResponse
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.meal_plan_service import MealPlanService

router = APIRouter(route_class=GatedRoute)

planner_access = SecurityGate(rate_limit="meal-planner", require_household=True)


@router.get("", response_model=Result[MealPlanResponse])
async def get_week(
    week: Optional[date] = Query(None, description="Any date in the plan week, defaults to today"),
    ctx: SecurityContext = Depends(planner_access),
    db: Session = Depends(get_db),
):
    plan = MealPlanService(db).get_week(ctx.household, week or date.today())
    return Result.successful(data=plan)


@router.post("/assign", response_model=Result[MealAssignResponse])
async def assign_meal(
    data: MealAssign,
    ctx: SecurityContext = Depends(planner_access),
    db: Session = Depends(get_db),
):
    """
    Assign a recipe to a slot and optionally merge its ingredients into the
    Groceries list.

    When the slot is saved but the grocery step fails, the response is 207
    with the saved plan in `data` and the failed step in `details`.
    """
    result = MealPlanService(db).assign(ctx.household, ctx.user_id, data)
    return Result.successful(data=result)


@router.post("/clear", response_model=Result[MealPlanResponse])
async def clear_week(
    data: MealPlanClear,
    ctx: SecurityContext = Depends(planner_access),
    db: Session = Depends(get_db),
):
    plan = MealPlanService(db).clear_week(ctx.household, data.week)
    return Result.successful(data=plan)
