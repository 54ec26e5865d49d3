from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.recipe import RecipeCreate, RecipeResponse
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.recipe_service import RecipeService

router = APIRouter(route_class=GatedRoute)

household_access = SecurityGate(require_household=True)


@router.get("", response_model=Result[List[RecipeResponse]])
async def list_recipes(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    recipes = RecipeService(db).list_recipes(ctx.household, skip=skip, limit=limit)
    return Result.successful(data=[RecipeResponse.model_validate(r) for r in recipes])


@router.post("", response_model=Result[RecipeResponse], status_code=status.HTTP_201_CREATED)
async def create_recipe(
    data: RecipeCreate,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """Create a recipe in the caller's household."""
    recipe = RecipeService(db).create_recipe(ctx.household, ctx.user_id, data)
    return Result.successful(data=RecipeResponse.model_validate(recipe))


@router.get("/{recipe_id}", response_model=Result[RecipeResponse])
async def get_recipe(
    recipe_id: int,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    recipe = RecipeService(db).get_recipe(ctx.household, recipe_id)
    return Result.successful(data=RecipeResponse.model_validate(recipe))


@router.delete("/{recipe_id}", response_model=Result[dict])
async def delete_recipe(
    recipe_id: int,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    RecipeService(db).delete_recipe(ctx.household, recipe_id)
    return Result.successful(data={"message": "Recipe deleted successfully"})
