from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.result import Result
from homebase.schemas.shopping import (
    ConfirmItemsRequest,
    ShoppingItemCreate,
    ShoppingItemResponse,
    ShoppingItemUpdate,
    ShoppingListCreate,
    ShoppingListResponse,
    ShoppingListUpdate,
)
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.shopping_service import ShoppingService

router = APIRouter(route_class=GatedRoute)

shopping_access = SecurityGate(rate_limit="shopping", require_household=True)


@router.get("", response_model=Result[List[ShoppingListResponse]])
async def list_shopping_lists(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    lists = ShoppingService(db).list_lists(ctx.household, skip=skip, limit=limit)
    return Result.successful(data=[ShoppingListResponse.model_validate(l) for l in lists])


@router.post("", response_model=Result[ShoppingListResponse], status_code=status.HTTP_201_CREATED)
async def create_shopping_list(
    data: ShoppingListCreate,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService(db).create_list(ctx.household, ctx.user_id, data)
    return Result.successful(data=ShoppingListResponse.model_validate(shopping_list))


@router.post("/confirm-items", response_model=Result[List[ShoppingItemResponse]])
async def confirm_items(
    data: ConfirmItemsRequest,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    """Confirm items the meal planner added. Every id must belong to the caller's household."""
    items = ShoppingService(db).confirm_items(ctx.household, data.item_ids)
    return Result.successful(data=[ShoppingItemResponse.model_validate(i) for i in items])


@router.get("/{list_id}", response_model=Result[ShoppingListResponse])
async def get_shopping_list(
    list_id: int,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService(db).get_list(ctx.household, list_id)
    return Result.successful(data=ShoppingListResponse.model_validate(shopping_list))


@router.patch("/{list_id}", response_model=Result[ShoppingListResponse])
async def update_shopping_list(
    list_id: int,
    data: ShoppingListUpdate,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService(db).update_list(ctx.household, list_id, data)
    return Result.successful(data=ShoppingListResponse.model_validate(shopping_list))


@router.delete("/{list_id}", response_model=Result[dict])
async def delete_shopping_list(
    list_id: int,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    """Delete a list and its items. Lists of other households are reported as not found."""
    ShoppingService(db).delete_list(ctx.household, list_id)
    return Result.successful(data={"message": "Shopping list deleted successfully"})


@router.post(
    "/{list_id}/items",
    response_model=Result[ShoppingItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_item(
    list_id: int,
    data: ShoppingItemCreate,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    item = ShoppingService(db).add_item(ctx.household, ctx.user_id, list_id, data)
    return Result.successful(data=ShoppingItemResponse.model_validate(item))


@router.patch("/{list_id}/items/{item_id}", response_model=Result[ShoppingItemResponse])
async def update_item(
    list_id: int,
    item_id: int,
    data: ShoppingItemUpdate,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    item = ShoppingService(db).update_item(ctx.household, list_id, item_id, data)
    return Result.successful(data=ShoppingItemResponse.model_validate(item))


@router.delete("/{list_id}/items/{item_id}", response_model=Result[dict])
async def delete_item(
    list_id: int,
    item_id: int,
    ctx: SecurityContext = Depends(shopping_access),
    db: Session = Depends(get_db),
):
    ShoppingService(db).delete_item(ctx.household, list_id, item_id)
    return Result.successful(data={"message": "Item removed successfully"})
