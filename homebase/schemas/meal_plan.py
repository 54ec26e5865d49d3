from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
from datetime import date
from homebase.models.meal_plan import MealSlot, Weekday
from homebase.schemas.shopping import GrocerySyncResult


class MealAssign(BaseModel):
    """
    Assign a recipe (or clear a slot when recipe_id is omitted) for one day
    and slot of a plan week.
    """
    week: date = Field(..., description="Any date in the plan week")
    day: Weekday
    slot: MealSlot
    recipe_id: Optional[int] = Field(None, description="Recipe to assign; null clears the slot")
    notes: Optional[str] = Field(None, max_length=500)
    also_add_to_list: bool = Field(False, description="Merge the recipe's ingredients into Groceries")
    auto_confirm: bool = Field(False, description="Skip confirmation for added grocery items")


class MealPlanClear(BaseModel):
    week: date


class MealPlanResponse(BaseModel):
    id: Optional[int] = None
    household_id: int
    week_start_date: date
    meals: Dict[str, Any]

    model_config = ConfigDict(from_attributes=True)


class MealAssignResponse(BaseModel):
    plan: MealPlanResponse
    ingredients: Optional[GrocerySyncResult] = None
