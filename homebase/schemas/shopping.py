from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime


class ShoppingItemCreate(BaseModel):
    """Schema for adding an item to a shopping list."""
    name: str = Field(..., min_length=1, max_length=200, description="Item name")
    quantity: float = Field(1, gt=0, description="Quantity needed")
    unit: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=200, description="Additional notes")


class ShoppingItemUpdate(BaseModel):
    """Schema for updating a shopping item."""
    quantity: Optional[float] = Field(None, gt=0, description="Updated quantity")
    unit: Optional[str] = Field(None, max_length=50)
    is_complete: Optional[bool] = Field(None, description="Purchase status")
    notes: Optional[str] = Field(None, max_length=200)

    @field_validator("quantity", "is_complete")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may be omitted but not set to null")
        return v


class ShoppingItemResponse(BaseModel):
    """Schema for shopping item response."""
    id: int
    list_id: int
    name: str
    quantity: float
    unit: Optional[str]
    category: Optional[str]
    notes: Optional[str]
    is_complete: bool
    auto_added: bool
    pending_confirmation: bool
    source_recipe_id: Optional[int]
    added_by_id: Optional[str]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ShoppingListCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Shopping list name")


class ShoppingListUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    is_archived: Optional[bool] = None

    @field_validator("name", "is_archived")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may be omitted but not set to null")
        return v


class ShoppingListResponse(BaseModel):
    """Schema for shopping list response."""
    id: int
    uuid: str
    household_id: int
    name: str
    is_archived: bool
    created_by_id: Optional[str]
    created_at: Optional[datetime] = None
    items: List[ShoppingItemResponse] = []
    total_items: int = 0
    completed_items: int = 0

    model_config = ConfigDict(from_attributes=True)


class ConfirmItemsRequest(BaseModel):
    """Confirm items that the meal planner added automatically."""
    item_ids: List[int] = Field(..., min_length=1, max_length=500)


class GrocerySyncResult(BaseModel):
    list_id: int
    added: int = 0
    updated: int = 0
    auto_added: int = 0
    pending_confirmations: int = 0
