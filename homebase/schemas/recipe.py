from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime


class RecipeIngredient(BaseModel):
    """One ingredient line of a recipe."""
    name: str = Field(..., min_length=1, max_length=200)
    amount: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=50)


class RecipeCreate(BaseModel):
    """Schema for creating a recipe. Any household_id sent by the client is ignored."""
    title: str = Field(..., min_length=1, max_length=200, description="Recipe title")
    description: Optional[str] = Field(None, max_length=2000)
    instructions: Optional[str] = None
    servings: Optional[int] = Field(None, gt=0, le=100)
    prep_minutes: Optional[int] = Field(None, ge=0)
    cook_minutes: Optional[int] = Field(None, ge=0)
    ingredients: List[RecipeIngredient] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v


class RecipeResponse(BaseModel):
    """Schema for recipe response."""
    id: int
    uuid: str
    household_id: int
    title: str
    description: Optional[str]
    instructions: Optional[str]
    servings: Optional[int]
    prep_minutes: Optional[int]
    cook_minutes: Optional[int]
    ingredients: List[RecipeIngredient]
    created_by_id: Optional[str]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
