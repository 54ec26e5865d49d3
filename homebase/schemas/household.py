from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from homebase.core.plans import PlanTier
from homebase.models.household import GameMode


class OnboardingHouseholdCreate(BaseModel):
    """Schema for creating the caller's household during onboarding."""
    name: str = Field(..., min_length=1, max_length=100, description="Household name")
    description: Optional[str] = Field(None, max_length=500, description="Household description")
    game_mode: GameMode = Field(GameMode.FAMILY, description="How rewards are shared")


class HouseholdResponse(BaseModel):
    """Schema for household response."""
    id: int
    uuid: str
    name: str
    description: Optional[str]
    plan: PlanTier
    game_mode: GameMode
    created_by_id: Optional[str]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CurrentHouseholdResponse(BaseModel):
    household: HouseholdResponse
    role: str


class HouseholdMemberResponse(BaseModel):
    """Schema for household member information."""
    user_id: str
    email: Optional[str]
    name: Optional[str]
    role: str = Field(..., description="Member role: 'owner', 'admin' or 'member'")
    xp: int
    coins: int
    joined_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
