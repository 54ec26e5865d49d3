from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class UserResponse(BaseModel):
    """Schema for user response."""
    id: str
    email: Optional[str]
    name: Optional[str]
    role: str
    xp: int
    coins: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MembershipResponse(BaseModel):
    household_id: int
    role: str
    plan: str


class MeResponse(BaseModel):
    user: UserResponse
    membership: Optional[MembershipResponse] = None


class UserSyncResponse(BaseModel):
    """Result of syncing the signed-in identity into the local store."""
    user: UserResponse
    household_id: int
    role: str
    created_household: bool = Field(..., description="True when this sync created the household")


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    name: Optional[str]
    xp: int
    coins: int
