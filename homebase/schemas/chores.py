from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class ChoreCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    assigned_to_id: Optional[str] = Field(None, description="Household member responsible for the chore")
    due_at: Optional[datetime] = None
    recurrence: Optional[str] = Field(None, max_length=200)
    xp_reward: int = Field(10, gt=0, le=1000)
    coin_reward: int = Field(1, ge=0, le=1000)


class ChoreResponse(BaseModel):
    id: int
    uuid: str
    household_id: int
    title: str
    description: Optional[str]
    assigned_to_id: Optional[str]
    due_at: Optional[datetime]
    recurrence: Optional[str]
    xp_reward: int
    coin_reward: int
    created_by_id: Optional[str]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChoreCompletionResponse(BaseModel):
    id: int
    chore_id: int
    household_id: int
    completed_by_id: Optional[str]
    xp_earned: int
    coins_earned: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChoreCompleteResult(BaseModel):
    """A recorded completion and the completer's balances after the award."""
    completion: ChoreCompletionResponse
    xp: int
    coins: int
