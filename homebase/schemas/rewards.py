from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class RewardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    points_cost: int = Field(..., gt=0, le=100000, description="Coins spent per unit")


class RewardResponse(BaseModel):
    id: int
    uuid: str
    household_id: int
    name: str
    description: Optional[str]
    points_cost: int
    is_active: bool
    created_by_id: Optional[str]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RewardRedeem(BaseModel):
    quantity: int = Field(1, gt=0, le=100)


class RedemptionResponse(BaseModel):
    id: int
    reward_id: int
    household_id: int
    user_id: Optional[str]
    quantity: int
    total_cost: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RedeemResult(BaseModel):
    redemption: RedemptionResponse
    remaining_coins: int
