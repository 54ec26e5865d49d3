from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date
from homebase.core.plans import PlanTier


class EntitlementResponse(BaseModel):
    household_id: int
    tier: PlanTier
    history_months: int
    advanced_rrule: bool
    conflict_detection: str
    google_import: bool
    digest_max_per_day: int
    quiet_hours: bool
    quota_actions_per_month: int
    quota_actions_used: int
    quota_reset_date: Optional[date]
    features: List[str]


class FeatureFlagsResponse(BaseModel):
    plan: PlanTier
    flags: Dict[str, bool]
    upgrade_required: List[str]


class CanPerformActionResponse(BaseModel):
    allowed: bool


class SubscriptionUpdate(BaseModel):
    """Schema for changing a household's tier."""
    tier: PlanTier
    stripe_subscription_id: Optional[str] = Field(None, max_length=255)
