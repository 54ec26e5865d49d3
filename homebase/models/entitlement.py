from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from datetime import date
from homebase.core.plans import PlanTier
from homebase.models.base import BaseModel


class Entitlement(BaseModel):
    """
    Per-household snapshot of plan-derived limits and the monthly action
    quota consumed by automated features.
    """

    __tablename__ = "entitlements"

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    tier: Mapped[PlanTier] = mapped_column(SQLEnum(PlanTier), nullable=False, default=PlanTier.FREE)

    # Calendar limits
    history_months: Mapped[int] = mapped_column(Integer, default=12, nullable=False)
    advanced_rrule: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    conflict_detection: Mapped[str] = mapped_column(String(20), default="none", nullable=False)  # none, basic or advanced
    google_import: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    digest_max_per_day: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    quiet_hours: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Monthly action quota
    quota_actions_per_month: Mapped[int] = mapped_column(Integer, default=400, nullable=False)
    quota_actions_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Usage resets on the first day the stored date is reached
    quota_reset_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, default=None)
