from sqlalchemy import String, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
import enum
from homebase.core.plans import PlanTier
from homebase.models.base import BaseModel
from homebase.models.associations import household_members

if TYPE_CHECKING:
    from homebase.models.user import User


class GameMode(str, enum.Enum):
    """How rewards are shared inside a household"""

    SINGLE = "single"
    COUPLE = "couple"
    FAMILY = "family"
    ROOMMATES = "roommates"
    CUSTOM = "custom"


class Household(BaseModel):
    """
    The tenant boundary. Every household-owned record carries a
    household_id pointing here.
    """

    __tablename__ = "households"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, default=None
    )
    plan: Mapped[PlanTier] = mapped_column(
        SQLEnum(PlanTier), nullable=False, default=PlanTier.FREE
    )
    game_mode: Mapped[GameMode] = mapped_column(
        SQLEnum(GameMode), nullable=False, default=GameMode.FAMILY
    )

    # Billing provider reference
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    created_by_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    members: Mapped[List["User"]] = relationship(
        "User", secondary=household_members, back_populates="households", lazy="selectin"
    )
