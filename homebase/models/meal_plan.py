from sqlalchemy import Date, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from typing import Any, Dict
from datetime import date
import enum
from homebase.models.base import BaseModel


class Weekday(str, enum.Enum):
    """Days of a plan week, Sunday first"""

    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


class MealSlot(str, enum.Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


def empty_week() -> Dict[str, Dict[str, Any]]:
    return {day.value: {slot.value: None for slot in MealSlot} for day in Weekday}


class MealPlan(BaseModel):
    """
    One row per household and week. `meals` maps weekday to slot to the
    assigned entry, e.g. {"monday": {"dinner": {"recipe_id": 4, ...}}}.
    """

    __tablename__ = "meal_plans"
    __table_args__ = (
        UniqueConstraint("household_id", "week_start_date", name="uq_meal_plans_household_week"),
    )

    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    meals: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=empty_week)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
