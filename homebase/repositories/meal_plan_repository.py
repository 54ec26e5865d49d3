from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from homebase.models.meal_plan import MealPlan
from homebase.repositories.repository import HouseholdScopedRepository


class MealPlanRepository(HouseholdScopedRepository[MealPlan]):
    """Repository for weekly meal plans."""

    def __init__(self, db: Session):
        super().__init__(MealPlan, db)

    def get_for_week(self, household_id: int, week_start: date) -> Optional[MealPlan]:
        return (
            self.db.query(MealPlan)
            .filter(
                MealPlan.household_id == household_id,
                MealPlan.week_start_date == week_start,
            )
            .first()
        )
