import copy
import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from homebase.core.exception import CustomException, PartialFailureException, QuotaExceededException
from homebase.models.meal_plan import MealPlan, empty_week
from homebase.repositories.meal_plan_repository import MealPlanRepository
from homebase.repositories.recipe_repository import RecipeRepository
from homebase.schemas.meal_plan import MealAssign, MealAssignResponse, MealPlanResponse
from homebase.security.membership import HouseholdContext
from homebase.security.ownership import get_owned_or_404
from homebase.services.audit_service import AuditService
from homebase.services.entitlement_service import EntitlementService
from homebase.services.shopping_service import ShoppingService

logger = logging.getLogger(__name__)


def week_start(day: date) -> date:
    """The Sunday that starts the plan week containing `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


class MealPlanService:
    """Service layer for weekly meal plans."""

    def __init__(self, db: Session):
        self.db = db
        self.plan_repo = MealPlanRepository(db)
        self.recipe_repo = RecipeRepository(db)

    def get_week(self, household: HouseholdContext, week: date) -> MealPlanResponse:
        start = week_start(week)
        plan = self.plan_repo.get_for_week(household.household_id, start)
        if plan is None:
            return MealPlanResponse(
                household_id=household.household_id,
                week_start_date=start,
                meals=empty_week(),
            )
        return MealPlanResponse.model_validate(plan)

    def assign(self, household: HouseholdContext, user_id: str, data: MealAssign) -> MealAssignResponse:
        """
        Assign a meal, then optionally push its ingredients to the grocery list.

        The two steps are not atomic. The plan is committed first; if the
        grocery step fails the caller gets PartialFailureException (207)
        carrying the saved plan and may retry the grocery step alone. The
        quota action is spent in the same commit as the grocery items, so a
        failed step costs nothing.
        """
        recipe = None
        if data.recipe_id is not None:
            recipe = get_owned_or_404(self.recipe_repo, data.recipe_id, household, "Recipe")

        plan = self._save_slot(household, data, recipe)
        plan_response = MealPlanResponse.model_validate(plan)

        audit = AuditService(self.db)
        audit.record(
            "meal_plan.assigned",
            user_id=user_id,
            household_id=household.household_id,
            target_table="meal_plans",
            target_id=plan_response.id,
            meta={
                "recipe_id": recipe.id if recipe is not None else None,
                "day": data.day.value,
                "slot": data.slot.value,
                "also_add_to_list": data.also_add_to_list,
            },
        )

        if not (data.also_add_to_list and recipe is not None):
            return MealAssignResponse(plan=plan_response)

        entitlements = EntitlementService(self.db)
        try:
            if not entitlements.can_perform_action(household.household_id):
                raise QuotaExceededException()
            ingredients = ShoppingService(self.db).add_recipe_ingredients(
                household, user_id, recipe, auto_confirm=data.auto_confirm, commit=False
            )
            # Commits the grocery items together with the usage
            entitlements.increment_quota_usage(household.household_id)
        except Exception as ex:
            self.db.rollback()
            logger.warning(
                "Meal assigned but grocery sync failed",
                exc_info=ex,
                extra={"household_id": household.household_id, "recipe_id": recipe.id},
            )
            # Application errors explain themselves; anything else stays generic.
            reason = ex.detail if isinstance(ex, CustomException) else "Grocery sync failed"
            raise PartialFailureException(
                "Assigned but failed to add ingredients",
                data=MealAssignResponse(plan=plan_response).model_dump(mode="json"),
                details={"failed_step": "grocery_sync", "reason": reason},
            ) from ex

        audit.record(
            "meal_plan.groceries_synced",
            user_id=user_id,
            household_id=household.household_id,
            target_table="meal_plans",
            target_id=plan_response.id,
            meta={
                "recipe_id": recipe.id,
                "day": data.day.value,
                "slot": data.slot.value,
                "added": ingredients.added,
                "updated": ingredients.updated,
            },
        )
        return MealAssignResponse(plan=plan_response, ingredients=ingredients)

    def clear_week(self, household: HouseholdContext, week: date) -> MealPlanResponse:
        start = week_start(week)
        plan = self.plan_repo.get_for_week(household.household_id, start)
        if plan is not None:
            plan.meals = empty_week()
            self.db.commit()
            self.db.refresh(plan)
            return MealPlanResponse.model_validate(plan)
        return self.get_week(household, start)

    def _save_slot(self, household: HouseholdContext, data: MealAssign, recipe) -> MealPlan:
        start = week_start(data.week)
        plan = self.plan_repo.get_for_week(household.household_id, start)
        if plan is None:
            plan = MealPlan(household_id=household.household_id, week_start_date=start, meals=empty_week())
            self.db.add(plan)

        # JSON columns only notice reassignment, not in-place edits.
        meals = copy.deepcopy(plan.meals or empty_week())
        entry = None
        if recipe is not None:
            entry = {"recipe_id": recipe.id, "title": recipe.title, "notes": data.notes}
        meals.setdefault(data.day.value, {})[data.slot.value] = entry
        plan.meals = meals

        self.db.commit()
        self.db.refresh(plan)
        return plan
