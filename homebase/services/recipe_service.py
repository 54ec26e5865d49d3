from sqlalchemy.orm import Session
from typing import List
from homebase.models.recipe import Recipe
from homebase.repositories.recipe_repository import RecipeRepository
from homebase.schemas.recipe import RecipeCreate
from homebase.security.membership import HouseholdContext
from homebase.security.ownership import get_owned_or_404


class RecipeService:
    """Service layer for household recipes."""

    def __init__(self, db: Session):
        self.db = db
        self.recipe_repo = RecipeRepository(db)

    def create_recipe(self, household: HouseholdContext, user_id: str, data: RecipeCreate) -> Recipe:
        recipe = Recipe(
            title=data.title,
            description=data.description,
            instructions=data.instructions,
            servings=data.servings,
            prep_minutes=data.prep_minutes,
            cook_minutes=data.cook_minutes,
            ingredients=[i.model_dump() for i in data.ingredients],
            household_id=household.household_id,
            created_by_id=user_id,
        )
        return self.recipe_repo.create(recipe)

    def list_recipes(self, household: HouseholdContext, skip: int = 0, limit: int = 100) -> List[Recipe]:
        return self.recipe_repo.list_for_household(household.household_id, skip, limit)

    def get_recipe(self, household: HouseholdContext, recipe_id: int) -> Recipe:
        return get_owned_or_404(self.recipe_repo, recipe_id, household, "Recipe")

    def delete_recipe(self, household: HouseholdContext, recipe_id: int) -> None:
        recipe = get_owned_or_404(self.recipe_repo, recipe_id, household, "Recipe")
        self.recipe_repo.delete_obj(recipe)
