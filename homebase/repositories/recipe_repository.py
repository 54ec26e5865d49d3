from sqlalchemy.orm import Session
from homebase.models.recipe import Recipe
from homebase.repositories.repository import HouseholdScopedRepository


class RecipeRepository(HouseholdScopedRepository[Recipe]):
    def __init__(self, db: Session):
        super().__init__(Recipe, db)
