import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from homebase.core.exception import ResourceNotFoundException
from homebase.models.recipe import Recipe
from homebase.models.shopping import ShoppingItem, ShoppingList
from homebase.repositories.shopping_repository import ShoppingItemRepository, ShoppingListRepository
from homebase.schemas.shopping import (
    GrocerySyncResult,
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingListCreate,
    ShoppingListUpdate,
)
from homebase.security.membership import HouseholdContext
from homebase.security.ownership import get_owned_or_404

logger = logging.getLogger(__name__)

GROCERIES_LIST_NAME = "Groceries"

_PREP_WORDS = "fresh|dried|chopped|diced|minced|ground|whole|canned|frozen|organic|unsalted|salted"
_LEADING_PREP = re.compile(rf"^(?:{_PREP_WORDS})\s+")
_TRAILING_PREP = re.compile(rf"\s+(?:{_PREP_WORDS})$")
_PARENTHETICAL = re.compile(r"\s*\(.*\)")


def normalize_ingredient_name(name: str) -> str:
    """
    Reduce an ingredient name to the key used for merging list items,
    e.g. "Fresh Tomatoes (ripe)" -> "tomatoe".
    """
    normalized = name.lower().strip()
    normalized = _LEADING_PREP.sub("", normalized)
    normalized = _TRAILING_PREP.sub("", normalized)
    normalized = _PARENTHETICAL.sub("", normalized).strip()
    if normalized.endswith("s") and not normalized.endswith("ss"):
        normalized = normalized[:-1]
    return normalized


def _ingredient_amount(ingredient: Dict[str, Any]) -> float:
    try:
        amount = float(ingredient.get("amount"))
    except (TypeError, ValueError):
        return 1.0
    return amount if amount > 0 else 1.0


class ShoppingService:
    """Service layer for shopping lists and items."""

    def __init__(self, db: Session):
        self.db = db
        self.list_repo = ShoppingListRepository(db)
        self.item_repo = ShoppingItemRepository(db)

    # Lists

    def list_lists(self, household: HouseholdContext, skip: int = 0, limit: int = 100) -> List[ShoppingList]:
        return self.list_repo.list_for_household(household.household_id, skip, limit)

    def create_list(self, household: HouseholdContext, user_id: str, data: ShoppingListCreate) -> ShoppingList:
        shopping_list = ShoppingList(
            name=data.name,
            household_id=household.household_id,
            created_by_id=user_id,
        )
        return self.list_repo.create(shopping_list)

    def get_list(self, household: HouseholdContext, list_id: int) -> ShoppingList:
        return get_owned_or_404(self.list_repo, list_id, household, "Shopping list")

    def update_list(self, household: HouseholdContext, list_id: int, data: ShoppingListUpdate) -> ShoppingList:
        shopping_list = self.get_list(household, list_id)
        return self.list_repo.update_obj(shopping_list, data.model_dump(exclude_unset=True))

    def delete_list(self, household: HouseholdContext, list_id: int) -> None:
        shopping_list = self.get_list(household, list_id)
        self.list_repo.delete_obj(shopping_list)

    # Items

    def add_item(
        self,
        household: HouseholdContext,
        user_id: str,
        list_id: int,
        data: ShoppingItemCreate,
    ) -> ShoppingItem:
        shopping_list = self.get_list(household, list_id)
        item = ShoppingItem(
            name=data.name,
            normalized_name=normalize_ingredient_name(data.name),
            quantity=data.quantity,
            unit=data.unit,
            category=data.category,
            notes=data.notes,
            list_id=shopping_list.id,
            added_by_id=user_id,
        )
        return self.item_repo.create(item)

    def _get_item(self, household: HouseholdContext, list_id: int, item_id: int) -> ShoppingItem:
        shopping_list = self.get_list(household, list_id)
        item = self.item_repo.get_in_list(item_id, shopping_list.id)
        if item is None:
            raise ResourceNotFoundException("Shopping item")
        return item

    def update_item(
        self,
        household: HouseholdContext,
        list_id: int,
        item_id: int,
        data: ShoppingItemUpdate,
    ) -> ShoppingItem:
        item = self._get_item(household, list_id, item_id)
        return self.item_repo.update_obj(item, data.model_dump(exclude_unset=True))

    def delete_item(self, household: HouseholdContext, list_id: int, item_id: int) -> None:
        item = self._get_item(household, list_id, item_id)
        self.item_repo.delete_obj(item)

    def confirm_items(self, household: HouseholdContext, item_ids: List[int]) -> List[ShoppingItem]:
        """
        Confirm auto-added items. Ids outside the caller's household are
        treated like missing ones.
        """
        items = self.item_repo.get_many_for_household(item_ids, household.household_id)
        if len(items) != len(set(item_ids)):
            raise ResourceNotFoundException("Shopping item")
        for item in items:
            item.pending_confirmation = False
        self.db.commit()
        return items

    # Grocery sync

    def get_or_create_groceries(self, household_id: int, user_id: Optional[str]) -> ShoppingList:
        groceries = self.list_repo.get_by_name(household_id, GROCERIES_LIST_NAME)
        if groceries is None:
            groceries = ShoppingList(
                name=GROCERIES_LIST_NAME,
                household_id=household_id,
                created_by_id=user_id,
            )
            self.db.add(groceries)
            self.db.flush()
        return groceries

    def add_recipe_ingredients(
        self,
        household: HouseholdContext,
        user_id: str,
        recipe: Recipe,
        auto_confirm: bool = False,
        commit: bool = True,
    ) -> GrocerySyncResult:
        """
        Merge a recipe's ingredients into the household "Groceries" list.

        Open items with the same normalised name get their quantity
        increased; everything else is added as an auto-added item that waits
        for confirmation unless `auto_confirm` is set. All changes are
        committed together, or only flushed when `commit` is false so the
        caller can commit them with its own writes.
        """
        try:
            groceries = self.get_or_create_groceries(household.household_id, user_id)
            open_items = {i.normalized_name: i for i in self.item_repo.get_open_items(groceries.id)}
            result = GrocerySyncResult(list_id=groceries.id)

            for ingredient in recipe.ingredients or []:
                name = str(ingredient.get("name") or "").strip()
                if not name:
                    continue
                key = normalize_ingredient_name(name)
                amount = _ingredient_amount(ingredient)
                unit = ingredient.get("unit") or None

                existing = open_items.get(key)
                if existing is not None and (existing.unit == unit or not existing.unit or not unit):
                    existing.quantity = existing.quantity + amount
                    existing.unit = existing.unit or unit
                    result.updated += 1
                    continue

                item = ShoppingItem(
                    name=name,
                    normalized_name=key,
                    quantity=amount,
                    unit=unit,
                    list_id=groceries.id,
                    added_by_id=user_id,
                    auto_added=True,
                    pending_confirmation=not auto_confirm,
                    source_recipe_id=recipe.id,
                )
                self.db.add(item)
                open_items[key] = item
                result.added += 1
                result.auto_added += 1
                if not auto_confirm:
                    result.pending_confirmations += 1

            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Recipe ingredients synced to groceries",
            extra={
                "household_id": household.household_id,
                "recipe_id": recipe.id,
                "added": result.added,
                "updated": result.updated,
            },
        )
        return result
