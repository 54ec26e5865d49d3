from sqlalchemy.orm import Session
from typing import List, Optional
from homebase.models.shopping import ShoppingList, ShoppingItem
from homebase.repositories.repository import BaseRepository, HouseholdScopedRepository


class ShoppingListRepository(HouseholdScopedRepository[ShoppingList]):
    """Repository for shopping lists."""

    def __init__(self, db: Session):
        super().__init__(ShoppingList, db)

    def get_by_name(self, household_id: int, name: str) -> Optional[ShoppingList]:
        return (
            self.db.query(ShoppingList)
            .filter(
                ShoppingList.household_id == household_id,
                ShoppingList.name == name,
                ShoppingList.is_archived.is_(False),
            )
            .order_by(ShoppingList.id)
            .first()
        )


class ShoppingItemRepository(BaseRepository[ShoppingItem]):
    """Repository for shopping items. Ownership is checked through the list."""

    def __init__(self, db: Session):
        super().__init__(ShoppingItem, db)

    def get_in_list(self, item_id: int, list_id: int) -> Optional[ShoppingItem]:
        return (
            self.db.query(ShoppingItem)
            .filter(ShoppingItem.id == item_id, ShoppingItem.list_id == list_id)
            .first()
        )

    def get_open_items(self, list_id: int) -> List[ShoppingItem]:
        """Incomplete items of a list, candidates for merging."""
        return (
            self.db.query(ShoppingItem)
            .filter(ShoppingItem.list_id == list_id, ShoppingItem.is_complete.is_(False))
            .all()
        )

    def get_many_for_household(self, item_ids: List[int], household_id: int) -> List[ShoppingItem]:
        return (
            self.db.query(ShoppingItem)
            .join(ShoppingList, ShoppingItem.list_id == ShoppingList.id)
            .filter(ShoppingItem.id.in_(item_ids), ShoppingList.household_id == household_id)
            .all()
        )
