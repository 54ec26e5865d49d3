from sqlalchemy import String, ForeignKey, Boolean, Float
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, List
from homebase.models.base import BaseModel


class ShoppingList(BaseModel):
    """
    Shopping list for a household. The list named "Groceries" receives
    ingredients synced from the meal planner.
    """

    __tablename__ = "shopping_lists"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    items: Mapped[List["ShoppingItem"]] = relationship(
        "ShoppingItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ShoppingItem.id",
    )

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def completed_items(self) -> int:
        return sum(1 for item in self.items if item.is_complete)


class ShoppingItem(BaseModel):
    """Individual item in a shopping list."""

    __tablename__ = "shopping_items"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
    notes: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, default=None)

    is_complete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Items added by the meal planner wait for a member to confirm them
    auto_added: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    pending_confirmation: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    source_recipe_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("recipes.id", ondelete="SET NULL"), nullable=True
    )

    list_id: Mapped[int] = mapped_column(
        ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    added_by_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    shopping_list: Mapped["ShoppingList"] = relationship(
        "ShoppingList", back_populates="items", lazy="selectin"
    )
