from sqlalchemy import String, Integer, Text, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from typing import Any, Dict, List, Optional
from homebase.models.base import BaseModel


class Recipe(BaseModel):
    """
    Household recipe. Ingredients are stored inline as a list of
    {"name", "amount", "unit"} objects.
    """

    __tablename__ = "recipes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    instructions: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    servings: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    prep_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    cook_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    ingredients: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
