from sqlalchemy import String, Integer
from sqlalchemy.orm import relationship, Mapped, mapped_column
from typing import Optional, List, TYPE_CHECKING
from homebase.models.base import Base, TimestampMixin
from homebase.models.associations import household_members
if TYPE_CHECKING:
    from homebase.models.household import Household


class User(TimestampMixin, Base):
    """
    Local mirror of an identity managed by the external identity provider.
    The primary key is the provider's opaque user id.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True, default=None)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    role: Mapped[str] = mapped_column(String(20), default="member", server_default="member")

    # Gamification counters
    xp: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    coins: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    households: Mapped[List["Household"]] = relationship(
        "Household",
        secondary=household_members,
        back_populates="members",
        lazy="selectin"
    )
