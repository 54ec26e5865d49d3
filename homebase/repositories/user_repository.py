from sqlalchemy import update
from sqlalchemy.orm import Session
from typing import List
from homebase.models.user import User
from homebase.models.associations import household_members
from homebase.repositories.repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def leaderboard(self, household_id: int, limit: int = 50) -> List[User]:
        """Household members ordered by experience points."""
        return (
            self.db.query(User)
            .join(household_members, User.id == household_members.c.user_id)
            .filter(household_members.c.household_id == household_id)
            .order_by(User.xp.desc(), User.coins.desc(), User.id)
            .limit(limit)
            .all()
        )

    def add_points(self, user_id: str, xp: int = 0, coins: int = 0) -> bool:
        """Increment counters in SQL so concurrent awards add up. Not committed."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(xp=User.xp + xp, coins=User.coins + coins)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def spend_coins(self, user_id: str, amount: int) -> bool:
        """Deduct coins only if the balance covers them. Not committed."""
        stmt = (
            update(User)
            .where(User.id == user_id, User.coins >= amount)
            .values(coins=User.coins - amount)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1
