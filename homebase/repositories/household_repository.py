from sqlalchemy.orm import Session
from sqlalchemy import select, insert
from typing import List, Optional
from homebase.models.household import Household
from homebase.models.user import User
from homebase.models.associations import household_members
from homebase.repositories.repository import BaseRepository


class HouseholdRepository(BaseRepository[Household]):
    """Repository for household and membership operations."""

    def __init__(self, db: Session):
        super().__init__(Household, db)

    def get_membership(self, user_id: str):
        """
        Resolve a user's membership joined with its household in one query.

        Returns:
            Row with household_id, role and plan, or None
        """
        stmt = (
            select(
                household_members.c.household_id,
                household_members.c.role,
                Household.plan,
            )
            .join(Household, Household.id == household_members.c.household_id)
            .where(household_members.c.user_id == user_id)
        )
        return self.db.execute(stmt).first()

    def has_membership(self, user_id: str) -> bool:
        stmt = select(household_members.c.user_id).where(household_members.c.user_id == user_id)
        return self.db.execute(stmt).first() is not None

    def add_member(self, household_id: int, user_id: str, role: str = "member", commit: bool = True) -> None:
        stmt = insert(household_members).values(
            user_id=user_id,
            household_id=household_id,
            role=role
        )
        self.db.execute(stmt)
        if commit:
            self.db.commit()

    def get_members(self, household_id: int) -> List[dict]:
        """
        Get all members of a household with their roles.

        Returns:
            List of dicts with user info and role
        """
        stmt = (
            select(
                User.id,
                User.email,
                User.name,
                User.xp,
                User.coins,
                household_members.c.role,
                household_members.c.joined_at
            )
            .join(household_members, User.id == household_members.c.user_id)
            .where(household_members.c.household_id == household_id)
            .order_by(household_members.c.joined_at)
        )

        results = self.db.execute(stmt).all()
        return [
            {
                "user_id": r.id,
                "email": r.email,
                "name": r.name,
                "xp": r.xp,
                "coins": r.coins,
                "role": r.role,
                "joined_at": r.joined_at
            }
            for r in results
        ]

    def get_member_role(self, household_id: int, user_id: str) -> Optional[str]:
        stmt = select(household_members.c.role).where(
            household_members.c.household_id == household_id,
            household_members.c.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()
