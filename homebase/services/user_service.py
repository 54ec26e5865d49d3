import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from homebase.core.plans import PlanTier
from homebase.models.household import Household
from homebase.models.user import User
from homebase.repositories.household_repository import HouseholdRepository
from homebase.repositories.user_repository import UserRepository
from homebase.schemas.user import LeaderboardEntry
from homebase.security.membership import HouseholdContext, MembershipResolver
from homebase.security.session import Identity
from homebase.services.entitlement_service import EntitlementService

logger = logging.getLogger(__name__)


class UserService:
    """Keeps local user rows in step with the identity provider."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.household_repo = HouseholdRepository(db)

    def upsert_from_identity(self, identity: Identity, commit: bool = True) -> User:
        """
        Create the user row on first sight, otherwise refresh email and name.
        xp and coins are never touched here.
        """
        user = self.user_repo.get(identity.id)
        if user is None:
            user = User(id=identity.id, email=identity.email, name=identity.name, xp=0, coins=0)
            self.db.add(user)
        else:
            if identity.email:
                user.email = identity.email
            if identity.name:
                user.name = identity.name
        if commit:
            self.db.commit()
            self.db.refresh(user)
        else:
            self.db.flush()
        return user

    def sync(self, identity: Identity) -> Tuple[User, HouseholdContext, bool]:
        """
        Make sure the signed-in user exists and belongs to a household.

        Idempotent: a user who already has a membership is left where they
        are. Otherwise a personal household is created with the user as owner.

        Returns:
            The user, their household context and whether a household was created
        """
        user = self.upsert_from_identity(identity, commit=False)

        created = False
        if not self.household_repo.has_membership(user.id):
            label = identity.name or identity.email or "My"
            household = Household(
                name=f"{label}'s Household"[:100],
                plan=PlanTier.FREE,
                created_by_id=user.id,
            )
            self.db.add(household)
            self.db.flush()
            self.household_repo.add_member(household.id, user.id, role="owner", commit=False)
            EntitlementService(self.db).create_defaults(household.id, commit=False)
            created = True

        self.db.commit()
        self.db.refresh(user)

        if created:
            logger.info("Created household for new user", extra={"user_id": user.id})

        return user, MembershipResolver(self.db).resolve(user.id), created

    def get_user(self, user_id: str) -> Optional[User]:
        return self.user_repo.get(user_id)

    def leaderboard(self, household_id: int, limit: int = 50) -> List[LeaderboardEntry]:
        users = self.user_repo.leaderboard(household_id, limit)
        return [
            LeaderboardEntry(rank=i, user_id=u.id, name=u.name, xp=u.xp, coins=u.coins)
            for i, u in enumerate(users, start=1)
        ]
