from pydantic import BaseModel
from sqlalchemy.orm import Session

from homebase.core.exception import ResourceNotFoundException
from homebase.core.plans import PlanTier
from homebase.repositories.household_repository import HouseholdRepository


class HouseholdContext(BaseModel):
    """The caller's household, derived from the session on every request."""

    household_id: int
    role: str
    plan: PlanTier

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"


class MembershipResolver:
    """
    Maps a user id to its household with a single joined lookup. A user
    without a household gets a 404, never a 401: they are authenticated,
    there is just nothing to access yet.
    """

    def __init__(self, db: Session):
        self.household_repo = HouseholdRepository(db)

    def resolve(self, user_id: str) -> HouseholdContext:
        row = self.household_repo.get_membership(user_id)
        if row is None:
            raise ResourceNotFoundException("Household", message="No household")
        return HouseholdContext(
            household_id=row.household_id,
            role=row.role,
            plan=PlanTier(row.plan),
        )
