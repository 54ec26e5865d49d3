import logging
from typing import List

from sqlalchemy.orm import Session

from homebase.core.exception import DuplicateResourceException, ResourceNotFoundException
from homebase.core.plans import PlanTier
from homebase.models.household import Household
from homebase.repositories.household_repository import HouseholdRepository
from homebase.schemas.household import OnboardingHouseholdCreate
from homebase.security.membership import HouseholdContext
from homebase.security.session import Identity
from homebase.services.audit_service import AuditService
from homebase.services.entitlement_service import EntitlementService
from homebase.services.user_service import UserService

logger = logging.getLogger(__name__)


class HouseholdService:
    """Service layer for household operations."""

    def __init__(self, db: Session):
        self.db = db
        self.household_repo = HouseholdRepository(db)

    def create_for_onboarding(self, identity: Identity, data: OnboardingHouseholdCreate) -> Household:
        """
        Create a household with the caller as owner.

        Household, membership and entitlements are written in one commit.

        Raises:
            DuplicateResourceException: If the caller already belongs to a household
        """
        if self.household_repo.has_membership(identity.id):
            raise DuplicateResourceException(
                "Household", message="You already belong to a household"
            )

        user = UserService(self.db).upsert_from_identity(identity, commit=False)
        household = Household(
            name=data.name,
            description=data.description,
            game_mode=data.game_mode,
            plan=PlanTier.FREE,
            created_by_id=user.id,
        )
        self.db.add(household)
        self.db.flush()

        self.household_repo.add_member(household.id, user.id, role="owner", commit=False)
        EntitlementService(self.db).create_defaults(household.id, commit=False)
        self.db.commit()
        self.db.refresh(household)

        logger.info("Household created", extra={"household_id": household.id, "user_id": user.id})
        AuditService(self.db).record(
            "household.create",
            user_id=user.id,
            household_id=household.id,
            target_table="households",
            target_id=household.id,
            meta={"game_mode": household.game_mode.value},
        )
        return household

    def get_current(self, household: HouseholdContext) -> Household:
        obj = self.household_repo.get(household.household_id)
        if obj is None:
            raise ResourceNotFoundException("Household", message="No household")
        return obj

    def get_members(self, household: HouseholdContext) -> List[dict]:
        return self.household_repo.get_members(household.household_id)
