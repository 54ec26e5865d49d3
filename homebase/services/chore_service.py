import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from homebase.core.exception import ValidationException
from homebase.core.plans import Feature, require_feature
from homebase.models.chores import Chore, ChoreCompletion
from homebase.repositories.chore_repository import ChoreCompletionRepository, ChoreRepository
from homebase.repositories.household_repository import HouseholdRepository
from homebase.schemas.chores import ChoreCompleteResult, ChoreCompletionResponse, ChoreCreate
from homebase.security.membership import HouseholdContext
from homebase.security.ownership import PRIVILEGED_ROLES, get_owned_or_404, require_creator_or_role
from homebase.services.audit_service import AuditService
from homebase.services.points_service import PointsService

logger = logging.getLogger(__name__)


class ChoreService:
    """Household chores and the XP and coins earned by completing them."""

    def __init__(self, db: Session):
        self.db = db
        self.chore_repo = ChoreRepository(db)
        self.completion_repo = ChoreCompletionRepository(db)
        self.household_repo = HouseholdRepository(db)

    def list_chores(self, household: HouseholdContext, assigned_to_id: Optional[str] = None) -> List[Chore]:
        require_feature(household.plan, Feature.CHORES)
        return self.chore_repo.list_by_due(household.household_id, assigned_to_id)

    def create_chore(self, household: HouseholdContext, user_id: str, data: ChoreCreate) -> Chore:
        require_feature(household.plan, Feature.CHORES)
        if data.assigned_to_id is not None:
            if self.household_repo.get_member_role(household.household_id, data.assigned_to_id) is None:
                raise ValidationException("Chores can only be assigned to household members")

        chore = Chore(
            title=data.title,
            description=data.description,
            assigned_to_id=data.assigned_to_id,
            due_at=data.due_at,
            recurrence=data.recurrence,
            xp_reward=data.xp_reward,
            coin_reward=data.coin_reward,
            household_id=household.household_id,
            created_by_id=user_id,
        )
        return self.chore_repo.create(chore)

    def complete_chore(self, household: HouseholdContext, user_id: str, chore_id: int) -> ChoreCompleteResult:
        """
        Record a completion and award the chore's XP and coins to whoever
        completed it. The completion row and the award share one commit.
        """
        require_feature(household.plan, Feature.CHORES)
        chore = get_owned_or_404(self.chore_repo, chore_id, household, "Chore")

        points = PointsService(self.db)
        try:
            completion = ChoreCompletion(
                chore_id=chore.id,
                household_id=household.household_id,
                completed_by_id=user_id,
                xp_earned=chore.xp_reward,
                coins_earned=chore.coin_reward,
            )
            self.db.add(completion)
            points.award(user_id, xp=chore.xp_reward, coins=chore.coin_reward, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(completion)

        logger.info(
            "Chore completed",
            extra={"household_id": household.household_id, "chore_id": chore.id, "xp": chore.xp_reward},
        )
        AuditService(self.db).record(
            "chore.completed",
            user_id=user_id,
            household_id=household.household_id,
            target_table="chores",
            target_id=chore.id,
            meta={"xp_earned": chore.xp_reward, "coins_earned": chore.coin_reward},
        )

        xp, coins = points.balance(user_id)
        return ChoreCompleteResult(
            completion=ChoreCompletionResponse.model_validate(completion), xp=xp, coins=coins
        )

    def list_completions(self, household: HouseholdContext, limit: int = 50) -> List[ChoreCompletion]:
        require_feature(household.plan, Feature.CHORES)
        return self.completion_repo.list_recent(household.household_id, limit)

    def delete_chore(self, household: HouseholdContext, user_id: str, chore_id: int) -> None:
        """Only the creator or a household admin may delete a chore."""
        chore = get_owned_or_404(self.chore_repo, chore_id, household, "Chore")
        require_creator_or_role(household, chore.created_by_id, user_id, *PRIVILEGED_ROLES, action="chore.delete")
        self.chore_repo.delete_obj(chore)
