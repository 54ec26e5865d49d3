import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from homebase.core.exception import ResourceNotFoundException, ValidationException
from homebase.models.rewards import Reward, RewardRedemption
from homebase.repositories.reward_repository import RewardRedemptionRepository, RewardRepository
from homebase.schemas.rewards import RedeemResult, RedemptionResponse, RewardCreate
from homebase.security.membership import HouseholdContext
from homebase.security.ownership import PRIVILEGED_ROLES, require_role
from homebase.services.audit_service import AuditService
from homebase.services.points_service import PointsService

logger = logging.getLogger(__name__)


class RewardService:
    """Household rewards bought with coins."""

    def __init__(self, db: Session):
        self.db = db
        self.reward_repo = RewardRepository(db)
        self.redemption_repo = RewardRedemptionRepository(db)

    def list_rewards(self, household: HouseholdContext) -> List[Reward]:
        return self.reward_repo.list_active(household.household_id)

    def create_reward(self, household: HouseholdContext, user_id: str, data: RewardCreate) -> Reward:
        require_role(household, *PRIVILEGED_ROLES, user_id=user_id, action="reward.create")
        reward = Reward(
            name=data.name,
            description=data.description,
            points_cost=data.points_cost,
            household_id=household.household_id,
            created_by_id=user_id,
        )
        return self.reward_repo.create(reward)

    def redeem(self, household: HouseholdContext, user_id: str, reward_id: int, quantity: int = 1) -> RedeemResult:
        """
        Spend coins on a reward. The balance check and the deduction are one
        conditional update, so two redemptions cannot overdraw a balance.
        """
        reward = self.reward_repo.get_for_household(reward_id, household.household_id)
        if reward is None or not reward.is_active:
            raise ResourceNotFoundException("Reward", message="Reward not found or access denied")

        total = reward.points_cost * quantity
        points = PointsService(self.db)
        try:
            if not points.spend_coins(user_id, total):
                _, available = points.balance(user_id)
                raise ValidationException(
                    "Insufficient reward coins",
                    details={"required": total, "available": available},
                )
            redemption = RewardRedemption(
                reward_id=reward.id,
                household_id=household.household_id,
                user_id=user_id,
                quantity=quantity,
                total_cost=total,
            )
            self.db.add(redemption)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(redemption)

        logger.info(
            "Reward redeemed",
            extra={"household_id": household.household_id, "reward_id": reward.id, "total_cost": total},
        )
        AuditService(self.db).record(
            "reward.redeemed",
            user_id=user_id,
            household_id=household.household_id,
            target_table="rewards",
            target_id=reward.id,
            meta={"quantity": quantity, "total_cost": total},
        )

        _, remaining = points.balance(user_id)
        return RedeemResult(redemption=RedemptionResponse.model_validate(redemption), remaining_coins=remaining)

    def list_redemptions(
        self, household: HouseholdContext, user_id: Optional[str] = None, limit: int = 50
    ) -> List[RewardRedemption]:
        return self.redemption_repo.list_recent(household.household_id, user_id, limit)
