from sqlalchemy.orm import Session
from typing import List, Optional
from homebase.models.rewards import Reward, RewardRedemption
from homebase.repositories.repository import HouseholdScopedRepository


class RewardRepository(HouseholdScopedRepository[Reward]):
    def __init__(self, db: Session):
        super().__init__(Reward, db)

    def list_active(self, household_id: int) -> List[Reward]:
        return (
            self.db.query(Reward)
            .filter(Reward.household_id == household_id, Reward.is_active.is_(True))
            .order_by(Reward.points_cost, Reward.id)
            .all()
        )


class RewardRedemptionRepository(HouseholdScopedRepository[RewardRedemption]):
    def __init__(self, db: Session):
        super().__init__(RewardRedemption, db)

    def list_recent(self, household_id: int, user_id: Optional[str] = None, limit: int = 50) -> List[RewardRedemption]:
        query = self.db.query(RewardRedemption).filter(RewardRedemption.household_id == household_id)
        if user_id is not None:
            query = query.filter(RewardRedemption.user_id == user_id)
        return query.order_by(RewardRedemption.id.desc()).limit(limit).all()
