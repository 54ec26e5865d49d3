from sqlalchemy.orm import Session
from typing import List, Optional
from homebase.models.chores import Chore, ChoreCompletion
from homebase.repositories.repository import HouseholdScopedRepository


class ChoreRepository(HouseholdScopedRepository[Chore]):
    def __init__(self, db: Session):
        super().__init__(Chore, db)

    def list_by_due(self, household_id: int, assigned_to_id: Optional[str] = None) -> List[Chore]:
        """Chores with a due date first, soonest first."""
        query = self.db.query(Chore).filter(Chore.household_id == household_id)
        if assigned_to_id is not None:
            query = query.filter(Chore.assigned_to_id == assigned_to_id)
        return query.order_by(Chore.due_at.is_(None), Chore.due_at, Chore.id).all()


class ChoreCompletionRepository(HouseholdScopedRepository[ChoreCompletion]):
    def __init__(self, db: Session):
        super().__init__(ChoreCompletion, db)

    def list_recent(self, household_id: int, limit: int = 50) -> List[ChoreCompletion]:
        return (
            self.db.query(ChoreCompletion)
            .filter(ChoreCompletion.household_id == household_id)
            .order_by(ChoreCompletion.id.desc())
            .limit(limit)
            .all()
        )
