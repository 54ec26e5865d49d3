from sqlalchemy.orm import Session
from typing import Optional
from homebase.models.entitlement import Entitlement
from homebase.repositories.repository import BaseRepository


class EntitlementRepository(BaseRepository[Entitlement]):
    def __init__(self, db: Session):
        super().__init__(Entitlement, db)

    def get_by_household(self, household_id: int) -> Optional[Entitlement]:
        return (
            self.db.query(Entitlement)
            .filter(Entitlement.household_id == household_id)
            .first()
        )
