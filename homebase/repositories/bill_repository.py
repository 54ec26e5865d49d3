from sqlalchemy.orm import Session
from typing import List
from homebase.models.finance import Bill
from homebase.repositories.repository import HouseholdScopedRepository


class BillRepository(HouseholdScopedRepository[Bill]):
    def __init__(self, db: Session):
        super().__init__(Bill, db)

    def list_by_due_date(self, household_id: int, include_paid: bool = True) -> List[Bill]:
        query = self.db.query(Bill).filter(Bill.household_id == household_id)
        if not include_paid:
            query = query.filter(Bill.is_paid.is_(False))
        return query.order_by(Bill.due_date, Bill.id).all()
