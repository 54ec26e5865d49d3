from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from homebase.core.plans import Feature, require_feature
from homebase.models.finance import Bill
from homebase.repositories.bill_repository import BillRepository
from homebase.schemas.finance import BillCreate, BillMarkPaid
from homebase.security.membership import HouseholdContext
from homebase.security.ownership import get_owned_or_404
from homebase.services.audit_service import AuditService


class BillService:
    """Household bills. Every operation requires the finance feature."""

    def __init__(self, db: Session):
        self.db = db
        self.bill_repo = BillRepository(db)

    def list_bills(self, household: HouseholdContext, include_paid: bool = True) -> List[Bill]:
        require_feature(household.plan, Feature.FINANCE_ENABLED)
        return self.bill_repo.list_by_due_date(household.household_id, include_paid)

    def create_bill(self, household: HouseholdContext, user_id: str, data: BillCreate) -> Bill:
        require_feature(household.plan, Feature.FINANCE_ENABLED)
        bill = Bill(
            name=data.name,
            amount=data.amount,
            currency=data.currency.upper(),
            due_date=data.due_date,
            category=data.category,
            household_id=household.household_id,
            created_by_id=user_id,
        )
        return self.bill_repo.create(bill)

    def mark_paid(
        self,
        household: HouseholdContext,
        user_id: str,
        bill_id: int,
        data: Optional[BillMarkPaid] = None,
    ) -> Bill:
        require_feature(household.plan, Feature.FINANCE_ENABLED)
        bill = get_owned_or_404(self.bill_repo, bill_id, household, "Bill")
        data = data or BillMarkPaid()

        changes = {"is_paid": True, "paid_date": data.paid_date or date.today()}
        # Optional details only overwrite what was sent
        changes.update(data.model_dump(include={"paid_amount", "payment_method", "notes"}, exclude_none=True))
        bill = self.bill_repo.update_obj(bill, changes)

        AuditService(self.db).record(
            "bill.paid",
            user_id=user_id,
            household_id=household.household_id,
            target_table="bills",
            target_id=bill.id,
            meta={"paid_date": bill.paid_date.isoformat(), "payment_method": bill.payment_method},
        )
        return bill
