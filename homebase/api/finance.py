from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.finance import BillCreate, BillMarkPaid, BillResponse
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.bill_service import BillService

router = APIRouter(route_class=GatedRoute)

bills_access = SecurityGate(rate_limit="bills", require_household=True)


@router.get("/bills", response_model=Result[List[BillResponse]])
async def list_bills(
    include_paid: bool = Query(True),
    ctx: SecurityContext = Depends(bills_access),
    db: Session = Depends(get_db),
):
    """List bills by due date. Requires a plan with finance enabled."""
    bills = BillService(db).list_bills(ctx.household, include_paid=include_paid)
    return Result.successful(data=[BillResponse.model_validate(b) for b in bills])


@router.post("/bills", response_model=Result[BillResponse], status_code=status.HTTP_201_CREATED)
async def create_bill(
    data: BillCreate,
    ctx: SecurityContext = Depends(bills_access),
    db: Session = Depends(get_db),
):
    bill = BillService(db).create_bill(ctx.household, ctx.user_id, data)
    return Result.successful(data=BillResponse.model_validate(bill))


@router.post("/bills/{bill_id}/mark-paid", response_model=Result[BillResponse])
async def mark_bill_paid(
    bill_id: int,
    data: Optional[BillMarkPaid] = None,
    ctx: SecurityContext = Depends(bills_access),
    db: Session = Depends(get_db),
):
    """Mark a bill as paid. The body is optional; paid_date defaults to today."""
    bill = BillService(db).mark_paid(ctx.household, ctx.user_id, bill_id, data)
    return Result.successful(data=BillResponse.model_validate(bill))
