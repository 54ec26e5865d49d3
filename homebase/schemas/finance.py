from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal


class BillCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: str = Field("USD", min_length=3, max_length=3)
    due_date: date
    category: Optional[str] = Field(None, max_length=50)


class BillResponse(BaseModel):
    id: int
    uuid: str
    household_id: int
    name: str
    amount: Decimal
    currency: str
    due_date: date
    category: Optional[str]
    is_paid: bool
    paid_date: Optional[date] = None
    paid_amount: Optional[Decimal] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_by_id: Optional[str]
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BillMarkPaid(BaseModel):
    """Payment details. Everything is optional; paid_date defaults to today."""
    paid_date: Optional[date] = None
    paid_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
