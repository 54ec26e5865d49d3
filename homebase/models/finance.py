from sqlalchemy import String, ForeignKey, Boolean, Date, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from datetime import date
from decimal import Decimal
from homebase.models.base import BaseModel


class Bill(BaseModel):
    __tablename__ = "bills"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    paid_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, default=None)
    paid_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True, default=None)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default=None)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
