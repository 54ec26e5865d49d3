from sqlalchemy import String, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from typing import Any, Dict, Optional
from homebase.models.base import BaseModel


class AuditLog(BaseModel):
    """Append-only record of privileged changes."""

    __tablename__ = "audit_logs"

    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    target_table: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    target_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, default=None)
    meta: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    household_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=True, index=True
    )

