from sqlalchemy import String, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from homebase.models.base import BaseModel


class RateLimit(BaseModel):
    """Fixed-window request counter for one subject and endpoint key."""

    __tablename__ = "rate_limits"
    __table_args__ = (
        UniqueConstraint("subject", "endpoint", "window_start", name="uq_rate_limits_window"),
    )

    subject: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    endpoint: Mapped[str] = mapped_column(String(64), nullable=False)
    window_start: Mapped[int] = mapped_column(Integer, nullable=False)  # epoch seconds
    request_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
