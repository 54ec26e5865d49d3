from sqlalchemy.orm import Session
from typing import Optional
from homebase.models.rate_limit import RateLimit
from homebase.repositories.repository import BaseRepository


class RateLimitRepository(BaseRepository[RateLimit]):
    def __init__(self, db: Session):
        super().__init__(RateLimit, db)

    def get_window(self, subject: str, endpoint: str, window_start: int) -> Optional[RateLimit]:
        return (
            self.db.query(RateLimit)
            .filter(
                RateLimit.subject == subject,
                RateLimit.endpoint == endpoint,
                RateLimit.window_start == window_start,
            )
            .first()
        )

    def purge_expired(self, subject: str, endpoint: str, window_start: int) -> None:
        """Drop counters from earlier windows. Caller commits."""
        (
            self.db.query(RateLimit)
            .filter(
                RateLimit.subject == subject,
                RateLimit.endpoint == endpoint,
                RateLimit.window_start < window_start,
            )
            .delete(synchronize_session=False)
        )
