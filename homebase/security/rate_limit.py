import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homebase.config import settings
from homebase.core.exception import RateLimitException
from homebase.models.rate_limit import RateLimit
from homebase.repositories.rate_limit_repository import RateLimitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: int  # epoch seconds

    @property
    def retry_after(self) -> int:
        return max(self.reset_at - int(time.time()), 1)

    def headers(self) -> Dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


RATE_LIMIT_CONFIGS: Dict[str, RateLimitConfig] = {
    "auth": RateLimitConfig(max_requests=10, window_seconds=15 * 60),
    "api": RateLimitConfig(max_requests=100, window_seconds=60),
    "analytics": RateLimitConfig(max_requests=120, window_seconds=10),
    "shopping": RateLimitConfig(max_requests=50, window_seconds=60),
    "chores": RateLimitConfig(max_requests=30, window_seconds=60),
    "bills": RateLimitConfig(max_requests=20, window_seconds=60),
    "meal-planner": RateLimitConfig(max_requests=25, window_seconds=60),
    "default": RateLimitConfig(max_requests=100, window_seconds=60),
}

# Path fragments used when a route does not name its key explicitly
_PATH_KEYS = [
    ("/auth", "auth"),
    ("/analytics", "analytics"),
    ("/shopping", "shopping"),
    ("/chores", "chores"),
    ("/bills", "bills"),
    ("/finance", "bills"),
    ("/meal-planner", "meal-planner"),
]


def get_rate_limit_config(key: Optional[str] = None, path: str = "") -> tuple[str, RateLimitConfig]:
    """Resolve a config by key, else by request path, else the default."""
    if key and key in RATE_LIMIT_CONFIGS:
        return key, RATE_LIMIT_CONFIGS[key]
    for fragment, path_key in _PATH_KEYS:
        if fragment in path:
            return path_key, RATE_LIMIT_CONFIGS[path_key]
    return "default", RATE_LIMIT_CONFIGS["default"]


class RateLimiter:
    """
    Fixed-window counter persisted in the rate_limits table.

    The limiter runs before authentication, so the subject is the client
    address. If the counter store fails the request is allowed and the
    failure is logged.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = RateLimitRepository(db)

    def hit(self, subject: str, key: str, config: RateLimitConfig, now: Optional[float] = None) -> RateLimitDecision:
        now = int(now if now is not None else time.time())
        window_start = now - (now % config.window_seconds)
        reset_at = window_start + config.window_seconds

        try:
            row = self.repo.get_window(subject, key, window_start)
            if row is None:
                self.repo.purge_expired(subject, key, window_start)
                row = RateLimit(subject=subject, endpoint=key, window_start=window_start, request_count=0)
                self.db.add(row)

            if row.request_count >= config.max_requests:
                self.db.rollback()
                return RateLimitDecision(False, config.max_requests, 0, reset_at)

            row.request_count += 1
            self.db.commit()
            count = row.request_count
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                "Rate limiter storage failed, allowing request",
                exc_info=True,
                extra={"rate_limit_key": key},
            )
            return RateLimitDecision(True, config.max_requests, config.max_requests, reset_at)

        return RateLimitDecision(True, config.max_requests, max(config.max_requests - count, 0), reset_at)

    def enforce(self, subject: str, key: Optional[str], path: str = "") -> Optional[RateLimitDecision]:
        """Raise RateLimitException when the caller is over its window."""
        if not settings.RATE_LIMIT_ENABLED:
            return None
        resolved_key, config = get_rate_limit_config(key, path)
        decision = self.hit(subject, resolved_key, config)
        if not decision.allowed:
            raise RateLimitException(
                limit=decision.limit,
                reset_at=decision.reset_at,
                retry_after=decision.retry_after,
            )
        return decision
