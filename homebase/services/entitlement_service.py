import logging
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homebase.core.exception import QuotaExceededException, UpstreamException
from homebase.core.plans import PlanTier, available_features
from homebase.models.entitlement import Entitlement
from homebase.repositories.entitlement_repository import EntitlementRepository
from homebase.repositories.household_repository import HouseholdRepository
from homebase.services.audit_service import AuditService

logger = logging.getLogger(__name__)

TIER_LIMITS: Dict[PlanTier, Dict[str, Any]] = {
    PlanTier.FREE: {
        "history_months": 12,
        "advanced_rrule": False,
        "conflict_detection": "none",
        "google_import": False,
        "digest_max_per_day": 0,
        "quiet_hours": False,
        "quota_actions_per_month": 400,
    },
    PlanTier.PRO: {
        "history_months": 24,
        "advanced_rrule": True,
        "conflict_detection": "basic",
        "google_import": True,
        "digest_max_per_day": 1,
        "quiet_hours": True,
        "quota_actions_per_month": 4000,
    },
    PlanTier.PRO_PLUS: {
        "history_months": 36,
        "advanced_rrule": True,
        "conflict_detection": "advanced",
        "google_import": True,
        "digest_max_per_day": 3,
        "quiet_hours": True,
        "quota_actions_per_month": 10000,
    },
}


def next_reset_date(today: date) -> date:
    """First day of the month after `today`."""
    if today.month == 12:
        return date(today.year + 1, 1, 1)
    return date(today.year, today.month + 1, 1)


class EntitlementService:
    """
    Stateful entitlement checks backed by the entitlements table.

    Unlike the static feature gate, these checks hit the database. A storage
    failure raises UpstreamException (503); it never turns into an allow.
    """

    def __init__(self, db: Session):
        self.db = db
        self.entitlement_repo = EntitlementRepository(db)
        self.household_repo = HouseholdRepository(db)

    def create_defaults(self, household_id: int, tier: PlanTier = PlanTier.FREE, commit: bool = True) -> Entitlement:
        entitlement = Entitlement(
            household_id=household_id,
            tier=tier,
            quota_actions_used=0,
            quota_reset_date=next_reset_date(date.today()),
            **TIER_LIMITS[tier],
        )
        self.db.add(entitlement)
        if commit:
            self.db.commit()
            self.db.refresh(entitlement)
        return entitlement

    def get_or_create(self, household_id: int) -> Entitlement:
        entitlement = self.entitlement_repo.get_by_household(household_id)
        if entitlement is None:
            household = self.household_repo.get(household_id)
            tier = household.plan if household else PlanTier.FREE
            entitlement = self.create_defaults(household_id, tier)
        return entitlement

    def snapshot(self, household_id: int) -> Dict[str, Any]:
        try:
            entitlement = self.get_or_create(household_id)
        except SQLAlchemyError as ex:
            self._storage_failed("snapshot", household_id, ex)
        tier = PlanTier(entitlement.tier)
        return {
            "household_id": household_id,
            "tier": tier.value,
            "history_months": entitlement.history_months,
            "advanced_rrule": entitlement.advanced_rrule,
            "conflict_detection": entitlement.conflict_detection,
            "google_import": entitlement.google_import,
            "digest_max_per_day": entitlement.digest_max_per_day,
            "quiet_hours": entitlement.quiet_hours,
            "quota_actions_per_month": entitlement.quota_actions_per_month,
            "quota_actions_used": entitlement.quota_actions_used,
            "quota_reset_date": entitlement.quota_reset_date,
            "features": [f.value for f in available_features(tier)],
        }

    def can_perform_action(self, household_id: int, today: Optional[date] = None) -> bool:
        """
        True while the household has quota left this month. Usage resets
        once the stored reset date is reached.
        """
        today = today or date.today()
        try:
            entitlement = self.get_or_create(household_id)
            if entitlement.quota_reset_date is None or entitlement.quota_reset_date <= today:
                entitlement.quota_actions_used = 0
                entitlement.quota_reset_date = next_reset_date(today)
                self.db.commit()
            return entitlement.quota_actions_used < entitlement.quota_actions_per_month
        except SQLAlchemyError as ex:
            self._storage_failed("can_perform_action", household_id, ex)

    def increment_quota_usage(self, household_id: int, amount: int = 1) -> None:
        try:
            entitlement = self.get_or_create(household_id)
            entitlement.quota_actions_used = entitlement.quota_actions_used + amount
            self.db.commit()
        except SQLAlchemyError as ex:
            self._storage_failed("increment_quota_usage", household_id, ex)

    def consume_action(self, household_id: int) -> None:
        """Check and spend one action, raising QuotaExceededException when none are left."""
        if not self.can_perform_action(household_id):
            raise QuotaExceededException()
        self.increment_quota_usage(household_id)

    def update_for_subscription(
        self,
        household_id: int,
        tier: PlanTier,
        user_id: str,
        stripe_subscription_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Apply a tier's limits to the household and record the change."""
        try:
            household = self.household_repo.get(household_id)
            previous = PlanTier(household.plan)
            entitlement = self.get_or_create(household_id)
            for key, value in TIER_LIMITS[tier].items():
                setattr(entitlement, key, value)
            entitlement.tier = tier
            household.plan = tier
            if stripe_subscription_id is not None:
                household.stripe_subscription_id = stripe_subscription_id
            self.db.commit()
        except SQLAlchemyError as ex:
            self._storage_failed("update_for_subscription", household_id, ex)

        logger.info(
            "Subscription tier changed",
            extra={"household_id": household_id, "from_tier": previous.value, "to_tier": tier.value},
        )
        AuditService(self.db).record(
            "subscription.change",
            user_id=user_id,
            household_id=household_id,
            target_table="entitlements",
            target_id=household_id,
            meta={
                "from_tier": previous.value,
                "to_tier": tier.value,
                "stripe_subscription_id": stripe_subscription_id,
            },
        )
        return self.snapshot(household_id)

    def _storage_failed(self, operation: str, household_id: int, ex: Exception):
        self.db.rollback()
        logger.error(
            f"Entitlement storage failed during {operation}",
            exc_info=ex,
            extra={"household_id": household_id},
        )
        raise UpstreamException("Entitlement service unavailable") from ex
