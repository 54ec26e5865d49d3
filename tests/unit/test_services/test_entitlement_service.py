from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from homebase.core.exception import QuotaExceededException, UpstreamException
from homebase.core.plans import PlanTier
from homebase.models.audit import AuditLog
from homebase.models.household import Household
from homebase.repositories.entitlement_repository import EntitlementRepository
from homebase.services.entitlement_service import EntitlementService, next_reset_date


@pytest.mark.unit
class TestEntitlementService:
    """Unit tests for the stateful quota service."""

    def test_free_defaults(self, db_session, alice_household):
        snapshot = EntitlementService(db_session).snapshot(alice_household.household_id)

        assert snapshot["tier"] == "free"
        assert snapshot["quota_actions_per_month"] == 400
        assert snapshot["quota_actions_used"] == 0
        assert snapshot["conflict_detection"] == "none"
        assert "finance_enabled" not in snapshot["features"]

    def test_can_perform_action_until_quota_used(self, db_session, alice_household):
        service = EntitlementService(db_session)
        household_id = alice_household.household_id
        entitlement = EntitlementRepository(db_session).get_by_household(household_id)
        entitlement.quota_actions_per_month = 2
        entitlement.quota_reset_date = date(2030, 1, 1)
        db_session.commit()

        today = date(2029, 12, 15)
        assert service.can_perform_action(household_id, today=today)
        service.increment_quota_usage(household_id)
        assert service.can_perform_action(household_id, today=today)
        service.increment_quota_usage(household_id)
        assert not service.can_perform_action(household_id, today=today)

    def test_quota_resets_on_reset_date(self, db_session, alice_household):
        service = EntitlementService(db_session)
        household_id = alice_household.household_id
        entitlement = EntitlementRepository(db_session).get_by_household(household_id)
        entitlement.quota_actions_per_month = 1
        entitlement.quota_actions_used = 1
        entitlement.quota_reset_date = date(2030, 2, 1)
        db_session.commit()

        assert not service.can_perform_action(household_id, today=date(2030, 1, 31))
        assert service.can_perform_action(household_id, today=date(2030, 2, 1))

        db_session.refresh(entitlement)
        assert entitlement.quota_actions_used == 0
        assert entitlement.quota_reset_date == date(2030, 3, 1)

    def test_consume_action_raises_when_exhausted(self, db_session, alice_household):
        service = EntitlementService(db_session)
        entitlement = EntitlementRepository(db_session).get_by_household(alice_household.household_id)
        entitlement.quota_actions_per_month = 0
        db_session.commit()

        with pytest.raises(QuotaExceededException) as exc_info:
            service.consume_action(alice_household.household_id)
        assert exc_info.value.status_code == 403

    def test_storage_failure_is_503(self, db_session, alice_household, monkeypatch):
        service = EntitlementService(db_session)

        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(service.entitlement_repo, "get_by_household", broken)

        with pytest.raises(UpstreamException) as exc_info:
            service.can_perform_action(alice_household.household_id)
        assert exc_info.value.status_code == 503

    def test_missing_row_created_from_household_plan(self, db_session, alice_household):
        household_id = alice_household.household_id
        repo = EntitlementRepository(db_session)
        repo.delete_obj(repo.get_by_household(household_id))
        db_session.get(Household, household_id).plan = PlanTier.PRO
        db_session.commit()

        entitlement = EntitlementService(db_session).get_or_create(household_id)

        assert PlanTier(entitlement.tier) == PlanTier.PRO

    def test_update_for_subscription(self, db_session, alice_household):
        household_id = alice_household.household_id

        snapshot = EntitlementService(db_session).update_for_subscription(
            household_id, PlanTier.PRO_PLUS, user_id="user_alice", stripe_subscription_id="sub_123"
        )

        assert snapshot["tier"] == "pro_plus"
        assert snapshot["quota_actions_per_month"] == 10000
        assert snapshot["conflict_detection"] == "advanced"
        household = db_session.get(Household, household_id)
        assert household.plan == PlanTier.PRO_PLUS
        assert household.stripe_subscription_id == "sub_123"

        audit = db_session.query(AuditLog).filter(AuditLog.action == "subscription.change").one()
        assert audit.meta["from_tier"] == "free"
        assert audit.meta["to_tier"] == "pro_plus"

    @pytest.mark.parametrize(
        "today,expected",
        [
            (date(2030, 1, 15), date(2030, 2, 1)),
            (date(2030, 12, 31), date(2031, 1, 1)),
            (date(2030, 2, 1), date(2030, 3, 1)),
        ],
    )
    def test_next_reset_date(self, today, expected):
        assert next_reset_date(today) == expected
