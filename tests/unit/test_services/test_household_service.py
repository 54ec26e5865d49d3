import pytest

from homebase.core.exception import DuplicateResourceException
from homebase.core.plans import PlanTier
from homebase.models.audit import AuditLog
from homebase.models.entitlement import Entitlement
from homebase.models.household import GameMode, Household
from homebase.models.user import User
from homebase.repositories.household_repository import HouseholdRepository
from homebase.schemas.household import OnboardingHouseholdCreate
from homebase.security.session import Identity
from homebase.services.household_service import HouseholdService
from homebase.services.user_service import UserService


@pytest.mark.unit
class TestUserService:
    """Unit tests for syncing identities into local users."""

    def test_sync_creates_user_household_and_entitlements(self, db_session, alice):
        user, household, created = UserService(db_session).sync(alice)

        assert created is True
        assert user.id == "user_alice"
        assert household.role == "owner"
        assert household.plan == PlanTier.FREE
        assert db_session.get(Household, household.household_id).name == "Alice's Household"
        assert db_session.query(Entitlement).filter_by(household_id=household.household_id).count() == 1

    def test_sync_is_idempotent(self, db_session, alice):
        service = UserService(db_session)
        _, first, _ = service.sync(alice)

        _, second, created = service.sync(alice)

        assert created is False
        assert second.household_id == first.household_id
        assert db_session.query(Household).count() == 1

    def test_sync_refreshes_profile(self, db_session, alice):
        service = UserService(db_session)
        service.sync(alice)

        user, _, _ = service.sync(Identity(id=alice.id, email="alice@new.example.com"))

        assert user.email == "alice@new.example.com"
        assert user.name == "Alice"

    def test_leaderboard_ranks_by_xp(self, db_session, alice_household, bob):
        db_session.add(User(id=bob.id, name="Bob", xp=50))
        db_session.get(User, "user_alice").xp = 10
        db_session.flush()
        HouseholdRepository(db_session).add_member(alice_household.household_id, bob.id)

        entries = UserService(db_session).leaderboard(alice_household.household_id)

        assert [(e.rank, e.user_id) for e in entries] == [(1, "user_bob"), (2, "user_alice")]


@pytest.mark.unit
class TestHouseholdService:
    """Unit tests for onboarding."""

    def test_onboarding_creates_owned_household(self, db_session, alice):
        data = OnboardingHouseholdCreate(name="The Burrows", game_mode=GameMode.COUPLE)

        household = HouseholdService(db_session).create_for_onboarding(alice, data)

        assert household.name == "The Burrows"
        assert household.plan == PlanTier.FREE
        assert household.created_by_id == alice.id
        assert HouseholdRepository(db_session).get_member_role(household.id, alice.id) == "owner"
        assert db_session.query(Entitlement).filter_by(household_id=household.id).count() == 1
        assert db_session.query(AuditLog).filter_by(action="household.create").count() == 1

    def test_onboarding_twice_is_conflict(self, db_session, alice_household, alice):
        with pytest.raises(DuplicateResourceException) as exc_info:
            HouseholdService(db_session).create_for_onboarding(alice, OnboardingHouseholdCreate(name="Second"))

        assert exc_info.value.status_code == 409
        assert db_session.query(Household).count() == 1

    def test_members(self, db_session, alice_household):
        members = HouseholdService(db_session).get_members(alice_household)

        assert [(m["user_id"], m["role"]) for m in members] == [("user_alice", "owner")]
