import pytest

from homebase.models.associations import household_members
from homebase.models.entitlement import Entitlement
from homebase.models.household import Household
from homebase.models.user import User
from homebase.security.session import Identity


def count_members(db_session) -> int:
    return db_session.query(household_members).count()


@pytest.mark.integration
class TestOnboardingEndpoints:
    """Integration tests for household onboarding."""

    def test_unauthenticated_onboarding_writes_nothing(self, client, db_session):
        response = client.post("/api/onboarding/household", json={"name": "Test"})

        assert response.status_code == 401
        assert db_session.query(Household).count() == 0
        assert db_session.query(User).count() == 0
        assert db_session.query(Entitlement).count() == 0
        assert count_members(db_session) == 0

    def test_create_household(self, client, db_session, headers_for):
        carol = Identity(id="user_carol", email="carol@example.com", name="Carol")

        response = client.post(
            "/api/onboarding/household",
            json={"name": "Carol's Flat", "game_mode": "roommates"},
            headers=headers_for(carol, csrf=True),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Carol's Flat"
        assert data["plan"] == "free"
        assert data["game_mode"] == "roommates"
        assert data["created_by_id"] == "user_carol"

        current = client.get("/api/households/current", headers=headers_for(carol))
        assert current.json()["data"]["role"] == "owner"
        assert current.json()["data"]["household"]["id"] == data["id"]

    def test_second_household_is_conflict(self, client, db_session, alice_household, write_headers):
        response = client.post("/api/onboarding/household", json={"name": "Another"}, headers=write_headers)

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict"
        assert db_session.query(Household).count() == 1

    def test_missing_csrf_writes_nothing(self, client, db_session, headers_for):
        carol = Identity(id="user_carol")

        response = client.post("/api/onboarding/household", json={"name": "Test"}, headers=headers_for(carol))

        assert response.status_code == 403
        assert db_session.query(Household).count() == 0

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"name": ""},
            {"name": "x" * 101},
            {"name": "Ok", "game_mode": "commune"},
        ],
    )
    def test_invalid_body_is_400(self, client, db_session, headers_for, body):
        carol = Identity(id="user_carol")

        response = client.post("/api/onboarding/household", json=body, headers=headers_for(carol, csrf=True))

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"
        assert response.json()["details"]
        assert db_session.query(Household).count() == 0

    def test_non_json_body_is_400(self, client, headers_for):
        carol = Identity(id="user_carol")
        headers = {**headers_for(carol, csrf=True), "Content-Type": "application/json"}

        response = client.post("/api/onboarding/household", content=b"{not json", headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Request body must be valid JSON"
