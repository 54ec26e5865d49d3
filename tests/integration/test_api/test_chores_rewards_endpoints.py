from datetime import date
from decimal import Decimal

import pytest

from homebase.core.plans import PlanTier
from homebase.models.finance import Bill
from homebase.models.rewards import RewardRedemption
from homebase.models.user import User
from homebase.services.points_service import PointsService


@pytest.mark.integration
class TestChoreEndpoints:
    """Integration tests for chores and the leaderboard they feed."""

    def test_completion_moves_leaderboard(self, client, db_session, alice_household, write_headers, auth_headers):
        created = client.post(
            "/api/chores", json={"title": "Hoover", "xp_reward": 30, "coin_reward": 4}, headers=write_headers
        )
        assert created.status_code == 201
        chore_id = created.json()["data"]["id"]

        completed = client.post(f"/api/chores/{chore_id}/complete", headers=write_headers)

        assert completed.status_code == 201
        data = completed.json()["data"]
        assert data["completion"]["completed_by_id"] == "user_alice"
        assert (data["xp"], data["coins"]) == (30, 4)

        board = client.get("/api/leaderboard", headers=auth_headers).json()["data"]
        assert board[0]["xp"] == 30
        assert board[0]["coins"] == 4

        completions = client.get("/api/chores/completions", headers=auth_headers).json()["data"]
        assert [c["chore_id"] for c in completions] == [chore_id]

    def test_complete_needs_csrf(self, client, db_session, alice_household, write_headers, auth_headers):
        chore_id = client.post("/api/chores", json={"title": "Hoover"}, headers=write_headers).json()["data"]["id"]

        response = client.post(f"/api/chores/{chore_id}/complete", headers=auth_headers)

        assert response.status_code == 403
        db_session.expire_all()
        assert db_session.get(User, "user_alice").xp == 0

    def test_foreign_chore_is_404(self, client, alice_household, bob, bob_household, headers_for, write_headers):
        chore_id = client.post(
            "/api/chores", json={"title": "Hoover"}, headers=headers_for(bob, csrf=True)
        ).json()["data"]["id"]

        response = client.post(f"/api/chores/{chore_id}/complete", headers=write_headers)

        assert response.status_code == 404
        assert client.delete(f"/api/chores/{chore_id}", headers=write_headers).status_code == 404

    def test_assignee_outside_household_is_400(self, client, alice_household, bob_household, write_headers):
        response = client.post(
            "/api/chores", json={"title": "Hoover", "assigned_to_id": "user_bob"}, headers=write_headers
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "validation"


@pytest.mark.integration
class TestRewardEndpoints:
    """Integration tests for reward redemption."""

    @pytest.fixture
    def reward_id(self, client, alice_household, write_headers):
        created = client.post("/api/rewards", json={"name": "Pick dinner", "points_cost": 20}, headers=write_headers)
        assert created.status_code == 201
        return created.json()["data"]["id"]

    def test_insufficient_coins_is_400(self, client, db_session, reward_id, write_headers):
        PointsService(db_session).award("user_alice", coins=19)

        response = client.post(f"/api/rewards/{reward_id}/redeem", json={"quantity": 1}, headers=write_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Insufficient reward coins"
        assert db_session.query(RewardRedemption).count() == 0

    def test_redeem(self, client, db_session, reward_id, write_headers, auth_headers):
        PointsService(db_session).award("user_alice", coins=50)

        response = client.post(f"/api/rewards/{reward_id}/redeem", json={"quantity": 2}, headers=write_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["remaining_coins"] == 10
        assert data["redemption"]["total_cost"] == 40

        history = client.get("/api/rewards/redemptions", params={"mine": True}, headers=auth_headers)
        assert [r["reward_id"] for r in history.json()["data"]] == [reward_id]

    def test_zero_quantity_is_400(self, client, db_session, reward_id, write_headers):
        PointsService(db_session).award("user_alice", coins=50)

        response = client.post(f"/api/rewards/{reward_id}/redeem", json={"quantity": 0}, headers=write_headers)

        assert response.status_code == 400

    def test_foreign_reward_is_404(self, client, db_session, reward_id, bob, bob_household, headers_for):
        PointsService(db_session).award("user_bob", coins=100)

        response = client.post(
            f"/api/rewards/{reward_id}/redeem", json={"quantity": 1}, headers=headers_for(bob, csrf=True)
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Reward not found or access denied"
        assert PointsService(db_session).balance("user_bob") == (0, 100)


@pytest.mark.integration
class TestMarkBillPaid:
    BILL = {"name": "Council tax", "amount": "120.50", "due_date": "2030-04-01"}

    def test_mark_paid(self, client, db_session, alice_household, write_headers, set_plan):
        set_plan(alice_household.household_id, PlanTier.PRO)
        bill_id = client.post("/api/finance/bills", json=self.BILL, headers=write_headers).json()["data"]["id"]

        response = client.post(
            f"/api/finance/bills/{bill_id}/mark-paid",
            json={"paid_date": "2030-03-28", "payment_method": "card"},
            headers=write_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_paid"] is True
        assert data["paid_date"] == "2030-03-28"
        assert data["payment_method"] == "card"

    def test_mark_paid_without_body(self, client, alice_household, write_headers, set_plan):
        set_plan(alice_household.household_id, PlanTier.PRO)
        bill_id = client.post("/api/finance/bills", json=self.BILL, headers=write_headers).json()["data"]["id"]

        response = client.post(f"/api/finance/bills/{bill_id}/mark-paid", headers=write_headers)

        assert response.status_code == 200
        assert response.json()["data"]["is_paid"] is True

    def test_free_plan_is_403(self, client, db_session, alice_household, write_headers):
        bill = Bill(
            name="Rent", amount=Decimal("900.00"), due_date=date(2030, 4, 1), household_id=alice_household.household_id
        )
        db_session.add(bill)
        db_session.commit()

        response = client.post(f"/api/finance/bills/{bill.id}/mark-paid", headers=write_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "UPGRADE_REQUIRED"
        db_session.refresh(bill)
        assert bill.is_paid is False

    def test_unknown_bill_is_404(self, client, alice_household, write_headers, set_plan):
        set_plan(alice_household.household_id, PlanTier.PRO)

        response = client.post("/api/finance/bills/999/mark-paid", headers=write_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Bill not found"
