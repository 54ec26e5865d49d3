import pytest

from homebase.core.plans import PlanTier
from homebase.models.calendar import Event
from homebase.models.shopping import ShoppingItem, ShoppingList


@pytest.mark.integration
class TestShoppingListEndpoints:
    """Integration tests for shopping lists and items."""

    def test_list_lifecycle(self, client, db_session, alice_household, write_headers, auth_headers):
        created = client.post("/api/shopping-lists", json={"name": "Weekly"}, headers=write_headers)
        assert created.status_code == 201
        list_id = created.json()["data"]["id"]
        assert created.json()["data"]["household_id"] == alice_household.household_id

        item = client.post(
            f"/api/shopping-lists/{list_id}/items",
            json={"name": "Oat milk", "quantity": 2, "unit": "l"},
            headers=write_headers,
        )
        assert item.status_code == 201
        item_id = item.json()["data"]["id"]

        done = client.patch(
            f"/api/shopping-lists/{list_id}/items/{item_id}", json={"is_complete": True}, headers=write_headers
        )
        assert done.json()["data"]["is_complete"] is True

        fetched = client.get(f"/api/shopping-lists/{list_id}", headers=auth_headers)
        assert fetched.json()["data"]["total_items"] == 1
        assert fetched.json()["data"]["completed_items"] == 1

        renamed = client.patch(f"/api/shopping-lists/{list_id}", json={"name": "Weekend"}, headers=write_headers)
        assert renamed.json()["data"]["name"] == "Weekend"

        removed = client.delete(f"/api/shopping-lists/{list_id}/items/{item_id}", headers=write_headers)
        assert removed.status_code == 200

        deleted = client.delete(f"/api/shopping-lists/{list_id}", headers=write_headers)
        assert deleted.status_code == 200
        assert db_session.query(ShoppingList).count() == 0

    def test_confirm_items(self, client, alice_household, write_headers, auth_headers):
        recipe = client.post(
            "/api/recipes",
            json={"title": "Porridge", "ingredients": [{"name": "Oats", "amount": 100, "unit": "g"}]},
            headers=write_headers,
        ).json()["data"]
        client.post(
            "/api/meal-planner/assign",
            json={
                "week": "2030-01-09",
                "day": "monday",
                "slot": "breakfast",
                "recipe_id": recipe["id"],
                "also_add_to_list": True,
            },
            headers=write_headers,
        )
        groceries = client.get("/api/shopping-lists", headers=auth_headers).json()["data"][0]
        pending = [i["id"] for i in groceries["items"] if i["pending_confirmation"]]
        assert groceries["name"] == "Groceries"
        assert len(pending) == 1

        response = client.post(
            "/api/shopping-lists/confirm-items", json={"item_ids": pending}, headers=write_headers
        )

        assert response.status_code == 200
        assert all(not i["pending_confirmation"] for i in response.json()["data"])

    def test_empty_confirmation_is_400(self, client, alice_household, write_headers):
        response = client.post("/api/shopping-lists/confirm-items", json={"item_ids": []}, headers=write_headers)
        assert response.status_code == 400


@pytest.mark.integration
class TestCalendarEndpoints:
    """Integration tests for events and conflicts."""

    EVENT = {"title": "Parents evening", "start_at": "2030-03-04T18:00:00Z", "end_at": "2030-03-04T19:30:00Z"}

    def test_event_lifecycle(self, client, db_session, alice_household, write_headers, auth_headers):
        created = client.post("/api/events", json=self.EVENT, headers=write_headers)
        assert created.status_code == 201
        event_id = created.json()["data"]["id"]

        listed = client.get(
            "/api/events",
            params={"start": "2030-03-04T00:00:00Z", "end": "2030-03-05T00:00:00Z"},
            headers=auth_headers,
        )
        assert [e["id"] for e in listed.json()["data"]] == [event_id]

        updated = client.patch(f"/api/events/{event_id}", json={"location": "School hall"}, headers=write_headers)
        assert updated.json()["data"]["location"] == "School hall"

        deleted = client.delete(f"/api/events/{event_id}", headers=write_headers)
        assert deleted.status_code == 200
        assert db_session.query(Event).count() == 0

    def test_mixed_timezones_rejected(self, client, alice_household, write_headers):
        body = {**self.EVENT, "end_at": "2030-03-04T19:30:00"}
        response = client.post("/api/events", json=body, headers=write_headers)
        assert response.status_code == 400

    def test_conflicts_on_pro_plan(self, client, alice_household, write_headers, auth_headers, set_plan):
        set_plan(alice_household.household_id, PlanTier.PRO)
        client.post("/api/events", json=self.EVENT, headers=write_headers)
        client.post(
            "/api/events",
            json={"title": "Football", "start_at": "2030-03-04T19:00:00Z", "end_at": "2030-03-04T20:00:00Z"},
            headers=write_headers,
        )

        conflicts = client.get("/api/conflicts", headers=auth_headers).json()["data"]
        assert len(conflicts) == 1

        resolved = client.post(
            f"/api/conflicts/{conflicts[0]['id']}/resolve",
            json={"resolution_notes": "Grandma takes the kids"},
            headers=write_headers,
        )
        assert resolved.json()["data"]["resolved"] is True
        assert client.get("/api/conflicts", headers=auth_headers).json()["data"] == []

    def test_no_conflicts_on_free_plan(self, client, alice_household, write_headers, auth_headers):
        client.post("/api/events", json=self.EVENT, headers=write_headers)
        client.post("/api/events", json=self.EVENT, headers=write_headers)

        assert client.get("/api/conflicts", headers=auth_headers).json()["data"] == []


@pytest.mark.integration
class TestNullUpdates:
    """A null for a required column is a 400, and the row keeps its value."""

    def test_event_title_null(self, client, db_session, alice_household, write_headers):
        event_id = client.post("/api/events", json=TestCalendarEndpoints.EVENT, headers=write_headers).json()[
            "data"
        ]["id"]

        response = client.patch(f"/api/events/{event_id}", json={"title": None}, headers=write_headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "validation"
        db_session.expire_all()
        assert db_session.get(Event, event_id).title == "Parents evening"

    def test_event_start_null(self, client, alice_household, write_headers):
        event_id = client.post("/api/events", json=TestCalendarEndpoints.EVENT, headers=write_headers).json()[
            "data"
        ]["id"]

        response = client.patch(f"/api/events/{event_id}", json={"start_at": None}, headers=write_headers)

        assert response.status_code == 400

    def test_item_quantity_null(self, client, db_session, alice_household, write_headers):
        list_id = client.post("/api/shopping-lists", json={"name": "Weekly"}, headers=write_headers).json()[
            "data"
        ]["id"]
        item_id = client.post(
            f"/api/shopping-lists/{list_id}/items", json={"name": "Eggs", "quantity": 6}, headers=write_headers
        ).json()["data"]["id"]

        response = client.patch(
            f"/api/shopping-lists/{list_id}/items/{item_id}", json={"quantity": None}, headers=write_headers
        )

        assert response.status_code == 400
        db_session.expire_all()
        assert db_session.get(ShoppingItem, item_id).quantity == 6

    def test_list_name_null(self, client, db_session, alice_household, write_headers):
        list_id = client.post("/api/shopping-lists", json={"name": "Weekly"}, headers=write_headers).json()[
            "data"
        ]["id"]

        response = client.patch(f"/api/shopping-lists/{list_id}", json={"name": None}, headers=write_headers)

        assert response.status_code == 400
        db_session.expire_all()
        assert db_session.get(ShoppingList, list_id).name == "Weekly"
