import pytest

from homebase.models.recipe import Recipe
from homebase.models.shopping import ShoppingItem, ShoppingList
from homebase.schemas.recipe import RecipeCreate
from homebase.schemas.shopping import ShoppingItemCreate, ShoppingListCreate
from homebase.services.recipe_service import RecipeService
from homebase.services.shopping_service import ShoppingService


@pytest.fixture
def bob_list(db_session, bob_household):
    return ShoppingService(db_session).create_list(bob_household, "user_bob", ShoppingListCreate(name="Bob's list"))


@pytest.fixture
def bob_recipe(db_session, bob_household):
    return RecipeService(db_session).create_recipe(bob_household, "user_bob", RecipeCreate(title="Bob's stew"))


@pytest.mark.integration
class TestTenantIsolation:
    """Records of another household look exactly like missing ones."""

    def test_delete_other_households_list_is_404(self, client, db_session, alice_household, bob_list, write_headers):
        response = client.delete(f"/api/shopping-lists/{bob_list.id}", headers=write_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Shopping list not found"
        assert db_session.query(ShoppingList).filter_by(id=bob_list.id).count() == 1

    def test_missing_and_foreign_look_the_same(self, client, alice_household, bob_list, write_headers):
        foreign = client.delete(f"/api/shopping-lists/{bob_list.id}", headers=write_headers)
        missing = client.delete("/api/shopping-lists/99999", headers=write_headers)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()

    def test_read_other_households_recipe_is_404(self, client, alice_household, bob_recipe, auth_headers):
        response = client.get(f"/api/recipes/{bob_recipe.id}", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_other_households_recipe_is_404(self, client, db_session, alice_household, bob_recipe, write_headers):
        response = client.delete(f"/api/recipes/{bob_recipe.id}", headers=write_headers)

        assert response.status_code == 404
        assert db_session.query(Recipe).count() == 1

    def test_body_household_id_is_ignored(self, client, db_session, alice_household, bob_household, write_headers):
        response = client.post(
            "/api/recipes",
            json={"title": "Sneaky pie", "household_id": bob_household.household_id},
            headers=write_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["household_id"] == alice_household.household_id
        recipe = db_session.query(Recipe).one()
        assert recipe.household_id == alice_household.household_id

    def test_add_item_to_other_households_list_is_404(self, client, db_session, alice_household, bob_list, write_headers):
        response = client.post(
            f"/api/shopping-lists/{bob_list.id}/items", json={"name": "Milk"}, headers=write_headers
        )

        assert response.status_code == 404
        assert db_session.query(ShoppingItem).count() == 0

    def test_update_item_through_own_list_but_foreign_item_is_404(
        self, client, db_session, alice_household, bob_household, bob_list, write_headers
    ):
        service = ShoppingService(db_session)
        own_list = service.create_list(alice_household, "user_alice", ShoppingListCreate(name="Mine"))
        bob_item = service.add_item(bob_household, "user_bob", bob_list.id, ShoppingItemCreate(name="Eggs"))

        response = client.patch(
            f"/api/shopping-lists/{own_list.id}/items/{bob_item.id}",
            json={"is_complete": True},
            headers=write_headers,
        )

        assert response.status_code == 404
        db_session.refresh(bob_item)
        assert bob_item.is_complete is False

    def test_confirm_foreign_items_is_404(self, client, alice_household, bob_household, bob_list, db_session, write_headers):
        bob_item = ShoppingService(db_session).add_item(
            bob_household, "user_bob", bob_list.id, ShoppingItemCreate(name="Eggs")
        )

        response = client.post(
            "/api/shopping-lists/confirm-items", json={"item_ids": [bob_item.id]}, headers=write_headers
        )

        assert response.status_code == 404

    def test_lists_only_show_own_household(self, client, alice_household, bob_list, auth_headers):
        response = client.get("/api/shopping-lists", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == []
