import pytest
from sqlalchemy.exc import SQLAlchemyError

from recipe_discovery.app.db.models import Difficulty
from recipe_discovery.app.schemas.auth import CurrentUser
from recipe_discovery.app.schemas.recipe import Recipe
from recipe_discovery.app.services import saved_recipes_service


def recipe_payload(name="Garlic Chicken"):
    return {
        "name": name,
        "haveIngredients": ["chicken", "garlic"],
        "needIngredients": ["1 lemon", "2 tbsp butter"],
        "steps": ["Season the chicken.", "Pan-fry until golden."],
        "prepTime": "10 minutes",
        "cookTime": "25 minutes",
        "servings": 2,
        "difficulty": "medium",
        "nutritionalInfo": {"calories": "450", "protein": "35g", "carbs": "5g", "fats": "20g"},
        "tips": ["Let the pan get hot first."],
        "youtubeUrl": "https://www.youtube.com/results?search_query=how+to+cook+Garlic+Chicken",
    }


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_save_recipe_and_scoping(client, db_session, user_token):
    response = client.post("/recipes", json=recipe_payload(), headers=auth(user_token))
    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == "user-1"
    assert body["title"] == "Garlic Chicken"
    assert body["description"] == "Recipe for Garlic Chicken"
    assert body["ingredients"] == ["1 lemon", "2 tbsp butter", "chicken", "garlic"]
    assert body["instructions"] == ["Season the chicken.", "Pan-fry until golden."]
    assert body["cooking_time"] == 25
    assert body["difficulty"] == "medium"
    assert body["nutritional_info"]["protein"] == "35g"

    other = CurrentUser(id="user-2", email="user2@example.com")
    saved_recipes_service.save_recipe(db_session, other, Recipe.model_validate(recipe_payload("Other User Recipe")))

    list_response = client.get("/recipes", headers=auth(user_token))
    assert list_response.status_code == 200
    titles = {r["title"] for r in list_response.json()}
    assert "Garlic Chicken" in titles
    assert "Other User Recipe" not in titles


def test_save_requires_complete_recipe(client, user_token):
    bad_payload = recipe_payload()
    bad_payload["servings"] = 0
    response = client.post("/recipes", json=bad_payload, headers=auth(user_token))
    assert response.status_code == 422

    bad_payload = recipe_payload()
    del bad_payload["steps"]
    response = client.post("/recipes", json=bad_payload, headers=auth(user_token))
    assert response.status_code == 422


def test_list_is_newest_first_and_limited(client, user_token):
    for name in ("First", "Second", "Third"):
        assert client.post("/recipes", json=recipe_payload(name), headers=auth(user_token)).status_code == 201

    titles = [r["title"] for r in client.get("/recipes", headers=auth(user_token)).json()]
    assert titles == ["Third", "Second", "First"]

    limited = client.get("/recipes", params={"limit": 2}, headers=auth(user_token)).json()
    assert [r["title"] for r in limited] == ["Third", "Second"]


def test_get_and_delete_are_owner_only(client, user_token, other_user_token):
    recipe_id = client.post("/recipes", json=recipe_payload(), headers=auth(user_token)).json()["id"]

    assert client.get(f"/recipes/{recipe_id}", headers=auth(other_user_token)).status_code == 404
    assert client.delete(f"/recipes/{recipe_id}", headers=auth(other_user_token)).status_code == 404

    response = client.get(f"/recipes/{recipe_id}", headers=auth(user_token))
    assert response.status_code == 200
    assert response.json()["title"] == "Garlic Chicken"

    assert client.delete(f"/recipes/{recipe_id}", headers=auth(user_token)).status_code == 204
    assert client.get(f"/recipes/{recipe_id}", headers=auth(user_token)).status_code == 404


def test_recent_for_anonymous_uses_samples(client):
    response = client.get("/recipes/recent")
    assert response.status_code == 200
    names = [r["name"] for r in response.json()]
    assert names == ["Quick Pasta Primavera", "Chicken Stir Fry", "Mediterranean Salad"]

    limited = client.get("/recipes/recent", params={"limit": 1}).json()
    assert [r["name"] for r in limited] == ["Quick Pasta Primavera"]


def test_recent_for_user_without_saves_uses_samples(client, user_token):
    response = client.get("/recipes/recent", headers=auth(user_token))
    assert response.status_code == 200
    assert response.json()[0]["name"] == "Quick Pasta Primavera"


def test_recent_converts_saved_records(client, user_token):
    client.post("/recipes", json=recipe_payload(), headers=auth(user_token))

    response = client.get("/recipes/recent", headers=auth(user_token))
    assert response.status_code == 200
    recipes = response.json()
    assert len(recipes) == 1
    recipe = recipes[0]
    assert recipe["name"] == "Garlic Chicken"
    assert recipe["haveIngredients"] == ["1 lemon", "2 tbsp butter", "chicken"]
    assert recipe["needIngredients"] == ["garlic"]
    assert recipe["prepTime"] == "15 minutes"
    assert recipe["cookTime"] == "25 minutes"
    assert recipe["difficulty"] == "medium"
    assert recipe["youtubeUrl"].endswith("how+to+cook+Garlic+Chicken")


def test_parse_cooking_time():
    assert saved_recipes_service.parse_cooking_time("25 minutes") == 25
    assert saved_recipes_service.parse_cooking_time("about an hour") is None
    assert saved_recipes_service.parse_cooking_time(None) is None


def test_to_recipe_defaults_missing_fields(db_session):
    user = CurrentUser(id="user-3", email=None)
    payload = recipe_payload("Mystery Stew")
    payload["cookTime"] = "a while"
    saved = saved_recipes_service.save_recipe(db_session, user, Recipe.model_validate(payload))
    saved.difficulty = "impossible"

    recipe = saved_recipes_service.to_recipe(saved)
    assert saved.cooking_time is None
    assert recipe.cook_time == "20 minutes"
    assert recipe.difficulty == Difficulty.MEDIUM


class SessionFaults:
    """Makes selected session calls raise and records rollbacks."""

    def __init__(self, session, monkeypatch):
        self.session = session
        self.monkeypatch = monkeypatch
        self.rollbacks = []
        monkeypatch.setattr(session, "rollback", lambda: self.rollbacks.append(True))

    def fail(self, name):
        def raise_error(*args, **kwargs):
            raise SQLAlchemyError(f"{name} failed")

        self.monkeypatch.setattr(self.session, name, raise_error)


@pytest.fixture
def failing_db(db_session, monkeypatch):
    return SessionFaults(db_session, monkeypatch)


def test_save_failure_rolls_back_and_reports_unavailable(client, failing_db, user_token):
    failing_db.fail("commit")

    response = client.post("/recipes", json=recipe_payload(), headers=auth(user_token))
    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to save recipe"
    assert failing_db.rollbacks


def test_list_failure_reports_unavailable(client, failing_db, user_token):
    failing_db.fail("scalars")

    response = client.get("/recipes", headers=auth(user_token))
    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to load saved recipes"
    assert failing_db.rollbacks


def test_get_failure_reports_unavailable(client, failing_db, user_token):
    failing_db.fail("scalars")

    response = client.get("/recipes/1", headers=auth(user_token))
    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to load recipe"


def test_delete_failure_rolls_back_and_reports_unavailable(client, db_session, user_token, monkeypatch):
    recipe_id = client.post("/recipes", json=recipe_payload(), headers=auth(user_token)).json()["id"]
    faults = SessionFaults(db_session, monkeypatch)
    faults.fail("commit")

    response = client.delete(f"/recipes/{recipe_id}", headers=auth(user_token))
    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to delete recipe"
    assert faults.rollbacks


def test_recent_falls_back_to_samples_when_load_fails(client, failing_db, user_token):
    failing_db.fail("scalars")

    response = client.get("/recipes/recent", headers=auth(user_token))
    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == [
        "Quick Pasta Primavera",
        "Chicken Stir Fry",
        "Mediterranean Salad",
    ]
