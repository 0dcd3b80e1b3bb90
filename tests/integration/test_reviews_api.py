import pytest
from fastapi.testclient import TestClient

from homechef.utils.security import get_current_user
from tests.fakes import OTHER_BUYER


def test_create_review_requires_bearer(app, client: TestClient, meal):
    app.dependency_overrides.pop(get_current_user, None)
    r = client.post("/reviews", json={"mealId": "meal-1", "rating": 4})
    assert r.status_code == 401


def test_create_review_updates_meal(client: TestClient, fake_db, meal):
    r = client.post("/reviews", json={"mealId": "meal-1", "rating": 4, "body": "Délicieux"})
    assert r.status_code == 201, r.text
    assert r.json()["rating"] == 4

    m = client.get("/meals/meal-1").json()
    assert m["review_count"] == 1
    assert m["rating"] == 4

    reviews = client.get("/meals/meal-1/reviews").json()
    assert [rv["body"] for rv in reviews] == ["Délicieux"]


@pytest.mark.parametrize("rating", [0, 6])
def test_create_review_out_of_range_rejected(client: TestClient, fake_db, meal, rating):
    r = client.post("/reviews", json={"mealId": "meal-1", "rating": rating})
    assert r.status_code == 422
    assert fake_db.rows("reviews") == []


def test_create_review_unknown_meal(client: TestClient, fake_db):
    r = client.post("/reviews", json={"mealId": "ghost", "rating": 4})
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"


def test_patch_and_delete_review(client: TestClient, fake_db, meal):
    client.post("/reviews", json={"mealId": "meal-1", "rating": 4})
    rid = client.post("/reviews", json={"mealId": "meal-1", "rating": 3}).json()["id"]

    r = client.patch(f"/reviews/{rid}", json={"rating": 5})
    assert r.status_code == 200
    m = fake_db.get("meals", "meal-1")
    assert (m["review_count"], m["review_sum"], m["rating"]) == (2, 9, 4.5)

    r = client.delete(f"/reviews/{rid}")
    assert r.status_code == 200
    assert r.json() == {"deleted": 1, "id": rid}
    m = fake_db.get("meals", "meal-1")
    assert (m["review_count"], m["review_sum"], m["rating"]) == (1, 4, 4)


def test_other_user_cannot_edit(client: TestClient, login_as, fake_db, meal):
    rid = client.post("/reviews", json={"mealId": "meal-1", "rating": 3}).json()["id"]

    login_as(OTHER_BUYER)
    assert client.patch(f"/reviews/{rid}", json={"rating": 1}).status_code == 403
    assert client.delete(f"/reviews/{rid}").status_code == 403
    assert fake_db.get("meals", "meal-1")["review_sum"] == 3


def test_unknown_meal_page(client: TestClient, fake_db):
    r = client.get("/meals/ghost")
    assert r.status_code == 404
