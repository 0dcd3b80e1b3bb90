from fastapi.testclient import TestClient

from tests.fakes import CHEF, OTHER_CHEF


def _place_order(client: TestClient, quantity: int = 2) -> dict:
    r = client.post("/orders", json={"mealId": "meal-1", "quantity": quantity, "deliveryAddress": "12 rue des Lilas"})
    assert r.status_code == 201, r.text
    return r.json()


def test_create_order(client: TestClient, fake_db, meal):
    order = _place_order(client)
    assert order["order_status"] == "placed"
    assert order["payment_status"] == "unpaid"
    assert order["price"] == 20.00

    mine = client.get("/orders/mine").json()
    assert [o["id"] for o in mine] == [order["id"]]


def test_create_order_invalid_quantity(client: TestClient, fake_db, meal):
    assert client.post("/orders", json={"mealId": "meal-1", "quantity": 0}).status_code == 422


def test_buyer_cannot_change_status(client: TestClient, fake_db, meal):
    order = _place_order(client)
    r = client.patch(f"/orders/{order['id']}/status", json={"status": "accepted"})
    assert r.status_code == 403


def test_chef_drives_fulfilment(client: TestClient, login_as, fake_db, meal):
    order = _place_order(client)
    login_as(CHEF)

    assert [o["id"] for o in client.get("/orders/chef").json()] == [order["id"]]
    for status in ("accepted", "in_progress", "delivered"):
        r = client.patch(f"/orders/{order['id']}/status", json={"status": status})
        assert r.status_code == 200, r.text
        assert r.json()["order_status"] == status


def test_status_errors(client: TestClient, login_as, fake_db, meal):
    order = _place_order(client)
    login_as(CHEF)

    r = client.patch(f"/orders/{order['id']}/status", json={"status": "cooking"})
    assert r.status_code == 400
    assert r.json()["code"] == "invalid"

    r = client.patch(f"/orders/{order['id']}/status", json={"status": "delivered"})
    assert r.status_code == 409
    assert r.json()["code"] == "invalid_transition"

    r = client.patch("/orders/ghost/status", json={"status": "accepted"})
    assert r.status_code == 404


def test_other_chef_forbidden(client: TestClient, login_as, fake_db, meal):
    order = _place_order(client)
    login_as(OTHER_CHEF)
    assert client.patch(f"/orders/{order['id']}/status", json={"status": "accepted"}).status_code == 403
    assert client.get(f"/orders/{order['id']}").status_code == 403
