"""Parcours complet: commande, paiement Stripe (double retour navigateur), livraison, avis."""
from fastapi.testclient import TestClient

from tests.fakes import BUYER, CHEF


def test_order_payment_delivery_review(client: TestClient, login_as, fake_db, meal, fake_stripe):
    # 1) l'acheteur commande 2 portions à 20.00
    order = client.post("/orders", json={"mealId": "meal-1", "quantity": 2}).json()
    oid = order["id"]

    # 2) session Stripe au montant calculé côté serveur
    session = client.post("/create-payment-session", json={"orderId": oid}).json()
    assert session["amount"] == 4000
    assert fake_stripe.sessions[session["id"]]["amount_total"] == 4000

    # 3) retour navigateur avant confirmation Stripe: rien n'est écrit
    assert client.patch(f"/payment-success?session_id={session['id']}").status_code == 402

    # 4) paiement confirmé, redirection rejouée (rechargement de page)
    fake_stripe.pay(session["id"], "pi_flow")
    first = client.patch(f"/payment-success?session_id={session['id']}").json()
    second = client.patch(f"/payment-success?session_id={session['id']}").json()
    assert (first["replay"], second["replay"]) == (False, True)
    assert len(fake_db.rows("payments")) == 1
    assert client.post("/create-payment-session", json={"orderId": oid}).status_code == 409

    # 5) le chef fait avancer la commande; le paiement reste acquis
    login_as(CHEF)
    for status in ("accepted", "in_progress", "delivered"):
        assert client.patch(f"/orders/{oid}/status", json={"status": status}).status_code == 200
    stored = fake_db.get("orders", oid)
    assert (stored["order_status"], stored["payment_status"]) == ("delivered", "paid")

    # 6) l'acheteur note le plat, puis corrige sa note
    login_as(BUYER)
    rid = client.post("/reviews", json={"mealId": "meal-1", "rating": 3}).json()["id"]
    client.patch(f"/reviews/{rid}", json={"rating": 5})
    m = client.get("/meals/meal-1").json()
    assert (m["review_count"], m["rating"]) == (1, 5)
