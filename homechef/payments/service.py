"""
Cas d'usage 'payments': création de session Stripe et règlement idempotent.

Règlement (confirm_settlement), déclenché au moins une fois par le retour navigateur:
1) lecture de la session Stripe (échec -> UpstreamError, rien n'est écrit)
2) session non payée -> PaymentPendingError, rien n'est écrit
3) insertion de l'enregistrement de paiement, unique par transaction_id
   (doublon = rejeu idempotent)
4) commande marquée payée, sur le premier passage comme sur un rejeu: un arrêt entre
   3) et 4) est réparé par la confirmation suivante
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

import stripe

from homechef import config
from homechef.orders import repository as orders_repository
from homechef.orders import service as orders_service
from homechef.orders.models import PAID
from homechef.utils.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PaymentPendingError,
    UpstreamError,
    ValidationError,
)
from . import checkout
from . import repository
from . import stripe_client
from . import metadata as meta

logger = logging.getLogger(__name__)

def create_payment_session(order_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Prépare la session Stripe Checkout d'une commande de l'utilisateur.
    Montant = floor(prix x quantité) en unités mineures, calculé depuis la commande stockée.
    """
    order = orders_service.get_order(order_id, user)
    if order.get("buyer_email") != user.get("email"):
        raise NotFoundError("Commande introuvable")
    if order.get("payment_status") == PAID:
        raise ConflictError("Commande déjà payée", code="already_paid")

    quantity = int(order.get("quantity") or 0)
    amount = checkout.to_minor_units(order.get("price"), quantity)
    meal_name = order.get("meal_name") or ""
    success_url = f"{config.CLIENT_DOMAIN}{config.CHECKOUT_SUCCESS_PATH}?session_id={{CHECKOUT_SESSION_ID}}"
    cancel_url = f"{config.CLIENT_DOMAIN}{config.CHECKOUT_CANCEL_PATH}"

    try:
        session = stripe_client.create_session(
            line_items=checkout.to_line_items(meal_name, quantity, amount, config.STRIPE_CURRENCY),
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=checkout.make_metadata(order_id, meal_name, user.get("email")),
            customer_email=user.get("email"),
        )
    except stripe.StripeError as e:
        logger.exception("payments.service.create_payment_session stripe failure order_id=%s", order_id)
        raise UpstreamError(f"Stripe indisponible: {e.user_message or 'erreur inconnue'}")

    logger.info("payments.service.create_payment_session order_id=%s amount=%s session=%s", order_id, amount, session.get("id"))
    return {"id": session.get("id"), "url": session.get("url"), "amount": amount}

def confirm_settlement(session_id: str, user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Confirme le règlement d'une session Checkout. Rejouable sans effet de bord dupliqué.
    Retour: {success, transactionId, orderId, replay, message}
    """
    if not session_id:
        raise ValidationError("session_id manquant")

    try:
        session = stripe_client.get_session(session_id)
    except stripe.StripeError as e:
        logger.exception("payments.service.confirm_settlement stripe failure session=%s", session_id)
        raise UpstreamError(f"Stripe indisponible: {e.user_message or 'erreur inconnue'}")

    payment_status = session.get("payment_status") or ""
    if payment_status != "paid":
        raise PaymentPendingError(f"Paiement non confirmé (payment_status={payment_status or 'inconnu'})")

    transaction_id = meta.transaction_id_from_session(session)
    order_id, meal_name, buyer_email = meta.extract_metadata_from_session(session)
    if not transaction_id or not order_id:
        raise ValidationError("Session Stripe sans commande associée")

    order = orders_repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable")
    owner = buyer_email or order.get("buyer_email")
    if user is not None and user.get("role") != "admin" and owner != user.get("email"):
        raise ForbiddenError("Session appartenant à un autre utilisateur")

    record = repository.insert_payment_record({
        "transaction_id": transaction_id,
        "order_id": order_id,
        "buyer_email": buyer_email or order.get("buyer_email"),
        "meal_name": meal_name or order.get("meal_name"),
        "amount": session.get("amount_total"),
        "currency": session.get("currency") or config.STRIPE_CURRENCY,
        "paid_at": datetime.now(timezone.utc).isoformat(),
    })
    replay = record is None

    orders_service.mark_order_paid(order_id, transaction_id)

    if replay:
        logger.info("payments.service.confirm_settlement replay transaction_id=%s order_id=%s", transaction_id, order_id)
        message = "Paiement déjà enregistré"
    else:
        logger.info("payments.service.confirm_settlement settled transaction_id=%s order_id=%s", transaction_id, order_id)
        message = "Paiement enregistré"
    return {
        "success": True,
        "transactionId": transaction_id,
        "orderId": order_id,
        "replay": replay,
        "message": message,
    }

def list_payments_for_buyer(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return repository.list_payments_for_buyer(user.get("email"))
