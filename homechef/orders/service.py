"""Couche service des commandes: machine d'états à deux axes.
- Exécution: placed -> {accepted, rejected}, accepted -> in_progress, in_progress -> delivered.
  Transitions réservées au chef de la commande ou à un admin.
- Paiement: unpaid -> paid, écrit uniquement par le moteur de règlement (mark_order_paid).
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from homechef.meals import repository as meals_repository
from homechef.orders import repository
from homechef.orders.models import (
    FULFILLMENT_TRANSITIONS,
    ORDER_STATUSES,
    PAID,
    PLACED,
    UNPAID,
)
from homechef.payments import repository as payments_repository
from homechef.utils.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

def _is_admin(user: Dict[str, Any]) -> bool:
    return user.get("role") == "admin"

def _is_order_chef(order: Dict[str, Any], user: Dict[str, Any]) -> bool:
    return user.get("role") == "chef" and bool(order.get("chef_id")) and order.get("chef_id") == user.get("id")

def _with_derived_payment(order: Dict[str, Any]) -> Dict[str, Any]:
    # Un enregistrement de paiement fait foi, même si l'écriture sur la commande a été perdue
    if order.get("payment_status") == PAID:
        return order
    record = payments_repository.get_payment_for_order(order["id"])
    if not record:
        return order
    derived = dict(order)
    derived["payment_status"] = PAID
    derived["transaction_id"] = record.get("transaction_id")
    return derived

def create_order(user: Dict[str, Any], meal_id: str, quantity: int, delivery_address: Optional[str] = None) -> Dict[str, Any]:
    meal = meals_repository.get_meal(meal_id)
    if not meal:
        raise NotFoundError("Plat introuvable")
    if quantity < 1:
        raise ValidationError("Quantité invalide")

    order = repository.insert_order({
        "buyer_email": user.get("email"),
        "chef_id": meal.get("chef_id"),
        "meal_id": meal_id,
        "meal_name": meal.get("name"),
        "price": meal.get("price"),
        "quantity": quantity,
        "delivery_address": delivery_address,
        "order_status": PLACED,
        "payment_status": UNPAID,
        "created_at": datetime.now(timezone.utc).isoformat(),
    })
    logger.info("orders.service.create_order id=%s meal_id=%s qty=%s", order.get("id"), meal_id, quantity)
    return order

def get_order(order_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable")
    is_buyer = order.get("buyer_email") == user.get("email")
    if not (is_buyer or _is_admin(user) or _is_order_chef(order, user)):
        raise ForbiddenError("Commande appartenant à un autre utilisateur")
    return _with_derived_payment(order)

def list_orders_for_buyer(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [_with_derived_payment(o) for o in repository.list_orders("buyer_email", user.get("email"))]

def list_orders_for_chef(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [_with_derived_payment(o) for o in repository.list_orders("chef_id", user.get("id"))]

def transition_order(order_id: str, target: str, user: Dict[str, Any]) -> Dict[str, Any]:
    """Fait avancer l'axe exécution; rejette les statuts inconnus et les sauts d'étapes."""
    target = (target or "").strip().lower()
    if target not in ORDER_STATUSES:
        raise ValidationError(f"Statut inconnu: {target or '<vide>'}")

    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable")
    if not (_is_admin(user) or _is_order_chef(order, user)):
        raise ForbiddenError("Seul le chef de la commande ou un admin peut changer son statut")

    current = order.get("order_status") or PLACED
    if target not in FULFILLMENT_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Transition interdite: {current} -> {target}")

    updated = repository.update_order_status(order_id, current, target)
    if not updated:
        raise ConflictError("Le statut de la commande a changé entre-temps")
    logger.info("orders.service.transition_order id=%s %s -> %s by=%s", order_id, current, target, user.get("email"))
    return updated

def mark_order_paid(order_id: str, transaction_id: str) -> Dict[str, Any]:
    """Axe paiement: réservé au moteur de règlement, idempotent."""
    updated = repository.mark_paid(order_id, transaction_id)
    if not updated:
        raise NotFoundError("Commande introuvable")
    return updated
