# module homechef.orders.views

"""Endpoints des commandes.
- POST /orders: crée une commande (placed/unpaid) pour l'acheteur authentifié.
- GET /orders/mine, /orders/chef: commandes de l'acheteur / adressées au chef.
- GET /orders/{id}: détail, statut de paiement dérivé des enregistrements de paiement.
- PATCH /orders/{id}/status: transition de l'axe exécution (chef de la commande ou admin).
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from homechef.orders import service as orders_service
from homechef.orders.models import OrderCreate, OrderStatusUpdate
from homechef.utils.rate_limit import optional_rate_limit
from homechef.utils.security import require_chef, require_user

router = APIRouter(prefix="/orders", tags=["Orders"])

@router.post("", status_code=201, dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_order(req: OrderCreate, user: Dict[str, Any] = Depends(require_user)):
    return orders_service.create_order(user, req.meal_id, req.quantity, req.delivery_address)

@router.get("/mine", response_model=List[Dict[str, Any]])
def my_orders(user: Dict[str, Any] = Depends(require_user)):
    return orders_service.list_orders_for_buyer(user)

@router.get("/chef", response_model=List[Dict[str, Any]])
def chef_orders(user: Dict[str, Any] = Depends(require_chef)):
    return orders_service.list_orders_for_chef(user)

@router.get("/{order_id}")
def get_order(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    return orders_service.get_order(order_id, user)

@router.patch("/{order_id}/status")
def update_order_status(order_id: str, req: OrderStatusUpdate, user: Dict[str, Any] = Depends(require_chef)):
    return orders_service.transition_order(order_id, req.status, user)
