import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from homechef.utils.security import require_user
from homechef.utils.rate_limit import optional_rate_limit
from homechef.payments import service as payments_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Payments API"])

class PaymentSessionRequest(BaseModel):
    """
    Seul orderId fait foi: prix, quantité et nom du plat sont relus sur la commande.
    Les autres champs sont acceptés pour compatibilité avec le front.
    """
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId", min_length=1)
    price: Optional[float] = None
    quantity: Optional[int] = None
    meal_name: Optional[str] = Field(default=None, alias="mealName")
    user_email: Optional[str] = Field(default=None, alias="userEmail")

# module homechef.payments.views
@router.post("/create-payment-session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_payment_session(req: PaymentSessionRequest, user: Dict[str, Any] = Depends(require_user)):
    """
    Crée une session Checkout Stripe pour une commande de l’utilisateur authentifié.
    - Montant: floor(prix x quantité) en centimes, calculé côté serveur
    - Retour: {"id", "url", "amount"}; le front redirige vers url
    - Erreurs: 404 commande inconnue, 409 déjà payée, 502 Stripe indisponible
    """
    return payments_service.create_payment_session(req.order_id, user)

@router.patch("/payment-success")
def payment_success(session_id: str, user: Dict[str, Any] = Depends(require_user)):
    """
    Confirme le règlement après la redirection Stripe (?session_id=...).
    - Idempotent: rejouer la même session renvoie success + replay=true sans nouvel enregistrement
    - Erreurs: 402 paiement en attente, 502 Stripe indisponible (rejouable), 404 commande inconnue
    """
    return payments_service.confirm_settlement(session_id, user)

@router.get("/payments/mine", response_model=List[Dict[str, Any]])
def my_payments(user: Dict[str, Any] = Depends(require_user)):
    return payments_service.list_payments_for_buyer(user)
