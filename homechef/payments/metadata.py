"""
Désérialisation des sessions Stripe Checkout (metadata + identifiant de transaction).
"""
from typing import Any, Dict, Tuple

# module homechef.payments.metadata
def extract_metadata_from_session(session: Dict[str, Any]) -> Tuple[str | None, str | None, str | None]:
    """
    Extrait (order_id, meal_name, buyer_email) depuis session["metadata"].
    """
    meta = (session or {}).get("metadata") or {}
    return meta.get("order_id"), meta.get("meal_name"), meta.get("buyer_email")

def transaction_id_from_session(session: Dict[str, Any]) -> str | None:
    """
    Identifiant de transaction stable: payment_intent (str ou objet étendu), sinon l'id de session.
    """
    intent = (session or {}).get("payment_intent")
    if isinstance(intent, dict):
        intent = intent.get("id")
    return intent or (session or {}).get("id")
