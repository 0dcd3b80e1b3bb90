"""
Logique de checkout pure (pas de Stripe, pas de DB): montants, line_items, metadata.
"""
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Any, Dict, List

from homechef.utils.errors import ValidationError

# module homechef.payments.checkout
def to_minor_units(price: Any, quantity: Any = 1) -> int:
    """
    Montant total en unités mineures (centimes), arrondi à l'unité inférieure.
    - Calcul en Decimal à partir de la représentation texte: 0.29 donne 29, pas 28.
    - Soulève ValidationError si prix/quantité invalides ou montant nul.
    """
    try:
        unit = Decimal(str(price))
        qty = int(quantity)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Prix ou quantité invalide")
    if not unit.is_finite() or unit <= 0 or qty <= 0:
        raise ValidationError("Prix ou quantité invalide")
    amount = int((unit * qty * 100).to_integral_value(rounding=ROUND_FLOOR))
    if amount <= 0:
        raise ValidationError("Montant nul")
    return amount

def to_line_items(meal_name: str, quantity: int, amount: int, currency: str) -> List[Dict[str, Any]]:
    """
    Une seule ligne portant le total: Stripe facture exactement 'amount'.
    """
    return [{
        "quantity": 1,
        "price_data": {
            "currency": currency,
            "unit_amount": amount,
            "product_data": {
                "name": meal_name or "Plat",
                "description": f"Quantité: {quantity}",
            },
        },
    }]

def make_metadata(order_id: str, meal_name: str, buyer_email: str) -> Dict[str, str]:
    """Métadonnées relues à la confirmation (toutes les valeurs en str, limite Stripe 500 chars)."""
    return {
        "order_id": str(order_id),
        "meal_name": (meal_name or "")[:500],
        "buyer_email": buyer_email or "",
    }
