"""
Module 'payments' (feature-first): point d'entrée public.
Réunit la logique de checkout pure, la lecture des sessions Stripe, le client Stripe
et le repository des enregistrements de paiement. Les cas d'usage sont dans .service.
"""

from .checkout import to_minor_units, to_line_items, make_metadata
from .metadata import extract_metadata_from_session, transaction_id_from_session

__all__ = [
    # checkout
    "to_minor_units",
    "to_line_items",
    "make_metadata",
    # metadata
    "extract_metadata_from_session",
    "transaction_id_from_session",
]
