"""
Accès aux données pour la feature 'payments' (table 'payments').
transaction_id est UNIQUE côté base: c'est la seule garde d'idempotence du règlement.
"""
from typing import Any, Dict, List, Optional
import logging
from postgrest.exceptions import APIError
import homechef.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# module homechef.payments.repository
def insert_payment_record(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Insère l'enregistrement de paiement.
    Retourne None en cas de doublon (23505): le service traite alors un rejeu idempotent.
    Toute autre erreur du store est propagée.
    """
    try:
        res = supabase_client.get_service_supabase().table("payments").insert(data).execute()
    except APIError as e:
        if supabase_client.error_code(e) == supabase_client.UNIQUE_VIOLATION:
            return None
        logger.exception("payments.repository.insert_payment_record failed transaction_id=%s", data.get("transaction_id"))
        raise
    rows = res.data or []
    return rows[0] if rows else dict(data)

def get_payment_by_transaction(transaction_id: str) -> Optional[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("payments")
        .select("*")
        .eq("transaction_id", transaction_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def get_payment_for_order(order_id: str) -> Optional[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("payments")
        .select("*")
        .eq("order_id", order_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def list_payments_for_buyer(buyer_email: str, limit: int = 100) -> List[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("payments")
        .select("*")
        .eq("buyer_email", buyer_email)
        .order("paid_at", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []
