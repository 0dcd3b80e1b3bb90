from typing import Any, Dict, List, Optional
import logging
import homechef.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# module homechef.orders.repository
def get_order(order_id: str) -> Optional[Dict[str, Any]]:
    if not order_id:
        return None
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select("*")
        .eq("id", order_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def insert_order(data: Dict[str, Any]) -> Dict[str, Any]:
    res = supabase_client.get_service_supabase().table("orders").insert(data).execute()
    rows = res.data or []
    return rows[0] if rows else dict(data)

def update_order_status(order_id: str, expected_status: str, new_status: str) -> Optional[Dict[str, Any]]:
    """Écriture conditionnelle sur le statut courant: None si un autre écrivain l'a changé."""
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .update({"order_status": new_status})
        .eq("id", order_id)
        .eq("order_status", expected_status)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def mark_paid(order_id: str, transaction_id: str) -> Optional[dict]:
    """Idempotent: réécrire 'paid' avec la même transaction ne change rien."""
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .update({"payment_status": "paid", "transaction_id": transaction_id})
        .eq("id", order_id)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def list_orders(field: str, value: str, limit: int = 100) -> List[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select("*")
        .eq(field, value)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []
