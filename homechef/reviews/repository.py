from typing import Any, Dict, List, Optional
import logging
import homechef.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# module homechef.reviews.repository
def get_review(review_id: str) -> Optional[Dict[str, Any]]:
    if not review_id:
        return None
    res = (
        supabase_client.get_service_supabase()
        .table("reviews")
        .select("*")
        .eq("id", review_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def list_reviews_for_meal(meal_id: str, limit: int = 100) -> List[Dict[str, Any]]:
    res = (
        supabase_client.get_supabase()
        .table("reviews")
        .select("*")
        .eq("meal_id", meal_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []

def insert_review(data: Dict[str, Any]) -> Dict[str, Any]:
    res = supabase_client.get_service_supabase().table("reviews").insert(data).execute()
    rows = res.data or []
    return rows[0] if rows else dict(data)

def update_review(review_id: str, data: Dict[str, Any], expected_rating: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """
    expected_rating: écriture conditionnelle sur la note lue (None = inconditionnelle).
    Retourne None si aucune ligne ne correspond.
    """
    query = (
        supabase_client.get_service_supabase()
        .table("reviews")
        .update(data)
        .eq("id", review_id)
    )
    if expected_rating is not None:
        query = query.eq("rating", expected_rating)
    res = query.execute()
    rows = res.data or []
    return rows[0] if rows else None

def delete_review(review_id: str, expected_rating: Optional[int] = None) -> int:
    """Retourne le nombre de lignes supprimées (0 si la note a changé entre-temps)."""
    query = (
        supabase_client.get_service_supabase()
        .table("reviews")
        .delete()
        .eq("id", review_id)
    )
    if expected_rating is not None:
        query = query.eq("rating", expected_rating)
    res = query.execute()
    return len(res.data or [])
