"""
Accès aux données pour la table 'meals'.
Les écritures d'agrégats sont conditionnelles sur la colonne 'version'
(compare-and-set): zéro ligne modifiée signifie qu'un autre écrivain est passé avant.
"""
from typing import Any, Dict, List, Optional
import logging
import homechef.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

AGGREGATE_COLUMNS = "id, review_count, review_sum, rating, version"

# module homechef.meals.repository
def get_meal(meal_id: str) -> Optional[Dict[str, Any]]:
    if not meal_id:
        return None
    res = (
        supabase_client.get_supabase()
        .table("meals")
        .select("*")
        .eq("id", meal_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def get_meal_aggregate(meal_id: str) -> Optional[Dict[str, Any]]:
    """Lecture fraîche (client service) des seuls champs d'agrégat + version."""
    res = (
        supabase_client.get_service_supabase()
        .table("meals")
        .select(AGGREGATE_COLUMNS)
        .eq("id", meal_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def compare_and_set_aggregate(meal_id: str, expected_version: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    UPDATE meals SET fields, version = expected_version + 1
    WHERE id = meal_id AND version = expected_version.
    Retourne la ligne mise à jour, ou None si la version a changé entre-temps.
    """
    payload = dict(fields)
    payload["version"] = expected_version + 1
    res = (
        supabase_client.get_service_supabase()
        .table("meals")
        .update(payload)
        .eq("id", meal_id)
        .eq("version", expected_version)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def list_meals(limit: int = 50) -> List[Dict[str, Any]]:
    res = (
        supabase_client.get_supabase()
        .table("meals")
        .select("*")
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []
