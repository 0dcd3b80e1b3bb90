"""Lecture publique des plats (listing et détail avec agrégats de notes)."""
from typing import Any, Dict, List
from fastapi import APIRouter, Query

from homechef.meals import repository
from homechef.utils.errors import NotFoundError

router = APIRouter(prefix="/meals", tags=["Meals"])

@router.get("", response_model=List[Dict[str, Any]])
def list_meals(limit: int = Query(50, ge=1, le=200)):
    return repository.list_meals(limit=limit)

@router.get("/{meal_id}")
def get_meal(meal_id: str) -> Dict[str, Any]:
    meal = repository.get_meal(meal_id)
    if not meal:
        raise NotFoundError("Plat introuvable")
    return meal
