# module homechef.reviews.views

"""Endpoints des avis.
- GET /meals/{meal_id}/reviews: lecture anonyme des avis d'un plat.
- POST /reviews: crée un avis et met à jour l'agrégat du plat.
- PATCH /reviews/{id}: modifie un avis (réagrège si la note change).
- DELETE /reviews/{id}: supprime un avis et retire sa note de l'agrégat.
Sécurité: les mutations exigent un bearer valide (require_user); seul l'auteur ou un admin modifie.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from homechef.reviews import service as reviews_service
from homechef.reviews.models import ReviewCreate, ReviewUpdate
from homechef.utils.rate_limit import optional_rate_limit
from homechef.utils.security import require_user

router = APIRouter(tags=["Reviews"])

@router.get("/meals/{meal_id}/reviews", response_model=List[Dict[str, Any]])
def meal_reviews(meal_id: str):
    return reviews_service.list_meal_reviews(meal_id)

@router.post("/reviews", status_code=201, dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_review(req: ReviewCreate, user: Dict[str, Any] = Depends(require_user)):
    return reviews_service.create_review(user, req.meal_id, req.rating, req.body)

@router.patch("/reviews/{review_id}")
def update_review(review_id: str, req: ReviewUpdate, user: Dict[str, Any] = Depends(require_user)):
    return reviews_service.update_review(user, review_id, req.model_dump(exclude_none=True))

@router.delete("/reviews/{review_id}")
def delete_review(review_id: str, user: Dict[str, Any] = Depends(require_user)):
    return reviews_service.delete_review(user, review_id)
