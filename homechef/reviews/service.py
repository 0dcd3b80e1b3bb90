"""Couche service des avis.
Rôles:
- Créer, modifier et supprimer un avis en maintenant l'agrégat de notes du plat.
- L'agrégat est écrit en premier: un plat introuvable rejette la mutation avant
  toute écriture. Si l'écriture de l'avis échoue ensuite, l'agrégat est compensé.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List
import logging

from homechef.meals import aggregator
from homechef.reviews import repository
from homechef.utils.errors import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

def _compensate(action: Callable[[], Any], context: str) -> None:
    try:
        action()
    except Exception:
        logger.exception("reviews.service compensation failed during %s", context)

def _get_owned_review(review_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    review = repository.get_review(review_id)
    if not review:
        raise NotFoundError("Avis introuvable")
    if user.get("role") != "admin" and review.get("user_email") != user.get("email"):
        raise ForbiddenError("Avis appartenant à un autre utilisateur")
    return review

def list_meal_reviews(meal_id: str) -> List[Dict[str, Any]]:
    return repository.list_reviews_for_meal(meal_id)

def create_review(user: Dict[str, Any], meal_id: str, rating: int, body: str = "") -> Dict[str, Any]:
    aggregator.apply_new_review(meal_id, rating)
    try:
        review = repository.insert_review({
            "meal_id": meal_id,
            "user_email": user.get("email"),
            "rating": rating,
            "body": body or "",
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
    except Exception:
        logger.exception("reviews.service.create_review insert failed meal_id=%s", meal_id)
        _compensate(lambda: aggregator.retract_review(meal_id, rating), "create_review")
        raise
    logger.info("reviews.service.create_review meal_id=%s rating=%s", meal_id, rating)
    return review

def _lost_write(review_id: str) -> Exception:
    # Zéro ligne écrite: avis supprimé, ou note modifiée par une requête concurrente
    if repository.get_review(review_id) is None:
        return NotFoundError("Avis introuvable")
    return ConflictError("L'avis a été modifié entre-temps, réessayez")

def update_review(user: Dict[str, Any], review_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Modifie note et/ou texte; un changement de note remplace la contribution à l'agrégat.
    L'écriture de l'avis est conditionnelle sur la note lue: deux modifications concurrentes
    ne peuvent pas toutes deux appliquer leur delta à partir de la même ancienne note.
    """
    review = _get_owned_review(review_id, user)
    data: Dict[str, Any] = {}
    if changes.get("body") is not None:
        data["body"] = changes["body"]

    old_rating = review.get("rating")
    new_rating = changes.get("rating")
    rating_changed = new_rating is not None and new_rating != old_rating
    if rating_changed:
        data["rating"] = new_rating
    if not data:
        return review

    meal_id = review.get("meal_id")
    if rating_changed:
        aggregator.replace_review_rating(meal_id, old_rating, new_rating)
    try:
        updated = repository.update_review(
            review_id, data, expected_rating=old_rating if rating_changed else None
        )
    except Exception:
        logger.exception("reviews.service.update_review failed id=%s", review_id)
        if rating_changed:
            _compensate(lambda: aggregator.replace_review_rating(meal_id, new_rating, old_rating), "update_review")
        raise
    if not updated:
        if rating_changed:
            _compensate(lambda: aggregator.replace_review_rating(meal_id, new_rating, old_rating), "update_review")
        logger.info("reviews.service.update_review lost write id=%s expected_rating=%s", review_id, old_rating)
        raise _lost_write(review_id)
    return updated

def delete_review(user: Dict[str, Any], review_id: str) -> Dict[str, Any]:
    review = _get_owned_review(review_id, user)
    meal_id = review.get("meal_id")
    rating = review.get("rating")

    aggregator.retract_review(meal_id, rating)
    try:
        deleted = repository.delete_review(review_id, expected_rating=rating)
    except Exception:
        logger.exception("reviews.service.delete_review failed id=%s", review_id)
        _compensate(lambda: aggregator.apply_new_review(meal_id, rating), "delete_review")
        raise
    if not deleted:
        # Déjà supprimé, ou note modifiée depuis la lecture: le retrait est annulé
        _compensate(lambda: aggregator.apply_new_review(meal_id, rating), "delete_review")
        logger.info("reviews.service.delete_review lost write id=%s expected_rating=%s", review_id, rating)
        raise _lost_write(review_id)
    return {"deleted": deleted, "id": review_id}
