"""
Agrégat de notes d'un plat: (review_count, review_sum, rating).

Toutes les opérations passent par une boucle compare-and-set sur 'version':
lecture, calcul des nouveaux compteurs, écriture conditionnelle, nouvel essai si un
écrivain concurrent a incrémenté la version entre-temps. 'rating' est toujours
recalculé à partir des deux compteurs, jamais écrit seul.
"""
import logging
import math
import random
import time
from typing import Any, Dict

from homechef import config
from homechef.meals import repository
from homechef.utils.errors import ContentionError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

def check_rating(rating: Any) -> int:
    """Note entière de MIN_RATING à MAX_RATING; NaN, infini et décimales rejetés."""
    if isinstance(rating, bool):
        raise ValidationError("Note invalide")
    try:
        value = float(rating)
    except (TypeError, ValueError):
        raise ValidationError("Note invalide")
    if not math.isfinite(value) or not value.is_integer():
        raise ValidationError("La note doit être un entier")
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(f"La note doit être comprise entre {MIN_RATING} et {MAX_RATING}")
    return int(value)

def compute_aggregate(review_count: int, review_sum: float) -> Dict[str, Any]:
    """Compteurs normalisés: count plancher à 0, somme remise à 0 quand count == 0."""
    count = max(0, int(review_count))
    total = float(review_sum) if count > 0 else 0.0
    return {
        "review_count": count,
        "review_sum": total,
        "rating": (total / count) if count > 0 else 0,
    }

def _apply_delta(meal_id: str, count_delta: int, sum_delta: float) -> Dict[str, Any]:
    attempts = max(1, config.AGGREGATE_MAX_RETRIES)
    for attempt in range(attempts):
        current = repository.get_meal_aggregate(meal_id)
        if not current:
            raise NotFoundError("Plat introuvable")

        version = int(current.get("version") or 0)
        fields = compute_aggregate(
            int(current.get("review_count") or 0) + count_delta,
            float(current.get("review_sum") or 0) + sum_delta,
        )
        updated = repository.compare_and_set_aggregate(meal_id, version, fields)
        if updated:
            return updated

        logger.info("meals.aggregator CAS lost meal_id=%s version=%s attempt=%s", meal_id, version, attempt + 1)
        time.sleep(random.uniform(0, 0.005 * (attempt + 1)))

    logger.warning("meals.aggregator gave up meal_id=%s after %s attempts", meal_id, attempts)
    raise ContentionError("Mise à jour concurrente de la note, réessayez")

def apply_new_review(meal_id: str, rating: Any) -> Dict[str, Any]:
    """Ajoute une note: count + 1, sum + rating."""
    value = check_rating(rating)
    return _apply_delta(meal_id, 1, value)

def retract_review(meal_id: str, rating: Any) -> Dict[str, Any]:
    """Retire une note: count - 1 (plancher 0), sum - rating; rating = 0 sans avis."""
    value = check_rating(rating)
    return _apply_delta(meal_id, -1, -value)

def replace_review_rating(meal_id: str, old_rating: Any, new_rating: Any) -> Dict[str, Any]:
    """Retrait de l'ancienne note + ajout de la nouvelle en une seule écriture conditionnelle."""
    old_value = check_rating(old_rating)
    new_value = check_rating(new_rating)
    return _apply_delta(meal_id, 0, new_value - old_value)
