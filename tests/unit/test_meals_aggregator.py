import pytest
from concurrent.futures import ThreadPoolExecutor

from homechef.meals import aggregator
from homechef.utils.errors import ContentionError, NotFoundError, ValidationError


def _meal(fake_db):
    return fake_db.get("meals", "meal-1")


def test_average_of_n_ratings(fake_db, meal):
    for r in (5, 4, 3, 4):
        aggregator.apply_new_review("meal-1", r)

    m = _meal(fake_db)
    assert m["review_count"] == 4
    assert m["review_sum"] == 16
    assert m["rating"] == pytest.approx(4.0)
    assert m["version"] == 4


def test_apply_then_retract_restores_previous_aggregate(fake_db, meal):
    aggregator.apply_new_review("meal-1", 4)
    aggregator.apply_new_review("meal-1", 2)
    before = _meal(fake_db)

    aggregator.apply_new_review("meal-1", 5)
    aggregator.retract_review("meal-1", 5)

    after = _meal(fake_db)
    assert after["review_count"] == before["review_count"]
    assert after["review_sum"] == before["review_sum"]
    assert after["rating"] == pytest.approx(before["rating"])


def test_retract_only_review_resets_to_zero(fake_db, meal):
    aggregator.apply_new_review("meal-1", 3)
    aggregator.retract_review("meal-1", 3)

    m = _meal(fake_db)
    assert m["review_count"] == 0
    assert m["review_sum"] == 0
    assert m["rating"] == 0


def test_replace_rating_is_a_single_write(fake_db, meal):
    aggregator.apply_new_review("meal-1", 4)
    aggregator.apply_new_review("meal-1", 3)
    version = _meal(fake_db)["version"]

    aggregator.replace_review_rating("meal-1", 3, 5)

    m = _meal(fake_db)
    assert m["review_count"] == 2
    assert m["review_sum"] == 9
    assert m["rating"] == pytest.approx(4.5)
    assert m["version"] == version + 1


def test_compute_aggregate_floors_count():
    agg = aggregator.compute_aggregate(-1, -3.0)
    assert agg == {"review_count": 0, "review_sum": 0.0, "rating": 0}


@pytest.mark.parametrize("rating", [0, 6, "abc", None, float("nan"), float("inf"), 3.5, "4.5", True])
def test_invalid_rating_rejected_before_any_write(fake_db, meal, rating):
    with pytest.raises(ValidationError):
        aggregator.apply_new_review("meal-1", rating)
    assert _meal(fake_db)["version"] == 0


def test_nan_rating_leaves_aggregate_untouched(fake_db, meal):
    aggregator.apply_new_review("meal-1", 4)
    with pytest.raises(ValidationError):
        aggregator.apply_new_review("meal-1", float("nan"))
    m = _meal(fake_db)
    assert (m["review_count"], m["review_sum"], m["rating"]) == (1, 4, 4)


@pytest.mark.parametrize("rating,expected", [(4, 4), (4.0, 4), ("5", 5)])
def test_check_rating_normalises_to_int(rating, expected):
    value = aggregator.check_rating(rating)
    assert value == expected
    assert type(value) is int


def test_missing_meal_raises_not_found(fake_db):
    with pytest.raises(NotFoundError):
        aggregator.apply_new_review("unknown", 4)


def test_concurrent_reviews_lose_no_update(fake_db, meal, monkeypatch):
    monkeypatch.setattr("homechef.config.AGGREGATE_MAX_RETRIES", 50)
    ratings = [5, 4, 3, 2, 1, 5, 4, 3, 2, 1, 5, 4]

    with ThreadPoolExecutor(max_workers=len(ratings)) as pool:
        list(pool.map(lambda r: aggregator.apply_new_review("meal-1", r), ratings))

    m = _meal(fake_db)
    assert m["review_count"] == len(ratings)
    assert m["review_sum"] == sum(ratings)
    assert m["rating"] == pytest.approx(sum(ratings) / len(ratings))


def test_lost_cas_is_retried(fake_db, meal, monkeypatch):
    real_cas = aggregator.repository.compare_and_set_aggregate
    calls = {"n": 0}

    def flaky_cas(meal_id, expected_version, fields):
        calls["n"] += 1
        if calls["n"] == 1:
            # Un écrivain concurrent passe avant nous
            assert real_cas(meal_id, expected_version, {"review_count": 1, "review_sum": 2.0, "rating": 2.0})
            assert real_cas(meal_id, expected_version, fields) is None
            return None
        return real_cas(meal_id, expected_version, fields)

    monkeypatch.setattr("homechef.meals.aggregator.time.sleep", lambda s: None)
    monkeypatch.setattr(aggregator.repository, "compare_and_set_aggregate", flaky_cas)

    aggregator.apply_new_review("meal-1", 4)

    m = _meal(fake_db)
    assert calls["n"] == 2
    assert m["review_count"] == 2
    assert m["review_sum"] == 6


def test_gives_up_after_max_retries(fake_db, meal, monkeypatch):
    monkeypatch.setattr("homechef.config.AGGREGATE_MAX_RETRIES", 3)
    monkeypatch.setattr("homechef.meals.aggregator.time.sleep", lambda s: None)
    monkeypatch.setattr("homechef.meals.aggregator.repository.compare_and_set_aggregate", lambda *a: None)

    with pytest.raises(ContentionError) as exc:
        aggregator.apply_new_review("meal-1", 4)
    assert exc.value.status_code == 409
    assert exc.value.retryable is True
