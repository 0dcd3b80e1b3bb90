import os
from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

# Pas de Redis en tests: le lifespan désactive le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from homechef.app import app as fastapi_app
from homechef.utils.security import get_current_user
from tests.fakes import BUYER, CHEF, FakeStripe, FakeSupabase

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid or nodeid.startswith("unit/"):
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid or nodeid.startswith("integration/"):
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid or nodeid.startswith("functional/"):
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Simuler un acheteur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_current_user(app):
    app.dependency_overrides[get_current_user] = lambda: BUYER
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_current_user, None)

@pytest.fixture
def login_as(app):
    """login_as(CHEF) remplace l'utilisateur courant pour la suite du test."""
    def _login(user: Dict[str, Any]):
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login

# Mock database dependency for all tests
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("homechef.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("homechef.infra.supabase_client.get_service_supabase", lambda: MagicMock())

@pytest.fixture
def fake_db(monkeypatch) -> FakeSupabase:
    db = FakeSupabase()
    monkeypatch.setattr("homechef.infra.supabase_client.get_supabase", lambda: db)
    monkeypatch.setattr("homechef.infra.supabase_client.get_service_supabase", lambda: db)
    return db

# Stripe n'est jamais appelé pour de vrai
@pytest.fixture(autouse=True)
def fake_stripe(monkeypatch) -> FakeStripe:
    fake = FakeStripe()
    monkeypatch.setattr("homechef.payments.stripe_client.create_session", fake.create_session)
    monkeypatch.setattr("homechef.payments.stripe_client.get_session", fake.get_session)
    return fake

@pytest.fixture
def meal(fake_db) -> Dict[str, Any]:
    return fake_db.seed("meals", {
        "id": "meal-1",
        "chef_id": CHEF["id"],
        "name": "Kacchi Biryani",
        "price": 20.00,
        "created_at": "2025-01-01T00:00:00+00:00",
    })
