"""
Configuration partagée pour tous les tests.
Override la dépendance get_services : aucun service réel (base, scheduler, fichiers)
n'est construit pour les tests d'API.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock, patch

from updock.container import get_services
from updock.database import init_db
from updock.main import app
from updock.schemas.auth import User


def make_user(role="user", user_id="user-1", email="alice@example.com") -> User:
    return User(id=user_id, email=email, first_name="Alice", role=role)


@pytest.fixture
def services():
    """Services mockés ; par défaut aucun utilisateur connecté."""
    mock_services = MagicMock()
    mock_services.auth.get_current_user.return_value = None
    return mock_services


@pytest.fixture
def client(services):
    """Client HTTP de test avec les services mockés (lifespan neutralisé)."""
    app.dependency_overrides[get_services] = lambda: services
    with patch("updock.main.init_db"), \
            patch("updock.main.build_services", return_value=services), \
            patch("updock.main.start_scheduler"), \
            patch("updock.main.stop_scheduler"):
        with TestClient(app) as c:
            yield c
    app.dependency_overrides.clear()


@pytest.fixture
def session_factory():
    """Base SQLite en mémoire partagée par toutes les sessions du test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()
