"""
Tests d'intégration pour l'accès aux tables spots / favorites (SQLite en mémoire).
Couverture : règles de visibilité par rôle, insertion (valeurs par défaut du backend),
mises à jour / suppressions sur id inconnu, contraintes des favoris.
"""

from datetime import datetime

import pytest

from updock.errors import RemoteStoreError
from updock.models.spot import SpotRow
from updock.schemas.auth import User
from updock.stores.row_store import SqlRowStore

OWNER = User(id="owner-1", email="owner@example.com")
OTHER = User(id="other-1", email="other@example.com")
ADMIN = User(id="admin-1", email="admin@example.com", role="admin")


# --- Helpers ---

def seed(session_factory):
    """Un spot approuvé (ancien) et un spot en attente (récent) soumis par OWNER."""
    db = session_factory()
    db.add_all([
        SpotRow(id="approved", name="Approuvé", lat=46.0, lng=6.0, is_approved=True,
                user_id=OTHER.id, created_at=datetime(2025, 5, 1)),
        SpotRow(id="pending", name="En attente", lat=45.0, lng=5.0, is_approved=False,
                user_id=OWNER.id, created_at=datetime(2025, 6, 1)),
    ])
    db.commit()
    db.close()
    return SqlRowStore(session_factory)


def ids(rows):
    return [r["id"] for r in rows]


# ============================================================
# Visibilité
# ============================================================

def test_visiteur_anonyme_voit_les_approuves(session_factory):
    store = seed(session_factory)
    assert ids(store.select_spots(None)) == ["approved"]


def test_auteur_voit_ses_soumissions(session_factory):
    store = seed(session_factory)
    assert ids(store.select_spots(OWNER)) == ["pending", "approved"]


def test_autre_utilisateur_ne_voit_pas_les_soumissions(session_factory):
    store = seed(session_factory)
    assert ids(store.select_spots(OTHER)) == ["approved"]


def test_admin_voit_tout(session_factory):
    store = seed(session_factory)
    assert ids(store.select_spots(ADMIN)) == ["pending", "approved"]


# ============================================================
# Écritures spots
# ============================================================

def test_insertion_en_attente_par_defaut(session_factory):
    store = SqlRowStore(session_factory)
    row = store.insert_spot({
        "name": "Nouveau",
        "type": '["Dockstart"]',
        "lat": 45.5,
        "lng": 5.5,
        "image_urls": ["https://cdn/a.jpg"],
        "user_id": OWNER.id,
    })

    assert row["id"]
    assert row["is_approved"] is False
    assert row["image_urls"] == ["https://cdn/a.jpg"]


def test_insertion_ligne_invalide(session_factory):
    store = SqlRowStore(session_factory)

    with pytest.raises(RemoteStoreError) as exc:
        store.insert_spot({"name": "Sans coordonnées"})

    assert exc.value.code == "integrity"


def test_mise_a_jour(session_factory):
    store = seed(session_factory)
    store.update_spot("pending", {"is_approved": True, "name": "Validé"})

    rows = {r["id"]: r for r in store.select_spots(None)}
    assert rows["pending"]["name"] == "Validé"


def test_mise_a_jour_id_inconnu(session_factory):
    store = seed(session_factory)

    with pytest.raises(RemoteStoreError) as exc:
        store.update_spot("inconnu", {"is_approved": True})

    assert exc.value.code == "not_found"


def test_suppression(session_factory):
    store = seed(session_factory)
    store.delete_spot("pending")

    assert ids(store.select_spots(ADMIN)) == ["approved"]


def test_suppression_id_inconnu(session_factory):
    store = seed(session_factory)

    with pytest.raises(RemoteStoreError) as exc:
        store.delete_spot("inconnu")

    assert exc.value.code == "not_found"


# ============================================================
# Favoris
# ============================================================

def test_favoris_par_utilisateur(session_factory):
    store = SqlRowStore(session_factory)
    store.insert_favorite(OWNER.id, "fr-moisson")
    store.insert_favorite(OWNER.id, "pending")
    store.insert_favorite(OTHER.id, "approved")

    assert sorted(store.list_favorite_ids(OWNER.id)) == ["fr-moisson", "pending"]
    assert store.list_favorite_ids(OTHER.id) == ["approved"]


def test_favori_en_double_refuse(session_factory):
    store = SqlRowStore(session_factory)
    store.insert_favorite(OWNER.id, "fr-moisson")

    with pytest.raises(RemoteStoreError) as exc:
        store.insert_favorite(OWNER.id, "fr-moisson")

    assert exc.value.code == "integrity"


def test_retrait_favori(session_factory):
    store = SqlRowStore(session_factory)
    store.insert_favorite(OWNER.id, "fr-moisson")
    store.delete_favorite(OWNER.id, "fr-moisson")

    assert store.list_favorite_ids(OWNER.id) == []


def test_suppression_favoris_d_un_spot(session_factory):
    store = SqlRowStore(session_factory)
    store.insert_favorite(OWNER.id, "pending")
    store.insert_favorite(OTHER.id, "pending")
    store.insert_favorite(OTHER.id, "approved")

    assert store.delete_favorites_for_spot("pending") == 2
    assert store.list_favorite_ids(OTHER.id) == ["approved"]
