"""
Tests d'intégration API pour l'espace de modération.
Endpoints : /api/admin/pending, /api/admin/spots, /api/admin/edit, /api/admin/preview
"""

import pytest

from updock.errors import RemoteWriteFailure, SpotNotFound
from updock.schemas.auth import User
from updock.schemas.common import MutationResult, SyncStatus
from updock.schemas.moderation import ModerationCounts, ModerationEntry, PreviewState
from updock.schemas.spot import Spot

ADMIN = User(id="admin-1", email="admin@example.com", role="admin")


# --- Helpers ---

def make_spot(spot_id="pending-1", approved=False, image_urls=None):
    return Spot(
        id=spot_id, name="Spot", type=["Dockstart"], position=(46.0, 6.0),
        is_approved=approved, image_urls=image_urls,
    )


def confirmed(spot_id="pending-1"):
    return MutationResult(spot_id=spot_id, status=SyncStatus.CONFIRMED)


@pytest.fixture
def admin(services):
    services.auth.get_current_user.return_value = ADMIN
    return services


# ============================================================
# Contrôle d'accès
# ============================================================

def test_anonyme_refuse(client, services):
    assert client.get("/api/admin/pending").status_code == 401


def test_utilisateur_non_admin_refuse(client, services):
    services.auth.get_current_user.return_value = User(id="user-1", email="alice@example.com")

    assert client.get("/api/admin/pending").status_code == 403
    services.moderation.pending_spots.assert_not_called()


# ============================================================
# Vues
# ============================================================

def test_en_attente(client, admin):
    admin.moderation.pending_spots.return_value = [make_spot()]
    response = client.get("/api/admin/pending")

    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == ["pending-1"]


def test_tous_les_spots(client, admin):
    admin.moderation.counts.return_value = ModerationCounts(pending=1, all=2)
    admin.moderation.all_spots.return_value = [
        ModerationEntry(spot=make_spot(), is_pending=True),
        ModerationEntry(spot=make_spot("fr-moisson", approved=True), is_pending=False),
    ]
    response = client.get("/api/admin/spots")

    data = response.json()
    assert data["counts"] == {"pending": 1, "all": 2}
    assert [e["is_pending"] for e in data["entries"]] == [True, False]


# ============================================================
# Actions
# ============================================================

def test_approbation(client, admin):
    admin.moderation.approve.return_value = confirmed()
    response = client.post("/api/admin/spots/pending-1/approve")

    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"


def test_approbation_spot_inconnu(client, admin):
    admin.moderation.approve.side_effect = SpotNotFound("inconnu")
    assert client.post("/api/admin/spots/inconnu/approve").status_code == 404


def test_suppression_echec_distant(client, admin):
    admin.moderation.delete.side_effect = RemoteWriteFailure("Échec de la suppression du spot : timeout")
    response = client.delete("/api/admin/spots/pending-1")

    assert response.status_code == 502


def test_suppression_statique(client, admin):
    admin.moderation.delete.return_value = MutationResult(
        spot_id="fr-moisson", status=SyncStatus.APPLIED_LOCALLY
    )
    response = client.delete("/api/admin/spots/fr-moisson")

    assert response.json()["status"] == "applied_locally"


def test_mise_a_jour_id_incoherent(client, admin):
    body = make_spot("autre").model_dump()
    response = client.put("/api/admin/spots/pending-1", json=body)

    assert response.status_code == 400
    admin.moderation.update.assert_not_called()


def test_mise_a_jour(client, admin):
    admin.moderation.update.return_value = confirmed()
    body = make_spot().model_dump()
    body["name"] = "Renommé"
    response = client.put("/api/admin/spots/pending-1", json=body)

    assert response.status_code == 200
    assert admin.moderation.update.call_args[0][0].name == "Renommé"


# ============================================================
# Brouillon d'édition
# ============================================================

def test_commit_n_est_pas_une_edition(client, admin):
    """/edit/commit ne doit pas être capturé par /edit/{spot_id}."""
    admin.moderation.commit_edit.return_value = confirmed()
    response = client.post("/api/admin/edit/commit")

    assert response.status_code == 200
    admin.moderation.commit_edit.assert_called_once()
    admin.moderation.begin_edit.assert_not_called()


def test_debut_edition(client, admin):
    admin.moderation.begin_edit.return_value = make_spot()
    response = client.post("/api/admin/edit/pending-1")

    assert response.status_code == 200
    admin.moderation.begin_edit.assert_called_once_with("pending-1")


def test_modification_sans_brouillon(client, admin):
    admin.moderation.edit_draft.side_effect = ValueError("Aucune édition en cours.")
    response = client.patch("/api/admin/edit", json={"name": "x"})

    assert response.status_code == 400


@pytest.mark.parametrize("payload", [{"difficulty": None}, {"name": None}, {"name": "  "}])
def test_modification_champ_efface_refuse(client, admin, payload):
    response = client.patch("/api/admin/edit", json=payload)

    assert response.status_code == 422
    admin.moderation.edit_draft.assert_not_called()


def test_modification_nom_transmis_nettoye(client, admin):
    admin.moderation.edit_draft.return_value = make_spot()
    response = client.patch("/api/admin/edit", json={"name": " Lac "})

    assert response.status_code == 200
    changes = admin.moderation.edit_draft.call_args[0][0]
    assert changes.name == "Lac"
    assert changes.model_fields_set == {"name"}


def test_bascule_type(client, admin):
    admin.moderation.toggle_draft_type.return_value = make_spot()
    response = client.post("/api/admin/edit/type/Rockstart")

    assert response.status_code == 200
    admin.moderation.toggle_draft_type.assert_called_once_with("Rockstart")


def test_annulation_edition(client, admin):
    assert client.delete("/api/admin/edit").status_code == 204
    admin.moderation.cancel_edit.assert_called_once()


# ============================================================
# Aperçu
# ============================================================

def test_ouverture_apercu(client, admin):
    admin.moderation.open_preview.return_value = PreviewState(
        spot=make_spot(image_urls=["https://cdn/1.jpg"]),
        photo_index=0,
        photo_count=1,
        current_photo="https://cdn/1.jpg",
        can_moderate=True,
    )
    response = client.post("/api/admin/preview/pending-1")

    assert response.status_code == 200
    assert response.json()["current_photo"] == "https://cdn/1.jpg"


def test_photo_suivante_sans_apercu(client, admin):
    admin.moderation.next_photo.side_effect = ValueError("Aucun aperçu ouvert.")
    assert client.post("/api/admin/preview/next").status_code == 400
    admin.moderation.open_preview.assert_not_called()


def test_approbation_depuis_apercu(client, admin):
    admin.moderation.approve_from_preview.return_value = confirmed()
    response = client.post("/api/admin/preview/approve")

    assert response.status_code == 200
    admin.moderation.open_preview.assert_not_called()


def test_aucun_apercu(client, admin):
    admin.moderation.preview.return_value = None
    response = client.get("/api/admin/preview")

    assert response.status_code == 200
    assert response.json() is None
