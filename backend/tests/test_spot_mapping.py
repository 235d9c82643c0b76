"""
Tests unitaires pour la conversion ligne ↔ Spot.
Couverture : normalisation du champ type (tous les encodages historiques),
difficulté invalide, payloads d'insertion et de mise à jour, bascule de tag.
"""

import json

import pytest

from updock.schemas.spot import Spot, SpotDraft
from updock.services.spot_mapping import (
    insert_payload,
    normalize_difficulty,
    normalize_type,
    spot_from_row,
    toggle_type,
    update_payload,
)


def make_row(**overrides):
    row = {
        "id": "b7c1a3e0-0000-4000-8000-000000000001",
        "name": "Lac du Bourget",
        "description": "Ponton en bois",
        "description_fr": None,
        "type": '["Dockstart", "Rockstart"]',
        "lat": 45.7,
        "lng": 5.87,
        "difficulty": "Hard",
        "height": None,
        "image_urls": ["https://cdn/a.jpg"],
        "is_approved": False,
        "user_id": "user-1",
        "created_at": None,
    }
    row.update(overrides)
    return row


# ============================================================
# normalize_type
# ============================================================

def test_type_liste_native():
    assert normalize_type(["Rockstart", "Dockstart"]) == ["Rockstart", "Dockstart"]


def test_type_liste_tags_inconnus_ignores():
    assert normalize_type(["Rockstart", "Skystart", 42]) == ["Rockstart"]


def test_type_liste_uniquement_inconnus_defaut():
    assert normalize_type(["Skystart"]) == ["Dockstart"]


def test_type_texte_json():
    assert normalize_type('["Dropstart", "Deadstart"]') == ["Dropstart", "Deadstart"]


def test_type_tag_isole():
    assert normalize_type("Rampstart") == ["Rampstart"]


def test_type_tag_isole_insensible_casse():
    assert normalize_type("rockstart") == ["Rockstart"]


def test_type_chaine_json_isolee():
    """'"Deadstart"' est un JSON valide qui décode en texte : traité comme un tag isolé."""
    assert normalize_type('"Deadstart"') == ["Deadstart"]


@pytest.mark.parametrize("raw", [None, "", "[Dockstart", "{}", "[]", 42, {"a": 1}, "[" * 100000])
def test_type_illisible_defaut_dockstart(raw):
    """Aucune valeur brute ne lève d'exception."""
    assert normalize_type(raw) == ["Dockstart"]


def test_type_doublons_supprimes():
    assert normalize_type(["Dockstart", "dockstart", "Dockstart"]) == ["Dockstart"]


# ============================================================
# Difficulté
# ============================================================

def test_difficulte_valide_conservee():
    assert normalize_difficulty("Extreme") == "Extreme"


def test_difficulte_invalide_medium():
    assert normalize_difficulty("Insane") == "Medium"
    assert normalize_difficulty(None) == "Medium"


# ============================================================
# spot_from_row
# ============================================================

def test_ligne_vers_spot():
    spot = spot_from_row(make_row())

    assert spot.position == (45.7, 5.87)
    assert spot.type == ["Dockstart", "Rockstart"]
    assert spot.is_approved is False
    assert spot.user_id == "user-1"
    assert spot.image_urls == ["https://cdn/a.jpg"]


def test_ligne_sans_photos_image_urls_none():
    spot = spot_from_row(make_row(image_urls=[]))
    assert spot.image_urls is None


def test_ligne_description_nulle_chaine_vide():
    spot = spot_from_row(make_row(description=None))
    assert spot.description == ""


def test_ligne_sans_coordonnees_leve_keyerror():
    row = make_row()
    del row["lat"]
    with pytest.raises(KeyError):
        spot_from_row(row)


# ============================================================
# Payloads
# ============================================================

def test_payload_insertion_sans_is_approved():
    """La valeur par défaut du backend (false) doit s'appliquer."""
    draft = SpotDraft(name="Nouveau", position=(45.0, 6.0), type=["Rockstart"])
    payload = insert_payload(draft, ["https://cdn/x.jpg"], "user-1")

    assert "is_approved" not in payload
    assert payload["lat"] == 45.0 and payload["lng"] == 6.0
    assert json.loads(payload["type"]) == ["Rockstart"]
    assert payload["user_id"] == "user-1"


def test_payload_insertion_sans_photos_none():
    draft = SpotDraft(name="Nouveau", position=(45.0, 6.0))
    assert insert_payload(draft, [], "user-1")["image_urls"] is None


def test_payload_mise_a_jour_champs_modifiables():
    spot = Spot(id="s1", name="Renommé", type=["Dropstart"], position=(1.0, 2.0), difficulty="Easy")
    payload = update_payload(spot)

    assert set(payload) == {"name", "description", "type", "difficulty"}
    assert json.loads(payload["type"]) == ["Dropstart"]


# ============================================================
# toggle_type
# ============================================================

def test_toggle_ajoute_tag():
    assert toggle_type(["Dockstart"], "Rockstart") == ["Dockstart", "Rockstart"]


def test_toggle_retire_tag():
    assert toggle_type(["Dockstart", "Rockstart"], "Dockstart") == ["Rockstart"]


def test_toggle_dernier_tag_refuse():
    assert toggle_type(["Dockstart"], "Dockstart") == ["Dockstart"]
