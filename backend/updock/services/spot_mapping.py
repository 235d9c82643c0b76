"""
Conversion entre les lignes de la table `spots` et le modèle Spot.

La colonne `type` a connu plusieurs encodages : tableau natif, tableau JSON sérialisé
en texte, ou tag isolé. normalize_type() accepte tous ces formats et ne lève jamais
d'exception : tout échec de décodage retombe sur une valeur par défaut affichable.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from updock.schemas.spot import (
    DEFAULT_START_TYPE,
    DIFFICULTIES,
    START_TYPES,
    Spot,
    SpotDraft,
)

logger = logging.getLogger(__name__)

_TAGS_BY_LOWER = {tag.lower(): tag for tag in START_TYPES}


def _match_tag(value: Any) -> Optional[str]:
    """Retrouve le tag canonique (insensible à la casse), ou None si inconnu."""
    if not isinstance(value, str):
        return None
    return _TAGS_BY_LOWER.get(value.strip().lower())


def _tags_from_list(values: List[Any]) -> List[str]:
    tags = []
    for value in values:
        tag = _match_tag(value)
        if tag is None:
            logger.debug("Tag de type inconnu ignoré : %r", value)
            continue
        if tag not in tags:
            tags.append(tag)
    return tags or [DEFAULT_START_TYPE]


def normalize_type(raw: Any) -> List[str]:
    """
    Normalise la valeur brute de la colonne `type` en liste non vide de tags valides.

    - liste native          → tags valides conservés dans l'ordre
    - texte JSON d'un tableau → idem après décodage
    - texte d'un tag isolé   → [tag]
    - texte illisible, None, autre → ['Dockstart']
    """
    if isinstance(raw, (list, tuple)):
        return _tags_from_list(list(raw))

    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            parsed = raw
        if isinstance(parsed, list):
            return _tags_from_list(parsed)
        tag = _match_tag(parsed)
        if tag is not None:
            return [tag]
        logger.debug("Type de spot illisible, valeur par défaut : %r", raw)

    return [DEFAULT_START_TYPE]


def normalize_difficulty(raw: Any) -> str:
    if isinstance(raw, str) and raw in DIFFICULTIES:
        return raw
    return "Medium"


def serialize_type(tags: List[str]) -> str:
    """Encodage écrit en base : tableau JSON en texte."""
    return json.dumps(list(tags))


def spot_from_row(row: Dict[str, Any]) -> Spot:
    """
    Construit un Spot depuis une ligne de la table `spots`.
    lat / lng (colonnes séparées) deviennent le couple position.
    Lève KeyError / ValidationError si la ligne est inutilisable (id, nom ou coordonnées absents).
    """
    image_urls = row.get("image_urls") or None
    return Spot(
        id=str(row["id"]),
        name=row["name"],
        type=normalize_type(row.get("type")),
        position=(row["lat"], row["lng"]),
        description=row.get("description") or "",
        description_fr=row.get("description_fr") or None,
        difficulty=normalize_difficulty(row.get("difficulty")),
        height=row.get("height"),
        image_urls=list(image_urls) if image_urls else None,
        is_approved=bool(row.get("is_approved", False)),
        user_id=str(row["user_id"]) if row.get("user_id") else None,
    )


def insert_payload(draft: SpotDraft, image_urls: List[str], user_id: str) -> Dict[str, Any]:
    """
    Payload d'insertion d'un nouveau spot.
    is_approved n'est pas envoyé : la valeur par défaut du backend (false) s'applique.
    """
    lat, lng = draft.position
    return {
        "name": draft.name,
        "description": draft.description,
        "description_fr": draft.description_fr,
        "type": serialize_type(draft.type),
        "lat": lat,
        "lng": lng,
        "difficulty": draft.difficulty,
        "height": draft.height,
        "image_urls": image_urls or None,
        "user_id": user_id,
    }


def update_payload(spot: Spot) -> Dict[str, Any]:
    """Champs modifiables depuis l'espace admin (ni position ni photos)."""
    return {
        "name": spot.name,
        "description": spot.description,
        "type": serialize_type(spot.type),
        "difficulty": spot.difficulty,
    }


def toggle_type(tags: List[str], tag: str) -> List[str]:
    """
    Ajoute ou retire un tag. Retirer le dernier tag est refusé : la liste est rendue inchangée.
    """
    if tag in tags:
        remaining = [t for t in tags if t != tag]
        return remaining if remaining else list(tags)
    return [*tags, tag]
