"""
Schémas Pydantic pour l'espace de modération admin.
"""

from typing import List, Optional

from pydantic import BaseModel

from updock.schemas.spot import Spot


class ModerationEntry(BaseModel):
    """Ligne de l'onglet « Tous les spots » : le spot et son badge « en attente »."""

    spot: Spot
    is_pending: bool


class ModerationCounts(BaseModel):
    pending: int
    all: int


class ModerationOverview(BaseModel):
    counts: ModerationCounts
    entries: List[ModerationEntry]


class PreviewState(BaseModel):
    """Aperçu en lecture seule avec carrousel photo."""

    spot: Spot
    photo_index: int
    photo_count: int
    current_photo: Optional[str]
    can_moderate: bool  # actions Approuver / Supprimer disponibles (spot en attente)
