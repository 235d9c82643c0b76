"""
Schémas Pydantic pour les favoris.
"""

from typing import List, Optional

from pydantic import BaseModel

from updock.schemas.common import SyncStatus
from updock.schemas.spot import Spot


class FavoriteToggleResult(BaseModel):
    """Résultat d'un basculement : état final et statut de confirmation."""

    spot_id: str
    is_favorite: bool
    status: SyncStatus
    detail: Optional[str] = None


class FavoritesResponse(BaseModel):
    spot_ids: List[str]
    spots: List[Spot]


class FavoriteStatus(BaseModel):
    spot_id: str
    is_favorite: bool
