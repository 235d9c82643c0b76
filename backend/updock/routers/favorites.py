"""
Router pour les favoris de l'utilisateur connecté.
"""

from fastapi import APIRouter, Depends, HTTPException

from updock.container import Services, get_services
from updock.errors import Unauthorized
from updock.schemas.common import SyncStatus
from updock.schemas.favorite import FavoriteStatus, FavoritesResponse, FavoriteToggleResult

router = APIRouter(prefix="/api/favorites", tags=["Favoris"])


@router.get("", response_model=FavoritesResponse, summary="Lister les favoris")
def list_favorites(services: Services = Depends(get_services)):
    """
    Retourne les favoris connus localement (instantané hors-ligne ou dernier état distant).
    Sans session, la liste est vide.
    """
    tracker = services.favorites
    return FavoritesResponse(spot_ids=tracker.favorites, spots=tracker.favorite_spots())


@router.post(
    "/{spot_id}/toggle",
    response_model=FavoriteToggleResult,
    summary="Ajouter / retirer un favori",
)
def toggle_favorite(spot_id: str, services: Services = Depends(get_services)):
    """
    Bascule le favori de manière optimiste.
    - Sans session : 401, aucun changement
    - Échec distant : l'état d'avant est restauré et une 502 explique l'échec
    - Ajout confirmé : les photos du spot sont mises en cache en arrière-plan
    """
    try:
        result = services.favorites.toggle(spot_id)
    except Unauthorized as e:
        raise HTTPException(status_code=401, detail=str(e))
    if result.status == SyncStatus.ROLLED_BACK:
        raise HTTPException(status_code=502, detail=result.detail)
    return result


@router.get("/{spot_id}", response_model=FavoriteStatus, summary="Statut favori d'un spot")
def favorite_status(spot_id: str, services: Services = Depends(get_services)):
    return FavoriteStatus(spot_id=spot_id, is_favorite=services.favorites.is_favorite(spot_id))
