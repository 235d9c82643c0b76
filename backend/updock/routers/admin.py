"""
Router pour l'espace de modération (réservé au rôle admin).

Onglets : en attente / tous les spots.
Actions : approuver, modifier (brouillon d'édition), supprimer, aperçu avec carrousel photo.
"""

from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from updock.container import Services, get_services
from updock.dependencies import require_admin
from updock.errors import RemoteWriteFailure, SpotNotFound
from updock.schemas.common import MutationResult
from updock.schemas.moderation import ModerationOverview, PreviewState
from updock.schemas.spot import DraftChanges, Spot

router = APIRouter(prefix="/api/admin", tags=["Modération"], dependencies=[Depends(require_admin)])


def _run(action: Callable, *args):
    """Exécute une action de modération et traduit les erreurs métier en HTTPException."""
    try:
        return action(*args)
    except SpotNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RemoteWriteFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ============================================================
# Vues
# ============================================================

@router.get("/pending", response_model=List[Spot], summary="Spots en attente de validation")
def list_pending(services: Services = Depends(get_services)):
    """Filtre en direct sur la liste unifiée : un spot approuvé ou supprimé en sort immédiatement."""
    return services.moderation.pending_spots()


@router.get("/spots", response_model=ModerationOverview, summary="Tous les spots")
def list_all(services: Services = Depends(get_services)):
    """Liste complète, chaque entrée porte un badge `is_pending`, avec les compteurs des deux onglets."""
    moderation = services.moderation
    return ModerationOverview(counts=moderation.counts(), entries=moderation.all_spots())


# ============================================================
# Actions directes
# ============================================================

@router.post("/spots/{spot_id}/approve", response_model=MutationResult, summary="Approuver un spot")
def approve_spot(spot_id: str, services: Services = Depends(get_services)):
    return _run(services.moderation.approve, spot_id)


@router.put("/spots/{spot_id}", response_model=MutationResult, summary="Modifier un spot")
def update_spot(spot_id: str, spot: Spot, services: Services = Depends(get_services)):
    """Envoie nom, description, types et difficulté ; l'entrée locale est remplacée par l'objet complet."""
    if spot.id != spot_id:
        raise HTTPException(status_code=400, detail="L'identifiant du corps ne correspond pas à l'URL.")
    return _run(services.moderation.update, spot)


@router.delete("/spots/{spot_id}", response_model=MutationResult, summary="Supprimer un spot")
def delete_spot(spot_id: str, services: Services = Depends(get_services)):
    """
    Spot statique : masqué localement (réapparaît au prochain rechargement).
    Spot distant : favoris associés puis spot supprimés en base.
    """
    return _run(services.moderation.delete, spot_id)


# ============================================================
# Brouillon d'édition
# ============================================================

@router.get("/edit", response_model=Optional[Spot], summary="Brouillon en cours")
def current_draft(services: Services = Depends(get_services)):
    return services.moderation.draft


@router.patch("/edit", response_model=Spot, summary="Modifier le brouillon")
def edit_draft(changes: DraftChanges, services: Services = Depends(get_services)):
    return _run(services.moderation.edit_draft, changes)


@router.post("/edit/type/{tag}", response_model=Spot, summary="Ajouter / retirer un type")
def toggle_draft_type(tag: str, services: Services = Depends(get_services)):
    """Le dernier type restant ne peut pas être retiré."""
    return _run(services.moderation.toggle_draft_type, tag)


@router.post("/edit/commit", response_model=MutationResult, summary="Enregistrer le brouillon")
def commit_edit(services: Services = Depends(get_services)):
    return _run(services.moderation.commit_edit)


@router.post("/edit/{spot_id}", response_model=Spot, summary="Commencer l'édition d'un spot")
def begin_edit(spot_id: str, services: Services = Depends(get_services)):
    return _run(services.moderation.begin_edit, spot_id)


@router.delete("/edit", status_code=204, summary="Annuler l'édition")
def cancel_edit(services: Services = Depends(get_services)):
    """Abandonne le brouillon sans aucun appel distant."""
    services.moderation.cancel_edit()


# ============================================================
# Aperçu
# ============================================================

@router.get("/preview", response_model=Optional[PreviewState], summary="Aperçu ouvert")
def current_preview(services: Services = Depends(get_services)):
    return services.moderation.preview()


@router.post("/preview/next", response_model=PreviewState, summary="Photo suivante")
def next_photo(services: Services = Depends(get_services)):
    return _run(services.moderation.next_photo)


@router.post("/preview/previous", response_model=PreviewState, summary="Photo précédente")
def previous_photo(services: Services = Depends(get_services)):
    return _run(services.moderation.previous_photo)


@router.post("/preview/approve", response_model=MutationResult, summary="Approuver depuis l'aperçu")
def approve_from_preview(services: Services = Depends(get_services)):
    """Approuve le spot en attente affiché puis ferme l'aperçu."""
    return _run(services.moderation.approve_from_preview)


@router.post("/preview/delete", response_model=MutationResult, summary="Supprimer depuis l'aperçu")
def delete_from_preview(services: Services = Depends(get_services)):
    """Supprime le spot en attente affiché puis ferme l'aperçu."""
    return _run(services.moderation.delete_from_preview)


@router.post("/preview/{spot_id}", response_model=PreviewState, summary="Ouvrir l'aperçu d'un spot")
def open_preview(spot_id: str, services: Services = Depends(get_services)):
    return _run(services.moderation.open_preview, spot_id)


@router.delete("/preview", status_code=204, summary="Fermer l'aperçu")
def close_preview(services: Services = Depends(get_services)):
    services.moderation.close_preview()
