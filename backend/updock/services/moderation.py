"""
Espace de modération admin.

Deux vues calculées à la volée sur la liste du synchroniseur (pas de stockage séparé) :
- en attente : is_approved == False
- tous       : liste complète, avec badge « en attente »
Les actions (approuver, supprimer, modifier) passent toutes par le synchroniseur.
Le brouillon d'édition et l'aperçu sont l'état d'écran de l'admin connecté.
"""

import logging
import threading
from typing import List, Optional

from pydantic import ValidationError

from updock.errors import SpotNotFound
from updock.schemas.common import MutationResult
from updock.schemas.moderation import ModerationCounts, ModerationEntry, PreviewState
from updock.schemas.spot import START_TYPES, DraftChanges, Spot
from updock.services.spot_mapping import toggle_type

logger = logging.getLogger(__name__)


class PhotoCarousel:
    """Index de photo qui boucle dans les deux sens (modulo le nombre de photos)."""

    def __init__(self, photo_count: int, index: int = 0):
        self.photo_count = photo_count
        self.index = index if photo_count else 0

    def next(self) -> int:
        if self.photo_count:
            self.index = (self.index + 1) % self.photo_count
        return self.index

    def previous(self) -> int:
        if self.photo_count:
            self.index = (self.index - 1) % self.photo_count
        return self.index


class ModerationWorkflow:
    def __init__(self, synchronizer):
        self._synchronizer = synchronizer
        self._lock = threading.Lock()
        self._draft: Optional[Spot] = None
        self._preview_id: Optional[str] = None
        self._carousel: Optional[PhotoCarousel] = None

    # --- Vues ---

    def pending_spots(self) -> List[Spot]:
        return [s for s in self._synchronizer.spots if not s.is_approved]

    def all_spots(self) -> List[ModerationEntry]:
        return [ModerationEntry(spot=s, is_pending=not s.is_approved) for s in self._synchronizer.spots]

    def counts(self) -> ModerationCounts:
        spots = self._synchronizer.spots
        return ModerationCounts(pending=sum(1 for s in spots if not s.is_approved), all=len(spots))

    def _require(self, spot_id: str) -> Spot:
        spot = self._synchronizer.get(spot_id)
        if spot is None:
            raise SpotNotFound(spot_id)
        return spot

    # --- Actions directes ---

    def approve(self, spot_id: str) -> MutationResult:
        self._require(spot_id)
        return self._synchronizer.approve(spot_id)

    def delete(self, spot_id: str) -> MutationResult:
        self._require(spot_id)
        return self._synchronizer.delete(spot_id)

    def update(self, spot: Spot) -> MutationResult:
        self._require(spot.id)
        return self._synchronizer.update(spot)

    # --- Édition ---

    @property
    def draft(self) -> Optional[Spot]:
        with self._lock:
            return self._draft

    def begin_edit(self, spot_id: str) -> Spot:
        """Charge une copie modifiable du spot dans le brouillon."""
        spot = self._require(spot_id)
        with self._lock:
            self._draft = spot.model_copy(deep=True)
            return self._draft

    def _current_draft(self) -> Spot:
        if self._draft is None:
            raise ValueError("Aucune édition en cours.")
        return self._draft

    def edit_draft(self, changes: DraftChanges) -> Spot:
        """Applique les champs transmis ; le brouillon n'est remplacé que s'il reste un Spot valide."""
        with self._lock:
            draft = self._current_draft()
            try:
                self._draft = Spot.model_validate(
                    {**draft.model_dump(), **changes.model_dump(exclude_unset=True)}
                )
            except ValidationError as exc:
                raise ValueError(f"Modification invalide : {exc.error_count()} erreur(s)") from exc
            return self._draft

    def toggle_draft_type(self, tag: str) -> Spot:
        """Ajoute / retire un tag ; le dernier tag restant ne peut pas être retiré."""
        if tag not in START_TYPES:
            raise ValueError(f"Type inconnu : {tag}")
        with self._lock:
            draft = self._current_draft()
            self._draft = draft.model_copy(update={"type": toggle_type(draft.type, tag)})
            return self._draft

    def commit_edit(self) -> MutationResult:
        """Envoie le brouillon complet au synchroniseur ; il est conservé si l'envoi échoue."""
        with self._lock:
            draft = self._current_draft()
        result = self._synchronizer.update(draft)
        with self._lock:
            if self._draft is not None and self._draft.id == draft.id:
                self._draft = None
        return result

    def cancel_edit(self) -> None:
        with self._lock:
            self._draft = None

    # --- Aperçu ---

    def _preview_state(self) -> Optional[PreviewState]:
        if self._preview_id is None:
            return None
        spot = self._synchronizer.get(self._preview_id)
        if spot is None:
            # spot supprimé entre-temps : l'aperçu se ferme
            self._preview_id = None
            self._carousel = None
            return None
        photos = spot.image_urls or []
        index = self._carousel.index if self._carousel else 0
        return PreviewState(
            spot=spot,
            photo_index=index,
            photo_count=len(photos),
            current_photo=photos[index] if photos else None,
            can_moderate=not spot.is_approved,
        )

    def preview(self) -> Optional[PreviewState]:
        with self._lock:
            return self._preview_state()

    def open_preview(self, spot_id: str) -> PreviewState:
        spot = self._require(spot_id)
        with self._lock:
            self._preview_id = spot.id
            self._carousel = PhotoCarousel(len(spot.image_urls or []))
            return self._preview_state()

    def _move(self, forward: bool) -> PreviewState:
        with self._lock:
            if self._preview_id is None or self._carousel is None:
                raise ValueError("Aucun aperçu ouvert.")
            spot = self._synchronizer.get(self._preview_id)
            # le nombre de photos peut changer après une mise à jour
            if spot is not None:
                self._carousel.photo_count = len(spot.image_urls or [])
                self._carousel.index = min(self._carousel.index, max(self._carousel.photo_count - 1, 0))
            if forward:
                self._carousel.next()
            else:
                self._carousel.previous()
            state = self._preview_state()
        if state is None:
            raise ValueError("Aucun aperçu ouvert.")
        return state

    def next_photo(self) -> PreviewState:
        return self._move(forward=True)

    def previous_photo(self) -> PreviewState:
        return self._move(forward=False)

    def close_preview(self) -> None:
        with self._lock:
            self._preview_id = None
            self._carousel = None

    def _pending_preview_id(self) -> str:
        with self._lock:
            state = self._preview_state()
        if state is None:
            raise ValueError("Aucun aperçu ouvert.")
        if not state.can_moderate:
            raise ValueError("Ce spot est déjà approuvé.")
        return state.spot.id

    def approve_from_preview(self) -> MutationResult:
        """Approuve le spot prévisualisé puis ferme l'aperçu."""
        result = self._synchronizer.approve(self._pending_preview_id())
        self.close_preview()
        return result

    def delete_from_preview(self) -> MutationResult:
        """Supprime le spot prévisualisé puis ferme l'aperçu."""
        result = self._synchronizer.delete(self._pending_preview_id())
        self.close_preview()
        return result
