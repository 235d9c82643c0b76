"""
Synchroniseur de spots : source de vérité en mémoire de la liste unifiée.

Liste unifiée = catalogue statique (toujours approuvé) + spots de la base distante.
Toutes les mutations passent par ce service :
- Ajout     : upload séquentiel des photos (max 5), insertion, puis ajout en tête de liste
- Approbation, mise à jour, suppression : écriture distante d'abord, mémoire ensuite
- Spots statiques (fr-*, ch-*, es-*) : modifiés en mémoire seulement, jamais en base
Aucune erreur distante ne laisse la liste dans un état partiel.
"""

import logging
import os
import secrets
import threading
import time
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from updock.data.static_spots import is_static_id, static_catalog
from updock.errors import BlobStoreError, RemoteStoreError, RemoteWriteFailure, Unauthorized
from updock.schemas.common import MutationResult, SyncStatus
from updock.schemas.spot import ImageUpload, Spot, SpotDraft, SpotSubmission
from updock.services.spot_mapping import insert_payload, spot_from_row, update_payload

logger = logging.getLogger(__name__)

PENDING_REVIEW_MESSAGE = "Spot soumis ! Il apparaîtra une fois validé par un administrateur."


def generate_image_path(filename: str) -> str:
    """Chemin de stockage unique : public/<epoch ms>_<jeton aléatoire>.<extension d'origine>."""
    ext = os.path.splitext(filename)[1].lstrip(".").lower() or "bin"
    return f"public/{int(time.time() * 1000)}_{secrets.token_hex(6)}.{ext}"


class SpotSynchronizer:
    def __init__(self, row_store, blob_store, auth, max_images: int = 5):
        self._row_store = row_store
        self._blob_store = blob_store
        self._auth = auth
        self._max_images = max_images
        self._lock = threading.RLock()
        self._spots: List[Spot] = static_catalog()
        self.loading = True

    @property
    def spots(self) -> List[Spot]:
        """Copie de la liste unifiée (l'appelant ne peut pas la modifier)."""
        with self._lock:
            return list(self._spots)

    def get(self, spot_id: str) -> Optional[Spot]:
        with self._lock:
            return next((s for s in self._spots if s.id == spot_id), None)

    # ------------------------------------------------------------------
    # Chargement
    # ------------------------------------------------------------------

    def load(self) -> List[Spot]:
        """
        Recharge la liste : catalogue statique puis spots distants (plus récents d'abord).
        En cas d'échec réseau, la liste déjà chargée est conservée telle quelle.
        """
        try:
            rows = self._row_store.select_spots(viewer=self._auth.get_current_user())
        except RemoteStoreError as exc:
            logger.error("Chargement des spots impossible, liste conservée : %s", exc.describe())
            return self.spots
        finally:
            self.loading = False

        merged = static_catalog()
        static_count = len(merged)
        seen = {s.id for s in merged}
        for row in rows:
            try:
                spot = spot_from_row(row)
            except (KeyError, TypeError, ValidationError) as exc:
                logger.error("Ligne spot inutilisable ignorée (%s) : %s", row.get("id"), exc)
                continue
            if spot.id in seen:
                logger.warning("Spot %s en double ignoré au chargement", spot.id)
                continue
            seen.add(spot.id)
            merged.append(spot)

        with self._lock:
            self._spots = merged

        logger.info("Spots chargés : %d statiques, %d distants", static_count, len(merged) - static_count)
        return list(merged)

    # ------------------------------------------------------------------
    # Ajout
    # ------------------------------------------------------------------

    def _upload_images(self, files: Sequence[ImageUpload]) -> Tuple[List[str], List[str]]:
        """Upload séquentiel ; un échec est journalisé et n'interrompt pas les suivants."""
        urls: List[str] = []
        errors: List[str] = []
        for image in files:
            path = generate_image_path(image.filename)
            try:
                self._blob_store.upload(path, image.content, image.content_type)
            except BlobStoreError as exc:
                logger.error("Échec de l'upload de %s : %s", image.filename, exc)
                errors.append(f"{image.filename} : {exc}")
                continue
            urls.append(self._blob_store.get_public_url(path))
        return urls, errors

    def add(self, draft: SpotDraft, image_files: Optional[Sequence[ImageUpload]] = None) -> SpotSubmission:
        """
        Soumet un nouveau spot (en attente de validation).

        Lève Unauthorized sans session, RemoteWriteFailure si l'insertion échoue.
        Le spot n'apparaît en mémoire qu'après confirmation (l'id est attribué par le backend).
        """
        user = self._auth.get_current_user()
        if user is None:
            raise Unauthorized("Vous devez être connecté pour ajouter un spot.")

        files = list(image_files or [])
        ignored = max(0, len(files) - self._max_images)
        if ignored:
            logger.info("%d photo(s) au-delà de %d ignorée(s)", ignored, self._max_images)
        image_urls, upload_errors = self._upload_images(files[: self._max_images])

        try:
            row = self._row_store.insert_spot(insert_payload(draft, image_urls, user.id))
        except RemoteStoreError as exc:
            logger.error("Ajout du spot %r impossible : %s", draft.name, exc.describe())
            raise RemoteWriteFailure(f"Impossible d'ajouter le spot : {exc.describe()}") from exc

        spot = spot_from_row(row)
        with self._lock:
            self._spots.insert(0, spot)

        logger.info(
            "Spot soumis par %s : %s (%s), %d photo(s), %d échec(s)",
            user.id, spot.name, spot.id, len(image_urls), len(upload_errors),
        )
        return SpotSubmission(
            spot=spot,
            upload_errors=upload_errors,
            ignored_files=ignored,
            message=PENDING_REVIEW_MESSAGE,
        )

    # ------------------------------------------------------------------
    # Approbation / suppression / mise à jour
    # ------------------------------------------------------------------

    def _replace(self, spot_id: str, spot: Spot) -> None:
        with self._lock:
            self._spots = [spot if s.id == spot_id else s for s in self._spots]

    def approve(self, spot_id: str) -> MutationResult:
        """Passe is_approved à true en base, puis en mémoire une fois confirmé."""
        if is_static_id(spot_id):
            return MutationResult(spot_id=spot_id, status=SyncStatus.APPLIED_LOCALLY)

        try:
            self._row_store.update_spot(spot_id, {"is_approved": True})
        except RemoteStoreError as exc:
            logger.error("Approbation du spot %s impossible : %s", spot_id, exc.describe())
            raise RemoteWriteFailure(f"Échec de l'approbation : {exc.describe()}") from exc

        with self._lock:
            self._spots = [
                s.model_copy(update={"is_approved": True}) if s.id == spot_id else s
                for s in self._spots
            ]
        logger.info("Spot approuvé : %s", spot_id)
        return MutationResult(spot_id=spot_id, status=SyncStatus.CONFIRMED)

    def delete(self, spot_id: str) -> MutationResult:
        """
        Supprime un spot.

        Statique : retrait de la vue locale uniquement (il réapparaît au prochain chargement).
        Distant : favoris associés supprimés d'abord (échec toléré), puis la ligne du spot ;
        si cette dernière suppression échoue, le spot reste en mémoire.
        """
        if is_static_id(spot_id):
            with self._lock:
                self._spots = [s for s in self._spots if s.id != spot_id]
            logger.info("Spot statique %s masqué localement", spot_id)
            return MutationResult(spot_id=spot_id, status=SyncStatus.APPLIED_LOCALLY)

        try:
            self._row_store.delete_favorites_for_spot(spot_id)
        except RemoteStoreError as exc:
            logger.warning("Favoris du spot %s non supprimés, on continue : %s", spot_id, exc.describe())

        try:
            self._row_store.delete_spot(spot_id)
        except RemoteStoreError as exc:
            logger.error("Suppression du spot %s impossible : %s", spot_id, exc.describe())
            raise RemoteWriteFailure(f"Échec de la suppression du spot : {exc.describe()}") from exc

        with self._lock:
            self._spots = [s for s in self._spots if s.id != spot_id]
        logger.info("Spot supprimé : %s", spot_id)
        return MutationResult(spot_id=spot_id, status=SyncStatus.CONFIRMED)

    def update(self, spot: Spot) -> MutationResult:
        """
        Envoie nom, description, type et difficulté ; en cas de succès l'entrée en mémoire
        est remplacée par l'objet complet reçu.
        """
        if is_static_id(spot.id):
            self._replace(spot.id, spot)
            return MutationResult(spot_id=spot.id, status=SyncStatus.APPLIED_LOCALLY)

        try:
            self._row_store.update_spot(spot.id, update_payload(spot))
        except RemoteStoreError as exc:
            logger.error("Mise à jour du spot %s impossible : %s", spot.id, exc.describe())
            raise RemoteWriteFailure(f"Échec de la mise à jour du spot : {exc.describe()}") from exc

        self._replace(spot.id, spot)
        logger.info("Spot mis à jour : %s", spot.id)
        return MutationResult(spot_id=spot.id, status=SyncStatus.CONFIRMED)
