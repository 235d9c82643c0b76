"""
Suivi des favoris de l'utilisateur connecté (offline-first, écritures optimistes).

Cycle d'un basculement : idle → appliqué localement → confirmé | annulé.
- Lecture : le dernier instantané connu est relu depuis le stockage local dès la
  construction, avant tout appel réseau ; refresh() le remplace par l'ensemble distant.
- Écriture : l'état en mémoire est modifié immédiatement, puis l'insert/delete distant est envoyé ;
  en cas d'échec l'instantané pris avant le basculement est restauré tel quel. Le stockage
  local n'est réécrit qu'après confirmation : un favori refusé n'est jamais relu au redémarrage.
- Persistance : seuls les ensembles non vides sont recopiés dans le stockage local.
  Un ensemble vide (déconnexion, fetch vide hors-ligne) n'efface pas le dernier instantané.
"""

import json
import logging
import threading
from typing import Callable, List, Optional

from updock.errors import RemoteStoreError, Unauthorized
from updock.schemas.auth import User
from updock.schemas.common import SyncStatus
from updock.schemas.favorite import FavoriteToggleResult
from updock.schemas.spot import Spot

logger = logging.getLogger(__name__)

FAVORITES_KEY = "updock_favorites"


def _run_now(func: Callable, *args) -> None:
    func(*args)


class FavoritesTracker:
    def __init__(
        self,
        row_store,
        auth,
        local_storage,
        synchronizer,
        image_cache,
        run_in_background: Callable = _run_now,
    ):
        self._row_store = row_store
        self._auth = auth
        self._local_storage = local_storage
        self._synchronizer = synchronizer
        self._image_cache = image_cache
        self._run_in_background = run_in_background
        self._state_lock = threading.Lock()
        self._toggle_lock = threading.Lock()  # sérialise les basculements (snapshot/restore sûr)
        self._favorites: List[str] = self._read_snapshot()

    # --- Stockage local ---

    def _read_snapshot(self) -> List[str]:
        raw = self._local_storage.get_item(FAVORITES_KEY)
        if not raw:
            return []
        try:
            ids = json.loads(raw)
        except ValueError:
            logger.warning("Instantané de favoris illisible, ignoré")
            return []
        if not isinstance(ids, list):
            return []
        return [str(i) for i in dict.fromkeys(ids)]

    def _set(self, ids: List[str], persist: bool = True) -> None:
        """Remplace l'ensemble en mémoire et recopie les ensembles non vides sur l'appareil."""
        with self._state_lock:
            self._favorites = list(ids)
        if persist and ids:
            try:
                self._local_storage.set_item(FAVORITES_KEY, json.dumps(ids))
            except OSError as exc:
                logger.warning("Sauvegarde locale des favoris impossible : %s", exc)

    # --- Lecture ---

    @property
    def favorites(self) -> List[str]:
        with self._state_lock:
            return list(self._favorites)

    def is_favorite(self, spot_id: str) -> bool:
        with self._state_lock:
            return spot_id in self._favorites

    def favorite_spots(self) -> List[Spot]:
        """Spots favoris, dans l'ordre de la liste unifiée."""
        ids = set(self.favorites)
        return [s for s in self._synchronizer.spots if s.id in ids]

    # --- Synchronisation ---

    def refresh(self) -> List[str]:
        """
        Avec session : l'ensemble distant fait foi (mémoire + stockage local).
        Sans session : l'ensemble visible est vidé, l'instantané local est conservé.
        Échec réseau : l'ensemble courant (instantané hydraté) est conservé.
        """
        user = self._auth.get_current_user()
        if user is None:
            with self._state_lock:
                self._favorites = []
            return []

        try:
            ids = self._row_store.list_favorite_ids(user.id)
        except RemoteStoreError as exc:
            logger.error("Chargement des favoris impossible : %s", exc.describe())
            return self.favorites

        self._set(list(dict.fromkeys(ids)))
        logger.info("Favoris chargés pour %s : %d", user.id, len(ids))
        return self.favorites

    def handle_auth_change(self, event: str, user: Optional[User]) -> None:
        """Abonné du fournisseur d'auth : recharge à chaque changement de session."""
        logger.debug("Changement de session (%s), rechargement des favoris", event)
        self.refresh()

    # --- Écriture optimiste ---

    def toggle(self, spot_id: str) -> FavoriteToggleResult:
        """
        Bascule l'état favori d'un spot.
        Lève Unauthorized sans session (aucun changement d'état).
        """
        user = self._auth.get_current_user()
        if user is None:
            raise Unauthorized("Connectez-vous pour ajouter des favoris.")

        with self._toggle_lock:
            snapshot = self.favorites
            adding = spot_id not in snapshot
            flipped = [*snapshot, spot_id] if adding else [i for i in snapshot if i != spot_id]
            self._set(flipped, persist=False)

            try:
                if adding:
                    self._row_store.insert_favorite(user.id, spot_id)
                else:
                    self._row_store.delete_favorite(user.id, spot_id)
            except RemoteStoreError as exc:
                logger.error("Mise à jour du favori %s impossible, annulation : %s", spot_id, exc.describe())
                self._set(snapshot, persist=False)
                return FavoriteToggleResult(
                    spot_id=spot_id,
                    is_favorite=not adding,
                    status=SyncStatus.ROLLED_BACK,
                    detail=f"Impossible de mettre à jour les favoris : {exc.describe()}",
                )

            self._set(flipped)

        if adding:
            self._precache(spot_id)

        return FavoriteToggleResult(spot_id=spot_id, is_favorite=adding, status=SyncStatus.CONFIRMED)

    def _precache(self, spot_id: str) -> None:
        """Met en cache les photos du spot favori, en arrière-plan et sans bloquer."""
        spot = self._synchronizer.get(spot_id)
        if spot is None or not spot.image_urls:
            return
        self._run_in_background(self._image_cache.cache_images, list(spot.image_urls))
