"""
Construction des services de l'application (injection de dépendances).

Chaque service est créé une seule fois au démarrage et partagé par référence ;
les routers le récupèrent via la dépendance get_services. Les tests construisent
leurs propres instances.
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from updock.config import Settings, settings as default_settings
from updock.database import SessionLocal
from updock.scheduler import run_in_background
from updock.services.favorites import FavoritesTracker
from updock.services.language import LanguageService
from updock.services.moderation import ModerationWorkflow
from updock.services.offline_cache import OfflineImageCache
from updock.services.spot_sync import SpotSynchronizer
from updock.stores.auth_provider import SqlAuthProvider
from updock.stores.blob_store import LocalBlobStore, SupabaseBlobStore
from updock.stores.cache_storage import CacheStorage
from updock.stores.local_storage import LocalStorage
from updock.stores.row_store import SqlRowStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    auth: SqlAuthProvider
    local_storage: LocalStorage
    synchronizer: SpotSynchronizer
    favorites: FavoritesTracker
    image_cache: OfflineImageCache
    moderation: ModerationWorkflow
    language: LanguageService


def build_blob_store(cfg: Settings):
    if cfg.STORAGE_BACKEND == "supabase":
        return SupabaseBlobStore(cfg.SUPABASE_URL, cfg.SUPABASE_KEY, cfg.STORAGE_BUCKET)
    return LocalBlobStore(cfg.STORAGE_DIR, cfg.STORAGE_BUCKET, cfg.PUBLIC_BASE_URL)


def build_services(cfg: Settings = default_settings, session_factory=SessionLocal) -> Services:
    """Assemble les services ; la session persistée est restaurée avant le premier chargement."""
    local_storage = LocalStorage(cfg.LOCAL_STORAGE_PATH)
    auth = SqlAuthProvider(session_factory, local_storage, admin_emails=cfg.ADMIN_EMAILS)
    row_store = SqlRowStore(session_factory)

    synchronizer = SpotSynchronizer(
        row_store, build_blob_store(cfg), auth, max_images=cfg.MAX_SPOT_IMAGES
    )
    image_cache = OfflineImageCache(
        CacheStorage(cfg.IMAGE_CACHE_DIR), cfg.IMAGE_CACHE_NAME, timeout=cfg.IMAGE_FETCH_TIMEOUT
    )
    favorites = FavoritesTracker(
        row_store, auth, local_storage, synchronizer, image_cache, run_in_background=run_in_background
    )

    # Un changement de session change les spots visibles (soumissions en attente) et les favoris
    auth.on_auth_state_change(favorites.handle_auth_change)
    auth.on_auth_state_change(lambda event, user: run_in_background(synchronizer.load))
    auth.restore_session()

    logger.info("Services initialisés (stockage photos : %s)", cfg.STORAGE_BACKEND)
    return Services(
        auth=auth,
        local_storage=local_storage,
        synchronizer=synchronizer,
        favorites=favorites,
        image_cache=image_cache,
        moderation=ModerationWorkflow(synchronizer),
        language=LanguageService(local_storage, default=cfg.DEFAULT_LANGUAGE),
    )


def get_services(request: Request) -> Services:
    """Dépendance FastAPI : services construits au démarrage de l'application."""
    return request.app.state.services
