"""
Planificateur APScheduler pour le travail en arrière-plan.

- Au démarrage : chargement des spots distants, des favoris et purge des anciens caches d'images
- Toutes les SPOTS_REFRESH_MINUTES : rechargement de la liste de spots
- À la demande : tâches ponctuelles (mise en cache des photos d'un spot mis en favori)
"""

import logging
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler

from updock.config import settings

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def run_in_background(func: Callable, *args) -> None:
    """
    Planifie un appel ponctuel immédiat. Si le planificateur n'est pas démarré
    (tests, script), l'appel est exécuté directement.
    """
    if scheduler.running:
        scheduler.add_job(func, args=list(args))
    else:
        func(*args)


def start_scheduler(services) -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    scheduler.add_job(services.synchronizer.load, id="spots_initial_load", replace_existing=True)
    scheduler.add_job(services.favorites.refresh, id="favorites_initial_load", replace_existing=True)
    scheduler.add_job(services.image_cache.purge_stale_buckets, id="image_cache_purge", replace_existing=True)
    scheduler.add_job(
        services.synchronizer.load,
        trigger="interval",
        minutes=settings.SPOTS_REFRESH_MINUTES,
        id="spots_refresh",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "Scheduler démarré, rechargement des spots toutes les %d minutes.",
        settings.SPOTS_REFRESH_MINUTES,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
