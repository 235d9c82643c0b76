"""
Cache d'images hors-ligne (best effort) pour les spots susceptibles d'être consultés sans réseau.

- cache_images : télécharge uniquement les URL absentes du bucket courant ;
  une URL présente n'est jamais retéléchargée (pas de TTL ni de revalidation)
- purge_stale_buckets : supprime tous les buckets sauf la version courante
Les erreurs sont journalisées URL par URL et ne remontent jamais à l'appelant.
"""

import logging
from typing import Iterable, Optional

import httpx

from updock.schemas.offline import CacheReport, PurgeReport
from updock.stores.cache_storage import CachedResponse, CacheStorage

logger = logging.getLogger(__name__)


class OfflineImageCache:
    def __init__(
        self,
        storage: CacheStorage,
        cache_name: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._storage = storage
        self._cache_name = cache_name
        self._timeout = timeout
        self._transport = transport

    @property
    def cache_name(self) -> str:
        return self._cache_name

    def cache_images(self, urls: Optional[Iterable[str]]) -> CacheReport:
        report = CacheReport()
        urls = [u for u in dict.fromkeys(urls or []) if u]
        if not urls:
            return report

        try:
            bucket = self._storage.open(self._cache_name)
        except OSError as exc:
            logger.error("[Offline] Cache inaccessible : %s", exc)
            report.failed.extend(urls)
            return report

        with httpx.Client(timeout=self._timeout, transport=self._transport, follow_redirects=True) as client:
            for url in urls:
                try:
                    if bucket.match(url) is not None:
                        report.skipped.append(url)
                        continue
                    resp = client.get(url)
                    if not resp.is_success:
                        logger.warning("[Offline] Image non mise en cache (%d) : %s", resp.status_code, url)
                        report.failed.append(url)
                        continue
                    bucket.put(url, resp.content, resp.headers.get("content-type"))
                    report.cached.append(url)
                except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as exc:
                    logger.error("[Offline] Échec de la mise en cache de %s : %s", url, exc)
                    report.failed.append(url)

        logger.info(
            "[Offline] %d image(s) mises en cache, %d déjà présentes, %d échec(s)",
            len(report.cached), len(report.skipped), len(report.failed),
        )
        return report

    def get_cached(self, url: str) -> Optional[CachedResponse]:
        try:
            return self._storage.open(self._cache_name).match(url)
        except (OSError, ValueError) as exc:
            logger.error("[Offline] Lecture du cache impossible pour %s : %s", url, exc)
            return None

    def purge_stale_buckets(self) -> PurgeReport:
        """Supprime tous les buckets dont le nom diffère de la version courante."""
        deleted = []
        for name in self._storage.keys():
            if name == self._cache_name:
                continue
            try:
                if self._storage.delete(name):
                    deleted.append(name)
            except OSError as exc:
                logger.error("[Offline] Suppression du cache %s impossible : %s", name, exc)
        if deleted:
            logger.info("[Offline] Anciens caches supprimés : %s", ", ".join(deleted))
        return PurgeReport(current=self._cache_name, deleted=deleted)
