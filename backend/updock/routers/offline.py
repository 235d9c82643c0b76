"""
Router pour le cache d'images hors-ligne.
"""

from fastapi import APIRouter, Depends, HTTPException, Response

from updock.container import Services, get_services
from updock.schemas.offline import CacheImagesRequest, CacheReport, PurgeReport

router = APIRouter(prefix="/api/offline", tags=["Hors-ligne"])


@router.post("/images", response_model=CacheReport, summary="Mettre des images en cache")
def cache_images(data: CacheImagesRequest, services: Services = Depends(get_services)):
    """Télécharge les images absentes du cache ; les échecs sont listés, jamais bloquants."""
    return services.image_cache.cache_images(data.urls)


@router.get("/images", summary="Lire une image depuis le cache")
def read_cached_image(url: str, services: Services = Depends(get_services)):
    """Retourne les octets mis en cache pour cette URL, ou 404 si elle n'a jamais été mise en cache."""
    cached = services.image_cache.get_cached(url)
    if cached is None:
        raise HTTPException(status_code=404, detail="Image absente du cache.")
    return Response(content=cached.body, media_type=cached.content_type or "application/octet-stream")


@router.post("/purge", response_model=PurgeReport, summary="Purger les anciens caches")
def purge_caches(services: Services = Depends(get_services)):
    """Supprime tous les caches d'images sauf la version courante."""
    return services.image_cache.purge_stale_buckets()
