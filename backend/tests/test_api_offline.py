"""
Tests d'intégration API pour le cache d'images hors-ligne.
Endpoints : POST /api/offline/images, GET /api/offline/images, POST /api/offline/purge
"""

from datetime import datetime, timezone

from updock.schemas.offline import CacheReport, PurgeReport
from updock.stores.cache_storage import CachedResponse

URL = "https://cdn.example/public/a.jpg"


def test_mise_en_cache(client, services):
    services.image_cache.cache_images.return_value = CacheReport(cached=[URL], failed=["https://cdn/x.jpg"])
    response = client.post("/api/offline/images", json={"urls": [URL, "https://cdn/x.jpg"]})

    assert response.status_code == 200
    assert response.json()["failed"] == ["https://cdn/x.jpg"]
    services.image_cache.cache_images.assert_called_once_with([URL, "https://cdn/x.jpg"])


def test_lecture_image_en_cache(client, services):
    services.image_cache.get_cached.return_value = CachedResponse(
        url=URL, content_type="image/jpeg", cached_at=datetime.now(timezone.utc), body=b"jpeg",
    )
    response = client.get("/api/offline/images", params={"url": URL})

    assert response.status_code == 200
    assert response.content == b"jpeg"
    assert response.headers["content-type"] == "image/jpeg"


def test_lecture_image_absente(client, services):
    services.image_cache.get_cached.return_value = None
    response = client.get("/api/offline/images", params={"url": URL})

    assert response.status_code == 404


def test_purge(client, services):
    services.image_cache.purge_stale_buckets.return_value = PurgeReport(
        current="updock-images-v2", deleted=["updock-images-v1"]
    )
    response = client.post("/api/offline/purge")

    assert response.json() == {"current": "updock-images-v2", "deleted": ["updock-images-v1"]}
