"""
Tests unitaires pour le cache d'images hors-ligne.
Le réseau est simulé avec httpx.MockTransport ; le cache vit dans tmp_path.
Couverture : jamais de second téléchargement, échecs URL par URL, purge des anciens caches.
"""

import httpx

from updock.services.offline_cache import OfflineImageCache
from updock.stores.cache_storage import CacheStorage

CACHE_NAME = "updock-images-v1"


# --- Helpers ---

def make_cache(tmp_path, responses=None, fail_urls=()):
    """responses : url → (status, contenu). Les URL de fail_urls lèvent une erreur réseau."""
    responses = responses or {}
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        calls.append(url)
        if url in fail_urls:
            raise httpx.ConnectError("réseau indisponible", request=request)
        status, body = responses.get(url, (404, b""))
        return httpx.Response(status, content=body, headers={"content-type": "image/jpeg"})

    storage = CacheStorage(str(tmp_path / "cache"))
    cache = OfflineImageCache(storage, CACHE_NAME, transport=httpx.MockTransport(handler))
    return cache, storage, calls


A = "https://cdn.example/public/a.jpg"
B = "https://cdn.example/public/b.jpg"
C = "https://cdn.example/public/c.jpg"


# ============================================================
# Mise en cache
# ============================================================

def test_mise_en_cache_des_urls(tmp_path):
    cache, _, _ = make_cache(tmp_path, {A: (200, b"aaa"), B: (200, b"bbb")})
    report = cache.cache_images([A, B])

    assert report.cached == [A, B]
    assert report.failed == []
    assert cache.get_cached(A).body == b"aaa"
    assert cache.get_cached(B).content_type == "image/jpeg"


def test_url_presente_jamais_retelechargee(tmp_path):
    cache, _, calls = make_cache(tmp_path, {A: (200, b"aaa")})
    cache.cache_images([A])
    report = cache.cache_images([A])

    assert calls == [A]
    assert report.skipped == [A]
    assert report.cached == []


def test_doublons_telecharges_une_fois(tmp_path):
    cache, _, calls = make_cache(tmp_path, {A: (200, b"aaa")})
    cache.cache_images([A, A, ""])

    assert calls == [A]


def test_echec_http_n_interrompt_pas_les_suivantes(tmp_path):
    cache, _, _ = make_cache(tmp_path, {A: (500, b""), B: (200, b"bbb")})
    report = cache.cache_images([A, B])

    assert report.failed == [A]
    assert report.cached == [B]
    assert cache.get_cached(A) is None


def test_erreur_reseau_par_url(tmp_path):
    cache, _, _ = make_cache(tmp_path, {B: (200, b"bbb")}, fail_urls=(A,))
    report = cache.cache_images([A, B])

    assert report.failed == [A]
    assert report.cached == [B]


def test_echec_puis_nouvel_essai(tmp_path):
    """Une URL en échec n'est pas mise en cache : elle sera retentée au prochain appel."""
    responses = {A: (503, b"")}
    cache, _, calls = make_cache(tmp_path, responses)
    cache.cache_images([A])
    responses[A] = (200, b"aaa")
    report = cache.cache_images([A])

    assert report.cached == [A]
    assert calls == [A, A]


def test_liste_vide_ou_none(tmp_path):
    cache, storage, calls = make_cache(tmp_path)

    assert cache.cache_images(None).cached == []
    assert cache.cache_images([]).failed == []
    assert calls == []
    assert storage.keys() == []


# ============================================================
# Purge
# ============================================================

def test_purge_conserve_uniquement_la_version_courante(tmp_path):
    cache, storage, _ = make_cache(tmp_path, {C: (200, b"ccc")})
    storage.open("updock-images-v0").put(A, b"ancien")
    storage.open("autre-cache")
    cache.cache_images([C])

    report = cache.purge_stale_buckets()

    assert report.current == CACHE_NAME
    assert sorted(report.deleted) == ["autre-cache", "updock-images-v0"]
    assert storage.keys() == [CACHE_NAME]
    assert cache.get_cached(C).body == b"ccc"


def test_purge_sans_cache(tmp_path):
    cache, _, _ = make_cache(tmp_path)
    report = cache.purge_stale_buckets()

    assert report.deleted == []
