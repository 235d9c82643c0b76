"""
Stockage des photos de spots.

Deux implémentations, choisies par STORAGE_BACKEND :
- LocalBlobStore    : fichiers sous STORAGE_DIR, servis par l'API sous /storage
- SupabaseBlobStore : API Storage de Supabase via httpx
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

import httpx

from updock.errors import BlobStoreError

logger = logging.getLogger(__name__)


def _safe_relative(path: str) -> PurePosixPath:
    """Refuse les chemins absolus ou remontant hors du bucket."""
    rel = PurePosixPath(path)
    if rel.is_absolute() or ".." in rel.parts or not rel.parts:
        raise BlobStoreError(f"Chemin de fichier invalide : {path}")
    return rel


class LocalBlobStore:
    def __init__(self, root_dir: str, bucket: str, public_base_url: str):
        self._bucket_dir = Path(root_dir) / bucket
        self._bucket = bucket
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def bucket_dir(self) -> Path:
        return self._bucket_dir

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        """Écrit le fichier ; un chemin déjà occupé est une erreur (pas d'écrasement)."""
        target = self._bucket_dir / _safe_relative(path)
        if target.exists():
            raise BlobStoreError(f"Le fichier existe déjà : {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise BlobStoreError(f"Écriture impossible ({path}) : {exc}") from exc
        logger.debug("Photo stockée : %s (%d octets)", target, len(data))

    def get_public_url(self, path: str) -> str:
        return f"{self._public_base_url}/{self._bucket}/{_safe_relative(path)}"


class SupabaseBlobStore:
    def __init__(self, base_url: str, api_key: str, bucket: str, timeout: float = 30.0):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._bucket = bucket
        self._timeout = timeout

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        url = f"{self._base_url}/storage/v1/object/{self._bucket}/{_safe_relative(path)}"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "apikey": self._api_key,
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "false",
        }
        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.post(url, content=data, headers=headers)
        except httpx.HTTPError as exc:
            raise BlobStoreError(f"Upload impossible ({path}) : {exc}") from exc
        if resp.status_code >= 400:
            raise BlobStoreError(f"Upload refusé ({resp.status_code}) : {resp.text}")

    def get_public_url(self, path: str) -> str:
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{_safe_relative(path)}"
