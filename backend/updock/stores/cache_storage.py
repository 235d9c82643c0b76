"""
Cache de réponses HTTP adressé par bucket (équivalent de l'API Cache du navigateur).

Un bucket = un dossier sous IMAGE_CACHE_DIR. Une entrée = le corps de la réponse
(<sha256(url)>.bin) + ses métadonnées (<sha256(url)>.json). Les entrées sont immuables :
un put sur une URL déjà présente est ignoré, seule la purge d'un bucket entier les retire.
"""

import hashlib
import json
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel


class CachedResponse(BaseModel):
    url: str
    content_type: Optional[str] = None
    cached_at: datetime
    body: bytes


def _key(url: str) -> str:
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


class CacheBucket:
    def __init__(self, directory: Path):
        self._dir = directory
        self._dir.mkdir(parents=True, exist_ok=True)

    def match(self, url: str) -> Optional[CachedResponse]:
        key = _key(url)
        meta_path = self._dir / f"{key}.json"
        body_path = self._dir / f"{key}.bin"
        if not meta_path.exists() or not body_path.exists():
            return None
        meta = json.loads(meta_path.read_text(encoding="utf-8"))
        return CachedResponse(
            url=meta["url"],
            content_type=meta.get("content_type"),
            cached_at=datetime.fromisoformat(meta["cached_at"]),
            body=body_path.read_bytes(),
        )

    def put(self, url: str, body: bytes, content_type: Optional[str] = None) -> bool:
        """Stocke la réponse. Retourne False si l'URL était déjà en cache (rien n'est réécrit)."""
        key = _key(url)
        meta_path = self._dir / f"{key}.json"
        if meta_path.exists():
            return False

        # Corps d'abord, métadonnées ensuite : match() ne voit l'entrée qu'une fois complète
        body_tmp = self._dir / f"{key}.bin.tmp"
        body_tmp.write_bytes(body)
        os.replace(body_tmp, self._dir / f"{key}.bin")

        meta_tmp = self._dir / f"{key}.json.tmp"
        meta_tmp.write_text(
            json.dumps({
                "url": url,
                "content_type": content_type,
                "cached_at": datetime.now(timezone.utc).isoformat(),
            }),
            encoding="utf-8",
        )
        os.replace(meta_tmp, meta_path)
        return True


class CacheStorage:
    def __init__(self, root_dir: str):
        self._root = Path(root_dir)

    def open(self, name: str) -> CacheBucket:
        return CacheBucket(self._root / name)

    def keys(self) -> List[str]:
        """Noms de tous les buckets existants."""
        if not self._root.exists():
            return []
        return sorted(p.name for p in self._root.iterdir() if p.is_dir())

    def delete(self, name: str) -> bool:
        target = self._root / name
        if not target.is_dir():
            return False
        shutil.rmtree(target)
        return True
