"""
Schémas Pydantic pour le cache d'images hors-ligne.
"""

from typing import List

from pydantic import BaseModel


class CacheImagesRequest(BaseModel):
    urls: List[str]


class CacheReport(BaseModel):
    """Bilan d'une passe de mise en cache (une URL apparaît dans une seule liste)."""

    cached: List[str] = []
    skipped: List[str] = []   # déjà présentes, jamais retéléchargées
    failed: List[str] = []


class PurgeReport(BaseModel):
    current: str
    deleted: List[str]
