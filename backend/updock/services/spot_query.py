"""
Recherche et filtre par type sur la liste unifiée (écran de recherche et filtre de la carte).
"""

from typing import List

from updock.schemas.spot import Spot

ALL_TYPES = "All"


def search_spots(spots: List[Spot], query: str) -> List[Spot]:
    """Recherche insensible à la casse dans le nom, la description et les types. Requête vide → []."""
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [
        s for s in spots
        if needle in s.name.lower()
        or needle in s.description.lower()
        or any(needle in tag.lower() for tag in s.type)
    ]


def filter_by_type(spots: List[Spot], start_type: str = ALL_TYPES) -> List[Spot]:
    if start_type == ALL_TYPES:
        return list(spots)
    return [s for s in spots if start_type in s.type]
