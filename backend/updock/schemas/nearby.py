"""
Schémas Pydantic pour la liste des spots à proximité.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from updock.schemas.spot import Spot


class NearbySpots(BaseModel):
    spots: List[Spot]
    sorted_by_distance: bool
    distance_labels: Dict[str, str] = {}  # id du spot → « 850m », « 12.3 km »
    advisory: Optional[str] = None  # bandeau affiché quand la position est indisponible
