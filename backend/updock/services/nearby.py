"""
Spots à proximité : distance haversine depuis la position de l'appareil.
Sans position (refus ou indisponibilité), la liste reste dans l'ordre par défaut
avec un bandeau d'avertissement ; ce n'est jamais une erreur bloquante.
"""

import math
from typing import List, Optional, Tuple

from updock.errors import GeolocationUnavailable
from updock.schemas.nearby import NearbySpots
from updock.schemas.spot import Spot

EARTH_RADIUS_KM = 6371
LOCATION_UNAVAILABLE = "Impossible de récupérer votre position"


def haversine_km(origin: Tuple[float, float], target: Tuple[float, float]) -> float:
    lat1, lng1 = origin
    lat2, lng2 = target
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def resolve_origin(lat: Optional[float], lng: Optional[float]) -> Tuple[float, float]:
    """Valide la position transmise par l'appareil ; lève GeolocationUnavailable sinon."""
    if lat is None or lng is None:
        raise GeolocationUnavailable(LOCATION_UNAVAILABLE)
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise GeolocationUnavailable(f"Position invalide : {lat}, {lng}")
    return lat, lng


def nearby_spots(
    spots: List[Spot],
    origin: Optional[Tuple[float, float]],
    advisory: str = LOCATION_UNAVAILABLE,
) -> NearbySpots:
    """Copies des spots avec `distance` renseignée, triées de la plus proche à la plus lointaine."""
    if origin is None:
        return NearbySpots(spots=list(spots), sorted_by_distance=False, advisory=advisory)

    with_distance = [s.model_copy(update={"distance": haversine_km(origin, s.position)}) for s in spots]
    with_distance.sort(key=lambda s: s.distance)
    return NearbySpots(
        spots=with_distance,
        sorted_by_distance=True,
        distance_labels={s.id: format_distance(s.distance) for s in with_distance},
    )


def format_distance(km: float) -> str:
    """« 850m » sous le kilomètre, « 12.3 km » au-delà."""
    if km < 1:
        return f"{round(km * 1000)}m"
    return f"{km:.1f} km"
