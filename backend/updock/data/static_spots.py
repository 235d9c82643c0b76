"""
Catalogue statique des spots livrés avec l'application.

Ces spots sont toujours considérés comme approuvés et ne sont jamais écrits dans la base
distante. Leurs identifiants sont préfixés par la région (fr-, ch-, es-) : ils ne peuvent
pas entrer en collision avec les UUID générés par le backend.
"""

from typing import List

from updock.schemas.spot import Spot

STATIC_ID_PREFIXES = ("fr-", "ch-", "es-")

_CATALOG = [
    # --- FRANCE ---
    {
        "id": "fr-moisson",
        "name": "Moisson Lavacourt",
        "type": ["Dockstart"],
        "position": (49.0729, 1.6692),
        "description": "Popular spot in Ile-de-France. Large lake with good conditions for pumping. "
                       "Often busy on weekends.",
        "description_fr": "Spot populaire en Ile-de-France. Grand lac avec de bonnes conditions pour "
                          "le pumping. Souvent fréquenté le week-end.",
        "difficulty": "Medium",
    },
    {
        "id": "fr-jablines",
        "name": "Jablines-Annet",
        "type": ["Dockstart"],
        "position": (48.9108, 2.7306),
        "description": "Base de Loisirs near Paris. Clean water and nice pontoons. "
                       "Check opening hours and entry fees.",
        "difficulty": "Easy",
    },
    {
        "id": "fr-talloires",
        "name": "Talloires - Petit Port",
        "type": ["Dockstart"],
        "position": (45.84, 6.21),
        "description": "Stunning spot on Lake Annecy. Crystal clear water. "
                       "Launch from the small wooden dock near the harbor.",
        "difficulty": "Medium",
    },
    {
        "id": "fr-crau",
        "name": "Aqueduc St Martin",
        "type": ["Dropstart"],
        "position": (43.6333, 4.8167),
        "description": "Famous dropstart spot in Provence using the canal infrastructure. "
                       "Requires good technique. High speed entry!",
        "difficulty": "Extreme",
        "height": 1.5,
    },
    # --- SUISSE ---
    {
        "id": "ch-nidau",
        "name": "Plage de Nidau",
        "type": ["Dockstart"],
        "position": (47.128, 7.24),
        "description": "Located on Lake Bienne. Very popular community spot. Low docks ideal for learning.",
        "difficulty": "Easy",
    },
    {
        "id": "ch-coppet",
        "name": "Plage de Coppet",
        "type": ["Dockstart"],
        "position": (46.3172, 6.1939),
        "description": "Classic Lake Geneva spot. Nice grassy area to rig and a concrete dock. "
                       "Good depth immediately.",
        "difficulty": "Medium",
    },
    {
        "id": "ch-laax",
        "name": "Laaxer See (Lag Grond)",
        "type": ["Dockstart"],
        "position": (46.8059, 9.2582),
        "description": "High altitude alpine lake (1000m+). Cold water but flat and scenic. "
                       "Check local regulations.",
        "difficulty": "Hard",
    },
    # --- ESPAGNE ---
    {
        "id": "es-tarifa",
        "name": "Tarifa - Balneario",
        "type": ["Dockstart", "Rockstart"],
        "position": (36.0139, -5.6070),
        "description": "The Mecca of wind. Can be used for dockstart on calm days or "
                       "\"Rockstart\" from the causeway stones.",
        "difficulty": "Hard",
    },
    {
        "id": "es-barcelona",
        "name": "Forum Barcelona",
        "type": ["Dockstart"],
        "position": (41.4099, 2.2271),
        "description": "Artificial bathing area in the city. Protected water, very flat. "
                       "Great for training sequences.",
        "difficulty": "Easy",
    },
    {
        "id": "es-estartit",
        "name": "L'Estartit",
        "type": ["Dockstart", "Rockstart"],
        "position": (42.05, 3.20),
        "description": "Costa Brava vibe. Launch from the harbor walls or nearby rocky outcrops. "
                       "Watch out for boats.",
        "difficulty": "Medium",
    },
]


def is_static_id(spot_id: str) -> bool:
    """Vrai si l'identifiant appartient au catalogue statique (suppression locale uniquement)."""
    return spot_id.startswith(STATIC_ID_PREFIXES)


def static_catalog() -> List[Spot]:
    """Retourne une copie neuve du catalogue, chaque spot forcé à is_approved=True."""
    return [Spot(**entry, is_approved=True) for entry in _CATALOG]


def static_ids() -> List[str]:
    return [entry["id"] for entry in _CATALOG]
