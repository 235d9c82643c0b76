"""
Schémas Pydantic pour les spots.

Un spot vient soit du catalogue statique (toujours approuvé), soit de la table distante
`spots` (en attente de validation tant qu'un admin ne l'a pas approuvé).
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, field_validator

StartType = Literal["Dockstart", "Rockstart", "Dropstart", "Deadstart", "Rampstart"]
Difficulty = Literal["Easy", "Medium", "Hard", "Extreme"]

START_TYPES: Tuple[str, ...] = ("Dockstart", "Rockstart", "Dropstart", "Deadstart", "Rampstart")
DIFFICULTIES: Tuple[str, ...] = ("Easy", "Medium", "Hard", "Extreme")
DEFAULT_START_TYPE = "Dockstart"
MAX_IMAGE_URLS = 5


def _unique_tags(v: List[str]) -> List[str]:
    """Supprime les doublons en conservant l'ordre (le 1er tag pilote la couleur sur la carte)."""
    if not v:
        raise ValueError("Un spot doit avoir au moins un type.")
    return list(dict.fromkeys(v))


class Spot(BaseModel):
    """Spot affiché sur la carte, dans les listes et dans l'espace admin."""

    id: str
    name: str
    type: List[StartType]
    position: Tuple[float, float]      # (latitude, longitude) en degrés décimaux
    description: str = ""
    description_fr: Optional[str] = None
    difficulty: Difficulty = "Medium"
    height: Optional[float] = None     # mètres, surtout utile pour les Dropstart
    image_urls: Optional[List[str]] = None
    is_approved: bool = False
    user_id: Optional[str] = None      # auteur (absent pour le catalogue statique)
    distance: Optional[float] = None   # km depuis l'utilisateur, calculé, jamais persisté

    @field_validator("type")
    @classmethod
    def type_not_empty(cls, v: List[str]) -> List[str]:
        return _unique_tags(v)

    @field_validator("image_urls")
    @classmethod
    def max_five_images(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and len(v) > MAX_IMAGE_URLS:
            raise ValueError(f"Maximum {MAX_IMAGE_URLS} photos par spot.")
        return v


class SpotDraft(BaseModel):
    """Données saisies dans le formulaire d'ajout (id et auteur attribués par le backend)."""

    name: str
    type: List[StartType] = [DEFAULT_START_TYPE]
    position: Tuple[float, float]
    description: str = ""
    description_fr: Optional[str] = None
    difficulty: Difficulty = "Medium"
    height: Optional[float] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du spot ne peut pas être vide.")
        return v.strip()

    @field_validator("type")
    @classmethod
    def type_not_empty(cls, v: List[str]) -> List[str]:
        return _unique_tags(v)

    @field_validator("position")
    @classmethod
    def valid_position(cls, v: Tuple[float, float]) -> Tuple[float, float]:
        lat, lng = v
        if not -90 <= lat <= 90 or not -180 <= lng <= 180:
            raise ValueError("Coordonnées invalides.")
        return v


class ImageUpload(BaseModel):
    """Photo jointe à une soumission, lue en mémoire avant l'envoi."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


class SpotSubmission(BaseModel):
    """Rapport d'ajout : le spot créé (en attente) et les photos qui n'ont pas pu être envoyées."""

    spot: Spot
    upload_errors: List[str] = []
    ignored_files: int = 0
    message: str


class DraftChanges(BaseModel):
    """Modification partielle du brouillon d'édition admin."""

    name: Optional[str] = None
    description: Optional[str] = None
    description_fr: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    height: Optional[float] = None

    @field_validator("name", "description", "difficulty")
    @classmethod
    def not_null(cls, v: Optional[str]) -> str:
        """Absent = inchangé ; null explicite refusé (seuls description_fr et height s'effacent)."""
        if v is None:
            raise ValueError("Ce champ ne peut pas être effacé.")
        return v

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du spot ne peut pas être vide.")
        return v.strip()
