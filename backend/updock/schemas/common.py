"""
Schémas communs aux opérations de mutation (spots et favoris).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class SyncStatus(str, Enum):
    """État d'une mutation vis-à-vis du backend."""

    APPLIED_LOCALLY = "applied_locally"   # appliquée en mémoire uniquement (catalogue statique)
    CONFIRMED = "confirmed"               # acceptée par le backend
    ROLLED_BACK = "rolled_back"           # changement optimiste annulé après échec distant


class MutationResult(BaseModel):
    spot_id: str
    status: SyncStatus
    detail: Optional[str] = None
