"""
Erreurs métier remontées par les services.
Les routers les traduisent en HTTPException (401, 403, 404, 502).
"""

from typing import Any, Optional


class UpdockError(Exception):
    """Classe de base des erreurs métier Updock."""


class Unauthorized(UpdockError):
    """Opération nécessitant une session lancée sans utilisateur connecté."""

    def __init__(self, message: str = "Vous devez être connecté."):
        super().__init__(message)


class Forbidden(UpdockError):
    """Opération réservée aux administrateurs."""

    def __init__(self, message: str = "Accès réservé aux administrateurs."):
        super().__init__(message)


class SpotNotFound(UpdockError):
    def __init__(self, spot_id: str):
        super().__init__("Spot introuvable.")
        self.spot_id = spot_id


class RemoteWriteFailure(UpdockError):
    """Écriture refusée par le backend (réseau, contrainte ou permission)."""


class GeolocationUnavailable(UpdockError):
    """Position de l'appareil indisponible, condition non bloquante."""


class RemoteStoreError(Exception):
    """Erreur renvoyée par la base distante, avec tout le détail disponible."""

    def __init__(self, message: str, details: Optional[Any] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def describe(self) -> str:
        """Message complet : message, code et détails si présents."""
        parts = [self.message]
        if self.code:
            parts.append(f"code={self.code}")
        if self.details:
            parts.append(str(self.details))
        return " | ".join(parts)


class BlobStoreError(Exception):
    """Échec d'upload vers le stockage de photos."""


class AuthError(Exception):
    """Identifiants invalides, compte existant ou session expirée."""
