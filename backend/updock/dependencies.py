"""
Dépendances FastAPI partagées : session courante et contrôle du rôle admin.
"""

from fastapi import Depends, HTTPException

from updock.container import Services, get_services
from updock.errors import Forbidden, Unauthorized
from updock.schemas.auth import User


def current_user(services: Services = Depends(get_services)) -> User:
    """Utilisateur connecté, sinon 401 (l'UI invite à se connecter)."""
    user = services.auth.get_current_user()
    if user is None:
        raise HTTPException(status_code=401, detail=str(Unauthorized()))
    return user


def require_admin(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail=str(Forbidden()))
    return user
