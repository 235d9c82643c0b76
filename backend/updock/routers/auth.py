"""
Router pour l'authentification et le profil.
Une seule session active : celle de l'appareil.
"""

from fastapi import APIRouter, Depends, HTTPException

from updock.container import Services, get_services
from updock.dependencies import current_user
from updock.errors import AuthError
from updock.schemas.auth import ProfileResponse, SignInRequest, SignUpRequest, User

router = APIRouter(prefix="/api/auth", tags=["Authentification"])


@router.post("/sign-up", response_model=ProfileResponse, status_code=201, summary="Créer un compte")
def sign_up(data: SignUpRequest, services: Services = Depends(get_services)):
    """Crée le compte et ouvre la session. Le rôle admin est attribué selon ADMIN_EMAILS."""
    try:
        session = services.auth.sign_up(data)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ProfileResponse.from_user(session.user)


@router.post("/sign-in", response_model=ProfileResponse, summary="Se connecter")
def sign_in(data: SignInRequest, services: Services = Depends(get_services)):
    try:
        session = services.auth.sign_in_with_password(data.email, data.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return ProfileResponse.from_user(session.user)


@router.post("/sign-out", status_code=204, summary="Se déconnecter")
def sign_out(services: Services = Depends(get_services)):
    """Ferme la session ; les favoris visibles sont vidés, l'instantané local est conservé."""
    services.auth.sign_out()


@router.get("/me", response_model=ProfileResponse, summary="Profil de l'utilisateur connecté")
def me(user: User = Depends(current_user)):
    return ProfileResponse.from_user(user)
