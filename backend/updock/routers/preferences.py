"""
Router pour les préférences locales de l'appareil.
"""

from fastapi import APIRouter, Depends

from updock.container import Services, get_services
from updock.schemas.preferences import LanguagePreference

router = APIRouter(prefix="/api/preferences", tags=["Préférences"])


@router.get("/language", response_model=LanguagePreference, summary="Langue active")
def get_language(services: Services = Depends(get_services)):
    return LanguagePreference(language=services.language.get())


@router.put("/language", response_model=LanguagePreference, summary="Changer de langue")
def set_language(data: LanguagePreference, services: Services = Depends(get_services)):
    """La valeur est validée par le schéma (fr ou en) puis persistée localement."""
    return LanguagePreference(language=services.language.set(data.language))
