"""
Préférence de langue (fr / en), persistée dans le stockage local de l'appareil.
"""

import logging

from updock.schemas.spot import Spot

logger = logging.getLogger(__name__)

LANGUAGE_KEY = "updock_language"
SUPPORTED_LANGUAGES = ("fr", "en")


def localized_description(spot: Spot, language: str) -> str:
    """Description française si la langue active est fr et qu'elle existe, sinon la description par défaut."""
    if language == "fr" and spot.description_fr:
        return spot.description_fr
    return spot.description


class LanguageService:
    def __init__(self, local_storage, default: str = "fr"):
        self._local_storage = local_storage
        self._default = default if default in SUPPORTED_LANGUAGES else "fr"

    def get(self) -> str:
        saved = self._local_storage.get_item(LANGUAGE_KEY)
        return saved if saved in SUPPORTED_LANGUAGES else self._default

    def set(self, language: str) -> str:
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Langue non supportée : {language}")
        self._local_storage.set_item(LANGUAGE_KEY, language)
        logger.info("Langue changée : %s", language)
        return language
