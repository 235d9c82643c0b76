"""
Schémas Pydantic pour les préférences locales.
"""

from typing import Literal

from pydantic import BaseModel

Language = Literal["fr", "en"]


class LanguagePreference(BaseModel):
    language: Language
