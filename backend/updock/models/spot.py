"""
Modèle SQLAlchemy pour les spots soumis par les utilisateurs.

Le champ `type` est stocké en texte : selon l'historique de la table il contient
un tableau JSON ('["Dockstart", "Rockstart"]') ou un tag isolé ('Dockstart').
La normalisation se fait côté client (services/spot_mapping.py).
"""

import uuid
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, String, Text, false, func

from updock.database import Base


class SpotRow(Base):
    __tablename__ = "spots"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    description_fr = Column(Text, nullable=True)
    type = Column(Text, nullable=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    difficulty = Column(String(20), nullable=True)  # Easy, Medium, Hard, Extreme
    height = Column(Float, nullable=True)  # Hauteur en mètres (Dropstart)
    image_urls = Column(JSON, nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False, server_default=false())
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
