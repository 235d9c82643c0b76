"""
Modèle SQLAlchemy pour les profils utilisateurs (fournisseur d'authentification).
"""

import uuid
from sqlalchemy import Column, DateTime, String, func

from updock.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    username = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default="user")  # user, admin
    access_token = Column(String(128), unique=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
