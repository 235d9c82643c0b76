"""
Modèle SQLAlchemy pour les favoris (association utilisateur ↔ spot).

spot_id n'a pas de clé étrangère : les spots du catalogue statique (fr-*, ch-*, es-*)
n'existent pas dans la table spots mais peuvent être mis en favori.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func

from updock.database import Base


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "spot_id", name="uq_favorite_user_spot"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    spot_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
