"""
Configuration de la connexion à la base de données distante (PostgreSQL).
Les tables spots / favorites / profiles y vivent ; l'app ne garde qu'une projection en mémoire.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from updock.config import settings

# Moteur créé paresseusement : aucune connexion n'est ouverte avant la première requête
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None) -> None:
    """Crée les tables manquantes (développement et tests)."""
    import updock.models  # noqa: F401  enregistre les modèles dans Base.metadata

    Base.metadata.create_all(bind=bind or engine)
