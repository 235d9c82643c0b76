"""
Accès aux tables distantes `spots` et `favorites` (base PostgreSQL du backend).

Chaque méthode ouvre sa propre session, échange des dictionnaires (format ligne) et
enveloppe toute erreur SQLAlchemy dans RemoteStoreError. Les règles d'accès par ligne
du backend sont reproduites ici :
- visiteur anonyme : spots approuvés uniquement
- utilisateur connecté : spots approuvés + ses propres soumissions
- admin : tous les spots
- favoris : toujours filtrés sur l'utilisateur appelant
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import delete, inspect, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from updock.errors import RemoteStoreError
from updock.models.favorite import Favorite
from updock.models.spot import SpotRow
from updock.schemas.auth import User

logger = logging.getLogger(__name__)

_SPOT_COLUMNS = [c.key for c in inspect(SpotRow).column_attrs]


def _row_to_dict(spot: SpotRow) -> Dict[str, Any]:
    return {key: getattr(spot, key) for key in _SPOT_COLUMNS}


class SqlRowStore:
    """Table de spots + table de favoris, vues comme des lignes (dict)."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except IntegrityError as exc:
            db.rollback()
            raise RemoteStoreError(
                f"Contrainte violée ({operation})", details=str(exc.orig), code="integrity"
            ) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise RemoteStoreError(f"Erreur base distante ({operation})", details=str(exc)) from exc
        finally:
            db.close()

    # --- Spots ---

    def select_spots(self, viewer: Optional[User] = None) -> List[Dict[str, Any]]:
        """Tous les spots lisibles par `viewer`, du plus récent au plus ancien."""
        query = select(SpotRow).order_by(SpotRow.created_at.desc())
        if viewer is None:
            query = query.where(SpotRow.is_approved.is_(True))
        elif not viewer.is_admin:
            query = query.where(or_(SpotRow.is_approved.is_(True), SpotRow.user_id == viewer.id))

        with self._session("select spots") as db:
            rows = db.execute(query).scalars().all()
            return [_row_to_dict(r) for r in rows]

    def insert_spot(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Insère une ligne et retourne la ligne complète telle que stockée (id, is_approved…)."""
        with self._session("insert spot") as db:
            spot = SpotRow(**payload)
            db.add(spot)
            db.commit()
            db.refresh(spot)
            logger.info("Spot inséré : %s (%s)", spot.name, spot.id)
            return _row_to_dict(spot)

    def update_spot(self, spot_id: str, changes: Dict[str, Any]) -> None:
        with self._session("update spot") as db:
            result = db.execute(update(SpotRow).where(SpotRow.id == spot_id).values(**changes))
            if result.rowcount == 0:
                db.rollback()
                raise RemoteStoreError("Spot introuvable", details=f"id={spot_id}", code="not_found")
            db.commit()

    def delete_spot(self, spot_id: str) -> None:
        with self._session("delete spot") as db:
            result = db.execute(delete(SpotRow).where(SpotRow.id == spot_id))
            if result.rowcount == 0:
                db.rollback()
                raise RemoteStoreError("Spot introuvable", details=f"id={spot_id}", code="not_found")
            db.commit()

    # --- Favoris ---

    def list_favorite_ids(self, user_id: str) -> List[str]:
        with self._session("select favorites") as db:
            return list(
                db.execute(
                    select(Favorite.spot_id)
                    .where(Favorite.user_id == user_id)
                    .order_by(Favorite.created_at)
                ).scalars().all()
            )

    def insert_favorite(self, user_id: str, spot_id: str) -> None:
        with self._session("insert favorite") as db:
            db.add(Favorite(user_id=user_id, spot_id=spot_id))
            db.commit()

    def delete_favorite(self, user_id: str, spot_id: str) -> None:
        with self._session("delete favorite") as db:
            db.execute(
                delete(Favorite).where(Favorite.user_id == user_id, Favorite.spot_id == spot_id)
            )
            db.commit()

    def delete_favorites_for_spot(self, spot_id: str) -> int:
        """Supprime les favoris de tous les utilisateurs pointant vers un spot (avant suppression)."""
        with self._session("delete spot favorites") as db:
            result = db.execute(delete(Favorite).where(Favorite.spot_id == spot_id))
            db.commit()
            return result.rowcount
