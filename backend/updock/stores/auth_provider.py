"""
Fournisseur d'authentification adossé à la table `profiles`.

Une seule session active à la fois (celle de l'appareil). Le jeton de session est
conservé dans le stockage local pour restaurer l'utilisateur au redémarrage.
Les abonnés à on_auth_state_change sont notifiés à chaque connexion / déconnexion.
"""

import hashlib
import hmac
import logging
import secrets
import threading
from typing import Callable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from updock.errors import AuthError
from updock.models.profile import Profile
from updock.schemas.auth import ADMIN_ROLE, USER_ROLE, AuthSession, SignUpRequest, User
from updock.stores.local_storage import LocalStorage

logger = logging.getLogger(__name__)

SESSION_KEY = "updock_session"
PBKDF2_ITERATIONS = 260_000

AuthListener = Callable[[str, Optional[User]], None]  # (événement, utilisateur)


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Format stocké : pbkdf2_sha256$<itérations>$<sel>$<hash hex>."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        _, iterations, salt, expected = stored.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if rounds < 1:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), rounds)
    return hmac.compare_digest(digest.hex().encode("ascii"), expected.encode("utf-8"))


def _to_user(profile: Profile) -> User:
    return User(
        id=profile.id,
        email=profile.email,
        first_name=profile.first_name,
        last_name=profile.last_name,
        username=profile.username,
        role=profile.role or USER_ROLE,
    )


class SqlAuthProvider:
    def __init__(
        self,
        session_factory: sessionmaker,
        local_storage: LocalStorage,
        admin_emails: Optional[List[str]] = None,
    ):
        self._session_factory = session_factory
        self._local_storage = local_storage
        self._admin_emails = {e.strip().lower() for e in (admin_emails or [])}
        self._lock = threading.Lock()
        self._current: Optional[AuthSession] = None
        self._listeners: List[AuthListener] = []

    def on_auth_state_change(self, listener: AuthListener) -> None:
        self._listeners.append(listener)

    def _notify(self, event: str, user: Optional[User]) -> None:
        for listener in self._listeners:
            try:
                listener(event, user)
            except Exception as exc:
                logger.error("Abonné auth en échec (%s) : %s", event, exc, exc_info=True)

    def _open_session(self, profile: Profile, db) -> AuthSession:
        token = secrets.token_urlsafe(32)
        profile.access_token = token
        db.commit()
        session = AuthSession(user=_to_user(profile), access_token=token)
        with self._lock:
            self._current = session
        self._local_storage.set_item(SESSION_KEY, token)
        return session

    def sign_up(self, data: SignUpRequest) -> AuthSession:
        """Crée le compte, attribue le rôle admin si l'email est dans la liste, puis connecte."""
        role = ADMIN_ROLE if data.email in self._admin_emails else USER_ROLE
        db = self._session_factory()
        try:
            profile = Profile(
                email=data.email,
                password_hash=hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                username=data.username,
                role=role,
            )
            db.add(profile)
            db.flush()
            session = self._open_session(profile, db)
        except IntegrityError as exc:
            db.rollback()
            raise AuthError("Un compte existe déjà avec cet email.") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise AuthError(f"Inscription impossible : {exc}") from exc
        finally:
            db.close()

        logger.info("Compte créé : %s (rôle %s)", data.email, role)
        self._notify("SIGNED_IN", session.user)
        return session

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        db = self._session_factory()
        try:
            profile = db.execute(
                select(Profile).where(func.lower(Profile.email) == email.strip().lower())
            ).scalar_one_or_none()
            if profile is None or not verify_password(password, profile.password_hash):
                raise AuthError("Email ou mot de passe incorrect.")
            session = self._open_session(profile, db)
        except SQLAlchemyError as exc:
            db.rollback()
            raise AuthError(f"Connexion impossible : {exc}") from exc
        finally:
            db.close()

        self._notify("SIGNED_IN", session.user)
        return session

    def sign_out(self) -> None:
        with self._lock:
            previous = self._current
            self._current = None
        self._local_storage.remove_item(SESSION_KEY)
        if previous is None:
            return

        db = self._session_factory()
        try:
            profile = db.get(Profile, previous.user.id)
            if profile is not None and profile.access_token == previous.access_token:
                profile.access_token = None
                db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Révocation du jeton impossible : %s", exc)
        finally:
            db.close()

        self._notify("SIGNED_OUT", None)

    def restore_session(self) -> Optional[User]:
        """Relit le jeton persisté au démarrage ; un jeton inconnu est oublié."""
        token = self._local_storage.get_item(SESSION_KEY)
        if not token:
            return None
        db = self._session_factory()
        try:
            profile = db.execute(select(Profile).where(Profile.access_token == token)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.warning("Restauration de session impossible (hors-ligne ?) : %s", exc)
            return None
        finally:
            db.close()

        if profile is None:
            self._local_storage.remove_item(SESSION_KEY)
            return None

        session = AuthSession(user=_to_user(profile), access_token=token)
        with self._lock:
            self._current = session
        self._notify("INITIAL_SESSION", session.user)
        return session.user

    def get_current_user(self) -> Optional[User]:
        with self._lock:
            return self._current.user if self._current else None
