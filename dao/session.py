# dao/session.py
import logging
import secrets
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.session import UserSession
from db.models.user import User
from utils.auth import Identity
from utils.dates import utcnow
from utils.errors import InvalidCredentials
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_record() -> str:
    return hash_password(secrets.token_hex(16))


def authenticate(email: str, password: str) -> Identity:
    """Resolve credentials to an identity; one error for unknown email and bad password.

    An unknown email still pays for one scrypt run so timing does not tell them apart.
    """
    user = User.query.filter_by(email=email).first() if email else None
    record = user.password if user else _dummy_record()
    if not verify_password(password or "", record) or not user:
        raise InvalidCredentials()
    return Identity(user_id=user.id, role=user.role)


def _ttl() -> timedelta:
    return timedelta(hours=current_app.config.get("SESSION_TTL_HOURS", 168))


def create_session(identity: Identity) -> str:
    now = utcnow()
    token = secrets.token_urlsafe(32)
    db.session.add(
        UserSession(
            token=token,
            user_id=identity.user_id,
            created_at=now,
            expires_at=now + _ttl(),
        )
    )
    _commit()
    logger.info("session opened for user %s", identity.user_id)
    return token


def get_session(token: str | None) -> Optional[UserSession]:
    if not token:
        return None
    return db.session.get(UserSession, token)


def resolve_session(token: str | None) -> Optional[Identity]:
    s = get_session(token)
    if not s or s.is_expired():
        return None
    user = db.session.get(User, s.user_id)
    if not user:
        return None
    return Identity(user_id=user.id, role=user.role)


def destroy_session(token: str | None) -> None:
    """Invalidate ``token``; unknown or already destroyed tokens are fine."""
    s = get_session(token)
    if not s:
        return
    db.session.delete(s)
    _commit()


def destroy_user_sessions(user_id: int) -> int:
    n = UserSession.query.filter_by(user_id=user_id).delete()
    _commit()
    return n


def purge_expired_sessions() -> int:
    n = UserSession.query.filter(UserSession.expires_at <= utcnow()).delete()
    _commit()
    if n:
        logger.info("purged %d expired sessions", n)
    return n


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
