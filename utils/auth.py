# utils/auth.py
from dataclasses import dataclass
from typing import Optional

from flask import current_app, request
from flask_login import current_user

from db.models.user import UserRole
from utils.errors import Forbidden, Unauthorized


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


# scope -> roles allowed in it; admin is a superset of every scope
_SCOPE_ROLES = {
    UserRole.CLIENT: frozenset({UserRole.CLIENT, UserRole.ADMIN}),
    UserRole.SUPPLIER: frozenset({UserRole.SUPPLIER, UserRole.ADMIN}),
    UserRole.ADMIN: frozenset({UserRole.ADMIN}),
}


def authorize(identity: Optional[Identity], *scopes: UserRole) -> Identity:
    """Check the role class of ``identity`` against ``scopes``.

    Row ownership is not checked here; the dao layer does that per operation.
    """
    if identity is None:
        raise Unauthorized()
    for scope in scopes:
        if identity.role in _SCOPE_ROLES[scope]:
            return identity
    raise Forbidden()


def token_from_request(req=None) -> Optional[str]:
    req = req or request
    header = req.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return req.cookies.get(current_app.config["SESSION_TOKEN_COOKIE"]) or None


def current_identity() -> Optional[Identity]:
    if not current_user.is_authenticated:
        return None
    return Identity(user_id=current_user.id, role=current_user.role)


def scope_guard(blueprint, scope: UserRole):
    """Gate every route of ``blueprint`` behind ``scope``."""

    @blueprint.before_request
    def _check_scope():
        authorize(current_identity(), scope)

    return blueprint
