# dao/user.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from configs import db
from db.models.client import Client
from db.models.supplier import Supplier
from db.models.user import User, UserRole
from utils.auth import Identity
from utils.errors import Conflict, NotFound, ValidationError
from utils.security import hash_password
from utils.validators import optional_str, require_email, require_str

logger = logging.getLogger(__name__)

MIN_PASSWORD = 6

_CLIENT_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "address": "address",
    "phone": "phone",
}
_SUPPLIER_FIELDS = {
    "companyName": "company_name",
    "contactName": "contact_name",
    "address": "address",
    "phone": "phone",
    "description": "description",
}


# ======== Users ========
def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> Optional[User]:
    return User.query.filter_by(username=username).first()


def get_user_by_email(email: str) -> Optional[User]:
    return User.query.filter_by(email=email).first()


def list_users(page: int = 1, limit: int = 50) -> List[User]:
    page = max(1, page)
    limit = max(1, limit)
    return (
        User.query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def update_user(user_id: int, **fields) -> Optional[User]:
    """Partial update of username/email. Role is fixed for the life of the account."""
    u = get_user(user_id)
    if not u:
        return None
    if "role" in fields:
        raise ValidationError("role cannot be changed")
    if fields.get("username") is not None:
        u.username = require_str(fields, "username", 3)
    if fields.get("email") is not None:
        u.email = require_email(fields)
    _commit_unique()
    return u


def change_password(user_id: int, new_password) -> User:
    if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD} characters")
    u = get_user(user_id)
    if not u:
        raise NotFound("User not found")
    u.password = hash_password(new_password)
    _commit()
    return u


def delete_user(user_id: int) -> bool:
    u = get_user(user_id)
    if not u:
        return False
    db.session.delete(u)
    _commit()
    logger.info("user %s deleted", user_id)
    return True


# ======== Registration ========
def _validate_account(data: dict) -> dict:
    account = {
        "username": require_str(data, "username", 3, "Username"),
        "email": require_email(data),
    }
    password = data.get("password")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD} characters")
    account["password"] = password
    return account


def _ensure_unique(username: str, email: str) -> None:
    if get_user_by_username(username):
        raise Conflict("Username already exists")
    if get_user_by_email(email):
        raise Conflict("Email already exists")


def register_client(data: dict) -> User:
    account = _validate_account(data)
    profile = Client(
        first_name=require_str(data, "firstName", 2, "First name"),
        last_name=require_str(data, "lastName", 2, "Last name"),
        address=optional_str(data, "address"),
        phone=optional_str(data, "phone"),
    )
    return _create_with_profile(account, UserRole.CLIENT, client=profile)


def register_supplier(data: dict) -> User:
    account = _validate_account(data)
    profile = Supplier(
        company_name=require_str(data, "companyName", 2, "Company name"),
        contact_name=require_str(data, "contactName", 2, "Contact name"),
        address=optional_str(data, "address"),
        phone=optional_str(data, "phone"),
        description=optional_str(data, "description"),
    )
    return _create_with_profile(account, UserRole.SUPPLIER, supplier=profile)


def create_admin(username: str, email: str, password: str) -> User:
    account = _validate_account(
        {"username": username, "email": email, "password": password}
    )
    return _create_with_profile(account, UserRole.ADMIN)


def _create_with_profile(account: dict, role: UserRole, **profile) -> User:
    _ensure_unique(account["username"], account["email"])
    user = User(
        username=account["username"],
        email=account["email"],
        password=hash_password(account["password"]),
        role=role,
        **profile,
    )
    # user + profile land in the same flush/commit
    db.session.add(user)
    _commit_unique()
    logger.info("registered %s user %s", role.value, user.id)
    return user


# ======== Profiles ========
def get_client(client_id: int) -> Optional[Client]:
    return db.session.get(Client, client_id)


def get_client_by_user_id(user_id: int) -> Optional[Client]:
    return Client.query.filter_by(user_id=user_id).first()


def get_supplier(supplier_id: int) -> Optional[Supplier]:
    return db.session.get(Supplier, supplier_id)


def get_supplier_by_user_id(user_id: int) -> Optional[Supplier]:
    return Supplier.query.filter_by(user_id=user_id).first()


def list_suppliers() -> List[Supplier]:
    return Supplier.query.order_by(Supplier.company_name.asc()).all()


def require_client(identity: Identity) -> Client:
    c = get_client_by_user_id(identity.user_id)
    if not c:
        raise NotFound("Client profile not found")
    return c


def require_supplier(identity: Identity) -> Supplier:
    s = get_supplier_by_user_id(identity.user_id)
    if not s:
        raise NotFound("Supplier profile not found")
    return s


def update_client(client_id: int, data: dict) -> Optional[Client]:
    c = get_client(client_id)
    if not c:
        return None
    _apply_profile(c, data, _CLIENT_FIELDS, required={"firstName", "lastName"})
    _commit()
    return c


def update_supplier(supplier_id: int, data: dict) -> Optional[Supplier]:
    s = get_supplier(supplier_id)
    if not s:
        return None
    _apply_profile(s, data, _SUPPLIER_FIELDS, required={"companyName", "contactName"})
    _commit()
    return s


def _apply_profile(obj, data: dict, fields: dict, required: set) -> None:
    for key, attr in fields.items():
        if key not in data:
            continue
        if key in required:
            setattr(obj, attr, require_str(data, key, 2))
        else:
            setattr(obj, attr, optional_str(data, key))


def _commit_unique():
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Username or email already exists")
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
