# db/models/user.py
import enum
from configs import db
from flask_login import UserMixin
from utils.dates import utcnow, iso


class UserRole(enum.Enum):
    ADMIN = "admin"
    CLIENT = "client"
    SUPPLIER = "supplier"


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    # scrypt record "hex(key).hex(salt)", never serialized
    password = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    role = db.Column(
        db.Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    client = db.relationship(
        "Client",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    supplier = db.relationship(
        "Supplier",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sessions = db.relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        return self.role in roles

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "createdAt": iso(self.created_at),
        }

    def __repr__(self):
        return f"User({self.username!r}, {self.role.value})"
