# configs.py
import os
import sqlite3

from dotenv import load_dotenv
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

load_dotenv()

db = SQLAlchemy()
login = LoginManager()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///materiaux.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "168"))
    SESSION_TOKEN_COOKIE = os.getenv("SESSION_COOKIE_NAME", "materiaux_session")
    AUTO_CREATE_TABLES = _env_bool("AUTO_CREATE_TABLES", True)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # sqlite ignores ON DELETE rules unless asked
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
