# backend/denimtrack/config.py
from __future__ import annotations
import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# Pick up a local .env the same way the deployment scripts do
load_dotenv()


def _database_url() -> str:
    """
    Resolve the store URL.

    DATABASE_URL wins. Otherwise, when DB_DATABASE is set, the discrete
    DB_* variables are assembled into a PostgreSQL URL. Falls back to a
    local SQLite file for development.
    """
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    database = os.environ.get("DB_DATABASE")
    if database:
        return URL.create(
            "postgresql+psycopg2",
            username=os.environ.get("DB_USER"),
            password=os.environ.get("DB_PASSWORD"),
            host=os.environ.get("DB_HOST", "localhost"),
            port=int(os.environ.get("DB_PORT", "5432")),
            database=database,
        ).render_as_string(hide_password=False)

    return "sqlite:///denimtrack.sqlite3"


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me-before-deploying")

    # Token signing secret; falls back to SECRET_KEY
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    TOKEN_TTL_SECONDS = int(os.environ.get("TOKEN_TTL_SECONDS", "3600"))

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    BACKEND_PORT = int(os.environ.get("BACKEND_PORT", "5001"))

    # "*" allows any origin
    CORS_ALLOWED_ORIGINS = _split_origins(os.environ.get("CORS_ALLOWED_ORIGINS", "*"))

    # Dashboard figure with no inventory accounting behind it yet
    AWAITING_GATE_PASS_PLACEHOLDER = int(os.environ.get("AWAITING_GATE_PASS_PLACEHOLDER", "50"))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET = "test-signing-secret-with-enough-length-for-hs256"
    BCRYPT_ROUNDS = 4
