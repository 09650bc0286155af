# backend/shopledger/config.py
from __future__ import annotations
import os


def _database_url() -> str:
    url = os.environ.get(
        "DATABASE_URL",  # PostgreSQL in production
        "sqlite:///shopledger.sqlite3",  # default local location
    )
    # Hosted Postgres providers still hand out the legacy scheme
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = os.environ.get("SQLALCHEMY_ECHO", "false").lower() == "true"
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    PORT = int(os.environ.get("PORT", "5000"))
    SERVICE_NAME = os.environ.get("SERVICE_NAME", "family-shop-api")
    API_VERSION = "1.0.0"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Comma-separated list, "*" allows any origin
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
