"""Application settings.

Read once at startup from the environment (and a local .env file) and handed
to the store and the auth dependency through ``app.state.settings``.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_ADMIN_TOKEN = "dev-token"
DEFAULT_PRODUCTS_FILE = os.path.join("data", "products.json")

BACKEND_POSTGRES = "postgres"
BACKEND_FILE = "file"


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class Settings:
    admin_token: str = DEFAULT_ADMIN_TOKEN
    store_backend: str = BACKEND_FILE
    database_url: Optional[str] = None
    db_ssl: bool = False
    db_ssl_reject_unauthorized: bool = True
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    products_file: str = DEFAULT_PRODUCTS_FILE
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def _get_bool_env(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable '{key}' must be an integer, got '{value}'")


def _build_database_url() -> Optional[str]:
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url
    db_host = os.getenv("DB_HOST")
    if not db_host:
        return None
    db_user = os.getenv("DB_USER", "")
    db_password = os.getenv("DB_PASSWORD", "")
    db_port = os.getenv("DB_PORT", 5432)
    db_database = os.getenv("DB_DATABASE", "")
    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_database}"


def load_settings() -> Settings:
    """
    Build the settings from the environment.

    The admin token comes from ADMIN_TOKEN, then API_KEY, then the built-in
    development token. The store backend defaults to postgres when a database
    is configured and to the JSON file otherwise.

    Raises:
        ConfigurationError: If a value cannot be used.
    """
    load_dotenv()

    admin_token = os.getenv("ADMIN_TOKEN") or os.getenv("API_KEY") or DEFAULT_ADMIN_TOKEN
    database_url = _build_database_url()

    store_backend = (os.getenv("STORE_BACKEND") or "").strip().lower()
    if not store_backend:
        store_backend = BACKEND_POSTGRES if database_url else BACKEND_FILE
    if store_backend not in (BACKEND_POSTGRES, BACKEND_FILE):
        raise ConfigurationError(
            f"Unknown STORE_BACKEND '{store_backend}', expected '{BACKEND_POSTGRES}' or '{BACKEND_FILE}'"
        )
    if store_backend == BACKEND_POSTGRES and not database_url:
        raise ConfigurationError("STORE_BACKEND is 'postgres' but neither DATABASE_URL nor DB_HOST is set")

    cors_origins = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    return Settings(
        admin_token=admin_token,
        store_backend=store_backend,
        database_url=database_url,
        db_ssl=_get_bool_env("DB_SSL", False),
        db_ssl_reject_unauthorized=_get_bool_env("DB_SSL_REJECT_UNAUTHORIZED", True),
        db_pool_min_size=_get_int_env("DB_POOL_MIN_SIZE", 1),
        db_pool_max_size=_get_int_env("DB_POOL_MAX_SIZE", 10),
        products_file=os.getenv("PRODUCTS_FILE") or DEFAULT_PRODUCTS_FILE,
        cors_origins=cors_origins or ["*"],
        host=os.getenv("HOST", "0.0.0.0"),
        port=_get_int_env("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
