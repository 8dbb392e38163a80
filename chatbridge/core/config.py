"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Secrets (the OpenWebUI API key, database password) are never committed;
they come from the environment or a local .env file.
"""
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        port: HTTP port for the API server
        cors_origins: Origins allowed by the CORS middleware
        database_url: SQLAlchemy connection string for the users database
        openwebui_base_url: Base URL of the OpenWebUI instance
        openwebui_api_key: Bearer token for OpenWebUI (None if unset)
        openwebui_model: Model identifier sent with chat requests
        openwebui_collection_id: Default knowledge collection (None if unset)
        openwebui_timeout_seconds: Timeout for chat completion requests
        log_dir: Directory for log files; console-only logging if unset
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    port: int
    cors_origins: List[str]

    # Database settings
    database_url: str

    # OpenWebUI settings
    openwebui_base_url: str
    openwebui_api_key: Optional[str]
    openwebui_model: str
    openwebui_collection_id: Optional[str]
    openwebui_timeout_seconds: float

    log_dir: Optional[str] = None

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _get_optional_env(key: str) -> Optional[str]:
    """Get an environment variable, treating blank values as unset."""
    value = os.environ.get(key, "").strip()
    return value or None


def _build_database_url() -> str:
    """
    Resolve the database URL.

    Priority:
    1. DATABASE_URL
    2. Local components (DB_HOST, DB_USER, ...)
    """
    database_url = os.environ.get("DATABASE_URL")

    if not database_url:
        host = _get_env("DB_HOST", "localhost")
        port = _get_env("DB_PORT", "3306")
        user = _get_env("DB_USER", "root")
        password = _get_env("DB_PASSWORD", "")
        name = _get_env("DB_NAME", "app_db")
        database_url = f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}"

    # SQLAlchemy needs an explicit driver for MySQL
    if database_url.startswith("mysql://"):
        database_url = database_url.replace("mysql://", "mysql+pymysql://", 1)

    # pymysql rejects the ssl-mode query parameter some hosted URLs carry
    if "ssl-mode=" in database_url:
        database_url = re.sub(r"[?&]ssl-mode=[^&]+", "", database_url)
        if "?" not in database_url and "&" in database_url:
            database_url = database_url.replace("&", "?", 1)

    return database_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once; call get_settings.cache_clear() to reload
    (used by tests that change the environment).

    Returns:
        Settings instance with all configuration values
    """
    origins = _get_env("CORS_ORIGINS", "http://localhost:8080")

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "chatbridge"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        port=int(_get_env("PORT", "8080")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],

        # Database
        database_url=_build_database_url(),

        # OpenWebUI
        openwebui_base_url=_get_env("OPENWEBUI_BASE_URL", "http://localhost:3000").rstrip("/"),
        openwebui_api_key=_get_optional_env("OPENWEBUI_API_KEY"),
        openwebui_model=_get_env("OPENWEBUI_MODEL", "llama3.1:latest"),
        openwebui_collection_id=_get_optional_env("OPENWEBUI_COLLECTION_ID"),
        openwebui_timeout_seconds=float(_get_env("OPENWEBUI_TIMEOUT_SECONDS", "60")),

        log_dir=_get_optional_env("LOG_DIR"),
    )
