# Configuration module for environment setup
# This module is imported by: main.py (create_app)
# Dependencies: python-dotenv
# Purpose: Centralized configuration management for the forum backend

import os  # For accessing environment variables from system
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv  # For loading .env files into environment


def _as_bool(value: str) -> bool:
    return (value or "").strip().lower() in ("true", "1", "yes")


def _as_list(value: str) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime settings. Session lifetime and hashing cost are not configurable."""
    database_url: str = "sqlite:///./forum.db"
    db_timeout_seconds: float = 5.0
    sql_echo: bool = False
    cookie_secure: bool = False
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"]
    )
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Load environment variables from .env file and build the Settings object
    Called by: main.py (create_app) when no explicit settings are given
    Returns: Settings populated from the environment, defaults otherwise
    Raises: ValueError if DB_TIMEOUT_SECONDS is not a number
    """
    load_dotenv()  # Load variables from .env file into environment (creates os.environ entries)
    defaults = Settings()
    return Settings(
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        db_timeout_seconds=float(os.getenv("DB_TIMEOUT_SECONDS", defaults.db_timeout_seconds)),
        sql_echo=_as_bool(os.getenv("SQL_ECHO", "false")),
        cookie_secure=_as_bool(os.getenv("COOKIE_SECURE", "false")),
        cors_origins=_as_list(os.getenv("CORS_ORIGINS", ",".join(defaults.cors_origins))),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )
