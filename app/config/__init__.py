"""Configuration utilities for the Shiptivity lane API.

This module loads application configuration with the following rules:
- Primary source: `shiptivity_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("shiptivity_config.json")
DEFAULT_DATABASE_URL = "sqlite+pysqlite:///./clients.db"
logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class MigrationsConfig(BaseModel):
    auto_apply: bool = Field(default=True)


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3001, gt=0, lt=65536)
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    database: DatabaseConfig
    migrations: MigrationsConfig
    server: ServerConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def database_url() -> str:
    """Resolve the store URL without loading the full config.

    TEST_DATABASE_URL wins so test runs never touch the development database.
    """
    return (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _read_json_file(ROOT_CONFIG).get("database", {}).get("dsn")
        or DEFAULT_DATABASE_URL
    )


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) shiptivity_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(item) for item in cur)
        return str(cur) if cur is not None else default

    dsn = database_url()

    auto_apply_text = (
        _env("AUTO_APPLY_MIGRATIONS")
        or _read_config_file("migrations.auto_apply")
        or _base("migrations.auto_apply", "true")
    )

    host = _env("API_HOST") or _read_config_file("server.host") or _base("server.host", "127.0.0.1")
    port_text = _env("API_PORT") or _read_config_file("server.port") or _base("server.port", "3001")
    origins_text = (
        _env("CORS_ALLOW_ORIGINS")
        or _read_config_file("server.cors_allow_origins")
        or _base("server.cors_allow_origins", "*")
    )
    origins = [o.strip() for o in str(origins_text).split(",") if o.strip()]

    try:
        cfg = AppConfig(
            database=DatabaseConfig(dsn=dsn),
            migrations=MigrationsConfig(auto_apply=str(auto_apply_text).strip().lower() in _TRUTHY),
            server=ServerConfig(host=str(host).strip(), port=int(str(port_text).strip()), cors_allow_origins=origins),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "MigrationsConfig",
    "ServerConfig",
    "database_url",
    "load_config",
]
