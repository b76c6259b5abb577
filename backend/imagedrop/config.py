"""Imagedrop application configuration.

Settings come from an optional YAML file (imagedrop.settings.yaml) and are
then overridden by environment variables:

  * API_KEY       — shared secret for upload auth
  * API_HOSTNAME  — base URL embedded in returned file URLs
  * PORT          — listen port
  * UPLOAD_DIR    — storage directory
  * LOG_LEVEL     — root logger level

The resulting AppConfig is built once at startup and handed to create_app();
nothing else in the package reads the environment.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("imagedrop.settings.yaml")

MAX_FILE_SIZE_BYTES = 20 * 1024 * 1024


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host:         str  = "0.0.0.0"
    port:         int  = 3000
    log_level:    str  = "info"
    cors_enabled: bool = True


class StorageSettings(BaseModel):
    """Where uploads live and how long they are kept."""
    upload_dir:          str       = "./uploads"
    sentinel_name:       str       = ".keep"
    retention_seconds:   float     = 5 * 60
    max_file_size_bytes: int       = MAX_FILE_SIZE_BYTES
    allowed_mime_types:  List[str] = Field(
        default_factory=lambda: ["image/png", "image/jpeg", "image/gif"]
    )


class AuthSettings(BaseModel):
    api_key: str = "your-api-key"


class AppConfig(BaseModel):
    server:          ServerSettings  = Field(default_factory=ServerSettings)
    storage:         StorageSettings = Field(default_factory=StorageSettings)
    auth:            AuthSettings    = Field(default_factory=AuthSettings)
    public_hostname: str             = "http://localhost:3000"

    @field_validator("public_hostname")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: Dict[str, Any], environ: Mapping[str, str]) -> None:
    """Fold recognised environment variables into the raw settings dict."""
    if environ.get("API_KEY"):
        data.setdefault("auth", {})["api_key"] = environ["API_KEY"]
    if environ.get("API_HOSTNAME"):
        data["public_hostname"] = environ["API_HOSTNAME"]
    if environ.get("PORT"):
        data.setdefault("server", {})["port"] = environ["PORT"]
    if environ.get("LOG_LEVEL"):
        data.setdefault("server", {})["log_level"] = environ["LOG_LEVEL"]
    if environ.get("UPLOAD_DIR"):
        data.setdefault("storage", {})["upload_dir"] = environ["UPLOAD_DIR"]


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load the YAML settings file, apply env overrides and validate.

    A relative ``storage.upload_dir`` given in the YAML file is resolved
    against the directory holding that file. One given through UPLOAD_DIR is
    left relative to the working directory.
    """
    path = Path(settings_path) if settings_path else SETTINGS_FILE
    env = os.environ if environ is None else environ

    data = _load_yaml(path)
    storage = data.get("storage") or {}
    upload_dir = storage.get("upload_dir")
    if upload_dir and not Path(upload_dir).is_absolute():
        storage["upload_dir"] = str(path.parent / upload_dir)
        data["storage"] = storage

    _apply_env_overrides(data, env)

    config = AppConfig(**data)
    logger.info(
        "Settings loaded (port=%s, upload_dir=%s, hostname=%s, cors=%s)",
        config.server.port,
        config.storage.upload_dir,
        config.public_hostname,
        config.server.cors_enabled,
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
