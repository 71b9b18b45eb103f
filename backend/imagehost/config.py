"""Image host configuration.

Settings come from an optional YAML file plus a handful of environment
variables, and are frozen once loaded:

  * imagehost.settings.yaml  — non-secret configuration (optional)
  * IMAGE_HOST_PASSWORD      — the shared secret
  * IMAGE_HOST_PORT / IMAGE_HOST_DIR / IMAGE_HOST_LOG_LEVEL — overrides

The resulting ``AppConfig`` is passed to ``create_app``; nothing reads
configuration from module globals.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("imagehost.settings.yaml")

DEFAULT_PASSWORD = "changeme"

ENV_SETTINGS  = "IMAGE_HOST_SETTINGS"
ENV_PASSWORD  = "IMAGE_HOST_PASSWORD"
ENV_PORT      = "IMAGE_HOST_PORT"
ENV_DIR       = "IMAGE_HOST_DIR"
ENV_LOG_LEVEL = "IMAGE_HOST_LOG_LEVEL"

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

# RFC 6265 cookie-octet; the password is sent verbatim as the cookie value
_COOKIE_VALUE = re.compile(r"[\x21\x23-\x2B\x2D-\x3A\x3C-\x5B\x5D-\x7E]+")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ServerSettings(_Frozen):
    host: str = "0.0.0.0"
    port: int = Field(default=6654, ge=1, le=65535)


class StorageSettings(_Frozen):
    image_dir:        str = "images"
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, gt=0)


class AuthSettings(_Frozen):
    """Single shared password; doubles as the session cookie value."""
    password:       str = DEFAULT_PASSWORD
    cookie_max_age: int = Field(default=86400, gt=0)

    @field_validator("password")
    @classmethod
    def _cookie_safe(cls, value: str) -> str:
        if not value:
            raise ValueError("password must not be empty")
        if not _COOKIE_VALUE.fullmatch(value):
            raise ValueError(
                "password may only contain printable ASCII without spaces, "
                "double quotes, commas, semicolons or backslashes"
            )
        return value


class LoggingSettings(_Frozen):
    level: str = "info"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return level


class AppConfig(_Frozen):
    server:  ServerSettings  = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    auth:    AuthSettings    = Field(default_factory=AuthSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def image_root(self) -> Path:
        return Path(self.storage.image_dir)

    @property
    def uses_default_password(self) -> bool:
        return self.auth.password == DEFAULT_PASSWORD


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: Dict[str, Any], environ: Mapping[str, str]) -> None:
    """Merge IMAGE_HOST_* variables into the raw settings dict in place."""
    overrides = (
        (ENV_PASSWORD,  "auth",    "password"),
        (ENV_PORT,      "server",  "port"),
        (ENV_DIR,       "storage", "image_dir"),
        (ENV_LOG_LEVEL, "logging", "level"),
    )
    for env_name, section, key in overrides:
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        data.setdefault(section, {})
        data[section][key] = value
        if env_name != ENV_PASSWORD:
            logger.debug("Override %s.%s from %s", section, key, env_name)


def _resolve_image_dir(data: Dict[str, Any], base_dir: Path) -> None:
    storage = data.setdefault("storage", {})
    image_dir = Path(str(storage.get("image_dir", StorageSettings().image_dir)))
    if not image_dir.is_absolute():
        image_dir = base_dir / image_dir
    storage["image_dir"] = str(image_dir.resolve())


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load settings file + environment into a frozen *AppConfig*.

    Args:
        settings_path: Explicit YAML file. Falls back to ``$IMAGE_HOST_SETTINGS``
            and then ``imagehost.settings.yaml`` in the working directory.
        environ: Environment mapping (defaults to ``os.environ``).

    Raises:
        pydantic.ValidationError: If a setting has an invalid value.
    """
    env = os.environ if environ is None else environ

    if settings_path is None and env.get(ENV_SETTINGS):
        settings_path = Path(env[ENV_SETTINGS])

    if settings_path is not None:
        path = Path(settings_path)
        data = _load_yaml(path)
        base_dir = path.resolve().parent if path.exists() else Path.cwd()
    else:
        data = _load_yaml(SETTINGS_FILE) if SETTINGS_FILE.exists() else {}
        base_dir = Path.cwd()

    # Copy nested sections so overrides never mutate the parsed YAML tree;
    # an empty section ("storage:") parses as None
    data = {
        k: dict(v or {}) if v is None or isinstance(v, dict) else v
        for k, v in data.items()
    }

    _apply_env_overrides(data, env)
    _resolve_image_dir(data, base_dir)

    config = AppConfig(**data)
    logger.info(
        "Settings loaded (server=%s:%s, image_dir=%s)",
        config.server.host,
        config.server.port,
        config.storage.image_dir,
    )
    return config
