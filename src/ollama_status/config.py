"""Configuration loading, validation, and resolution for the status integration."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
import logging
import os
from pathlib import Path
import re
from typing import Any
from urllib.parse import urlparse

from platformdirs import user_config_path
from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import ConfigValidationError

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

APP_NAME = "ollama-status"
CONFIG_DIR = user_config_path(APP_NAME)
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_HOST = "http://127.0.0.1:11434"
DEFAULT_EXECUTABLE = "ollama"
KNOWN_EXECUTABLE_PATHS = (
    "/opt/homebrew/bin/ollama",
    "/usr/local/bin/ollama",
    "/usr/bin/ollama",
)
MODEL_ENV_VAR = "OLLAMA_MODEL"

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _require_string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Expected a string value.")
    return value.strip()


class OllamaConfig(BaseModel):
    """Daemon endpoint, executable, and cache lifetimes."""

    # A hostname such as localhost may resolve to ::1, where the daemon
    # does not listen by default.
    host: str = DEFAULT_HOST
    executable_path: str = ""
    catalog_ttl_seconds: int = Field(default=30, ge=0, le=86_400)
    status_debounce_seconds: int = Field(default=15, ge=1, le=3600)
    default_model: str = ""

    @field_validator("host", mode="before")
    @classmethod
    def _validate_host(cls, value: Any) -> str:
        normalized = _require_string(value).rstrip("/")
        if not normalized:
            raise ValueError("host must not be empty.")
        return normalized

    @field_validator("executable_path", "default_model", mode="before")
    @classmethod
    def _normalize_optional_string(cls, value: Any) -> str:
        if value is None:
            return ""
        return _require_string(value)


class FeaturesConfig(BaseModel):
    """Feature flags."""

    show_status: bool = True
    save_sessions: bool = False


class SessionsConfig(BaseModel):
    """Saved session discovery."""

    directory: str = "~/.ollama/sessions"
    extension: str = ".json"
    limit: int = Field(default=20, ge=1, le=1000)

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, value: Any) -> str:
        normalized = _require_string(value)
        if not normalized:
            raise ValueError("Session directory must not be empty.")
        return normalized

    @field_validator("extension", mode="before")
    @classmethod
    def _normalize_extension(cls, value: Any) -> str:
        normalized = _require_string(value)
        if not normalized:
            raise ValueError("Session extension must not be empty.")
        if not normalized.startswith("."):
            normalized = f".{normalized}"
        return normalized


class KeysConfig(BaseModel):
    """LEADER key bindings; ``false`` or an empty string disables one."""

    select_model: str = "i"
    quick_chat: str = "o"
    resume_session: str = "O"

    @field_validator("*", mode="before")
    @classmethod
    def _validate_key(cls, value: Any) -> str:
        if value is None or value is False:
            return ""
        if not isinstance(value, str):
            raise ValueError("Key binding must be a string or false.")
        return value.strip()


class ColorsConfig(BaseModel):
    """Status bar palette (Tokyo Night defaults)."""

    running: str = "#9ece6a"
    stopped: str = "#f7768e"
    model: str = "#7aa2f7"
    loading: str = "#e0af68"
    separator: str = "#565f89"
    datetime: str = "#565f89"

    @field_validator("*", mode="before")
    @classmethod
    def _validate_hex_color(cls, value: Any) -> str:
        normalized = _require_string(value)
        if not HEX_COLOR_PATTERN.match(normalized):
            raise ValueError("Color must use #RGB or #RRGGBB format.")
        return normalized


class UIConfig(BaseModel):
    """Host application presentation and dispatch settings."""

    icon: str = "🦙"
    update_interval_ms: int = Field(default=2000, ge=100, le=600_000)
    leader: str = "ctrl+a"
    tab_command: list[str] = Field(default_factory=list)

    @field_validator("icon", "leader", mode="before")
    @classmethod
    def _validate_non_empty_string(cls, value: Any) -> str:
        normalized = _require_string(value)
        if not normalized:
            raise ValueError("String value must not be empty.")
        return normalized

    @field_validator("tab_command", mode="before")
    @classmethod
    def _validate_tab_command(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("tab_command must be a list of arguments.")
        arguments: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError("tab_command entries must be strings.")
            if item.strip():
                arguments.append(item.strip())
        return arguments


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/ollama-status/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        normalized = _require_string(value)
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    ollama: OllamaConfig = OllamaConfig()
    features: FeaturesConfig = FeaturesConfig()
    sessions: SessionsConfig = SessionsConfig()
    keys: KeysConfig = KeysConfig()
    colors: ColorsConfig = ColorsConfig()
    ui: UIConfig = UIConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="after")
    def _validate_host_url(self) -> Config:
        parsed = urlparse(self.ollama.host)
        if parsed.scheme.lower() not in {"http", "https"}:
            raise ValueError("ollama.host must use http or https scheme.")
        if not (parsed.hostname or "").strip():
            raise ValueError("ollama.host must include a hostname.")
        return self


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


@dataclass(frozen=True)
class Palette:
    """Named colors for the six status bar roles."""

    running: str
    stopped: str
    model: str
    loading: str
    separator: str
    datetime: str


@dataclass(frozen=True)
class KeyBindings:
    """Keys for the three LEADER actions; empty means disabled."""

    select_model: str
    quick_chat: str
    resume_session: str


@dataclass(frozen=True)
class ResolvedConfig:
    """Immutable configuration snapshot shared by every component."""

    host: str
    executable_path: str
    catalog_ttl: int
    status_debounce: int
    default_model: str | None
    show_status: bool
    save_sessions: bool
    sessions_dir: Path
    session_extension: str
    session_limit: int
    keys: KeyBindings
    palette: Palette
    icon: str
    update_interval_ms: int
    leader: str
    tab_command: tuple[str, ...]


def detect_executable_path(candidates: tuple[str, ...] = KNOWN_EXECUTABLE_PATHS) -> str:
    """Return the first installed ollama binary, else rely on PATH lookup."""
    for candidate in candidates:
        if os.path.isfile(candidate):
            return candidate
    return DEFAULT_EXECUTABLE


def resolve_config(config: dict[str, dict[str, Any]] | None = None) -> ResolvedConfig:
    """Build the immutable snapshot from a validated config mapping."""
    data = config if config is not None else DEFAULT_CONFIG
    ollama = data["ollama"]
    features = data["features"]
    sessions = data["sessions"]
    ui = data["ui"]
    return ResolvedConfig(
        host=ollama["host"],
        executable_path=ollama["executable_path"] or detect_executable_path(),
        catalog_ttl=int(ollama["catalog_ttl_seconds"]),
        status_debounce=int(ollama["status_debounce_seconds"]),
        default_model=ollama["default_model"] or None,
        show_status=bool(features["show_status"]),
        save_sessions=bool(features["save_sessions"]),
        sessions_dir=Path(sessions["directory"]).expanduser(),
        session_extension=sessions["extension"],
        session_limit=int(sessions["limit"]),
        keys=KeyBindings(**data["keys"]),
        palette=Palette(**data["colors"]),
        icon=ui["icon"],
        update_interval_ms=int(ui["update_interval_ms"]),
        leader=ui["leader"],
        tab_command=tuple(ui["tab_command"]),
    )


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Ensure that the config directory exists and return its path."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        return Config.model_validate(raw).model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return deepcopy(DEFAULT_CONFIG)
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    Nested tables merge per key, so a file that only sets ``colors.running``
    keeps every other color default.
    """
    target_path = config_path or CONFIG_PATH

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    return _validate_config(_deep_merge(DEFAULT_CONFIG, raw_data))
