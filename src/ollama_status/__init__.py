"""Top-level package for ollama-status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import OllamaStatusApp
    from .cache import ServerState, StatusCache, StatusSnapshot
    from .config import ResolvedConfig, load_config, resolve_config
    from .exceptions import ConfigValidationError, LaunchError, OllamaStatusError
    from .extract import ModelInfo, extract_catalog, extract_running_names
    from .plugin import OllamaStatusPlugin
    from .poller import Poller

__all__ = [
    "ConfigValidationError",
    "LaunchError",
    "ModelInfo",
    "OllamaStatusApp",
    "OllamaStatusError",
    "OllamaStatusPlugin",
    "Poller",
    "ResolvedConfig",
    "ServerState",
    "StatusCache",
    "StatusSnapshot",
    "extract_catalog",
    "extract_running_names",
    "load_config",
    "resolve_config",
]

_LAZY_EXPORTS: dict[str, str] = {
    "ConfigValidationError": ".exceptions",
    "LaunchError": ".exceptions",
    "OllamaStatusError": ".exceptions",
    "ModelInfo": ".extract",
    "extract_catalog": ".extract",
    "extract_running_names": ".extract",
    "ServerState": ".cache",
    "StatusCache": ".cache",
    "StatusSnapshot": ".cache",
    "ResolvedConfig": ".config",
    "load_config": ".config",
    "resolve_config": ".config",
    "OllamaStatusPlugin": ".plugin",
    "Poller": ".poller",
    "OllamaStatusApp": ".app",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols so the Textual UI loads only when it is used."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
