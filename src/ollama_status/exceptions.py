"""Domain exception hierarchy for the Ollama status integration."""

from __future__ import annotations


class OllamaStatusError(RuntimeError):
    """Base class for all domain-level integration errors."""


class ConfigValidationError(OllamaStatusError):
    """Raised when configuration cannot be validated safely."""


class LaunchError(OllamaStatusError):
    """Raised when an interactive model session cannot be spawned."""
