"""Narrow extraction of model data from Ollama response bodies.

Bodies returned by ``/api/tags`` and ``/api/ps`` are treated as opaque text
shaped like JSON. Only the ``name``, ``size`` and ``parameter_size`` fields are
pulled out, using patterns anchored at each model's literal name. Truncated
reads, HTML error pages and empty bodies degrade to partial or empty results.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

_NAME_RE = re.compile(r'"name"\s*:\s*"([^"]+)"')


@dataclass(frozen=True)
class ModelInfo:
    """One entry from the model catalog."""

    name: str
    size_bytes: int = 0
    parameter_size: str = ""


def _unique_names(body: str | None) -> list[str]:
    if not body:
        return []
    names: list[str] = []
    seen: set[str] = set()
    for match in _NAME_RE.finditer(body):
        name = match.group(1)
        if name not in seen:
            seen.add(name)
            names.append(name)
    return names


def _field_after_name(body: str, name: str, field_pattern: str) -> str | None:
    # The anchor is the model name as literal text; the nearest following
    # field wins even if it belongs to the next object.
    pattern = r'"name"\s*:\s*"' + re.escape(name) + r'".*?' + field_pattern
    match = re.search(pattern, body, re.DOTALL)
    if match is None:
        return None
    return match.group(1)


def extract_catalog(body: str | None) -> list[ModelInfo]:
    """Return one ModelInfo per distinct model name, in first-seen order."""
    if not body:
        return []
    models: list[ModelInfo] = []
    for name in _unique_names(body):
        size = _field_after_name(body, name, r'"size"\s*:\s*(\d+)')
        params = _field_after_name(body, name, r'"parameter_size"\s*:\s*"([^"]+)"')
        models.append(
            ModelInfo(
                name=name,
                size_bytes=int(size) if size else 0,
                parameter_size=params or "",
            )
        )
    return models


def extract_running_names(body: str | None) -> list[str]:
    """Return distinct running model names, first-seen order preserved."""
    return _unique_names(body)
