"""Saved session discovery for the resume picker."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionEntry:
    """A saved session file and the label derived from its name."""

    path: str
    derived_name: str


def ensure_session_dir(directory: Path) -> Path:
    """Create the session directory (parents included) and return it."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning(
            "sessions.dir.create_failed",
            extra={
                "event": "sessions.dir.create_failed",
                "directory": str(directory),
                "error": str(exc),
            },
        )
    return directory


def list_sessions(
    directory: Path, extension: str = ".json", limit: int = 20
) -> list[SessionEntry]:
    """Return up to ``limit`` session files, newest first."""
    if not directory.is_dir():
        return []
    candidates: list[tuple[float, Path]] = []
    for path in directory.iterdir():
        if path.suffix != extension or not path.is_file():
            continue
        try:
            candidates.append((path.stat().st_mtime, path))
        except OSError:
            continue
    candidates.sort(key=lambda item: item[0], reverse=True)
    return [
        SessionEntry(path=str(path), derived_name=path.stem)
        for _, path in candidates[:limit]
    ]


def derive_session_model(label: str) -> str | None:
    """Return the model prefix of a session label (text before the first ``_``).

    Model names that contain an underscore resolve to their first fragment.
    """
    model = label.split("_", 1)[0]
    return model or None
