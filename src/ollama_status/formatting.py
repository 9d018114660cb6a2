"""Turn cached status into colored text segments for the status bar."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, NamedTuple

from .cache import ServerState

if TYPE_CHECKING:
    from .config import Palette

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_GIB = 1024 * 1024 * 1024
_MIB = 1024 * 1024


class Segment(NamedTuple):
    """A run of literal text drawn in one foreground color."""

    color: str
    text: str


def display_model_name(model: str) -> str:
    """Strip the tag suffix (``llama3.2:latest`` -> ``llama3.2``)."""
    head = model.split(":", 1)[0]
    return head or model


def format_status(
    state: ServerState,
    loaded_model: str | None,
    palette: Palette,
    icon: str,
) -> list[Segment]:
    """Map server state and loaded model to the status bar segments."""
    segments = [Segment(palette.model, f"{icon} ")]
    if state == ServerState.RUNNING:
        segments.append(Segment(palette.running, "● "))
        if loaded_model:
            segments.append(Segment(palette.model, display_model_name(loaded_model)))
        else:
            segments.append(Segment(palette.separator, "idle"))
    elif state == ServerState.LOADING:
        segments.append(Segment(palette.loading, "◐ loading"))
    else:
        segments.append(Segment(palette.stopped, "○ off"))
    return segments


def format_datetime(now: datetime) -> str:
    """Return a compact 12-hour stamp such as ``Fri 2:30p``."""
    hour = now.hour % 12
    if hour == 0:
        hour = 12
    meridiem = "a" if now.hour < 12 else "p"
    return f"{_WEEKDAYS[now.weekday()]} {hour}:{now.minute:02d}{meridiem}"


def datetime_segments(palette: Palette, now: datetime | None = None) -> list[Segment]:
    """Trailing separator and date/time block."""
    stamp = format_datetime(now or datetime.now())
    return [
        Segment(palette.separator, "  │  "),
        Segment(palette.datetime, f"{stamp}  "),
    ]


def format_size(size_bytes: int) -> str:
    if not size_bytes:
        return ""
    gigabytes = size_bytes / _GIB
    if gigabytes >= 1:
        return f"{gigabytes:.1f}GB"
    return f"{size_bytes / _MIB:.0f}MB"
