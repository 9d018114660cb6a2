"""Custom widgets for the status host application."""

from .status_bar import StatusBar

__all__ = ["StatusBar"]
