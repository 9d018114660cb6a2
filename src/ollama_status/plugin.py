"""Wiring of config, poller, cache, and actions into one explicit context."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

from .actions import (
    Action,
    KeyBinding,
    build_keybindings,
    create_model_selector_action,
    create_quick_chat_action,
    create_session_picker_action,
)
from .cache import ServerState, StatusCache
from .config import ResolvedConfig, resolve_config
from .extract import ModelInfo
from .formatting import Segment, datetime_segments, format_datetime, format_status
from .poller import Poller
from .sessions import ensure_session_dir

LOGGER = logging.getLogger(__name__)


class OllamaStatusPlugin:
    """Own the status cache for one configuration and expose its views."""

    def __init__(
        self,
        config: ResolvedConfig,
        cache: StatusCache | None = None,
    ) -> None:
        self.config = config
        self.cache = cache or StatusCache(
            Poller(config.host),
            catalog_ttl=config.catalog_ttl,
            status_debounce=config.status_debounce,
        )
        if config.save_sessions:
            ensure_session_dir(config.sessions_dir)
        LOGGER.info(
            "plugin.configured",
            extra={
                "event": "plugin.configured",
                "host": config.host,
                "executable_path": config.executable_path,
                "save_sessions": config.save_sessions,
            },
        )

    @classmethod
    def from_config(cls, config: dict[str, dict[str, Any]] | None = None) -> OllamaStatusPlugin:
        """Resolve a validated config mapping and build the plugin."""
        return cls(resolve_config(config))

    def status_segments(self, now: float | None = None) -> list[Segment]:
        state, model = self.cache.get_status(now)
        return format_status(state, model, self.config.palette, self.config.icon)

    def datetime_segments(self, now: datetime | None = None) -> list[Segment]:
        return datetime_segments(self.config.palette, now)

    def keybindings(self) -> list[KeyBinding]:
        return build_keybindings(self.config, self.cache)

    def model_selector_action(self) -> Action:
        return create_model_selector_action(self.config, self.cache)

    def quick_chat_action(self) -> Action:
        return create_quick_chat_action(self.config, self.cache)

    def session_picker_action(self) -> Action:
        return create_session_picker_action(self.config)

    def check_status(self, now: float | None = None) -> tuple[ServerState, str | None]:
        return self.cache.get_status(now)

    def fetch_models(self, now: float | None = None) -> tuple[ModelInfo, ...]:
        return self.cache.get_catalog(now)

    @staticmethod
    def smart_datetime(now: datetime | None = None) -> str:
        return format_datetime(now or datetime.now())
