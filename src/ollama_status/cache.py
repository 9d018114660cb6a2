"""Cached view of the Ollama server state, loaded model, and model catalog."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
import logging
import time
from typing import Protocol

from .extract import ModelInfo, extract_catalog, extract_running_names
from .poller import ProbeResult

LOGGER = logging.getLogger(__name__)


class ServerState(str, Enum):
    """Last known reachability of the Ollama server."""

    UNKNOWN = "unknown"
    RUNNING = "running"
    # Reserved: no probe currently produces this state.
    LOADING = "loading"
    STOPPED = "stopped"


@dataclass(frozen=True)
class StatusSnapshot:
    """Server state, loaded model, and when they were last probed."""

    state: ServerState = ServerState.UNKNOWN
    loaded_model: str | None = None
    checked_at: float = 0.0


@dataclass(frozen=True)
class _CatalogRecord:
    models: tuple[ModelInfo, ...] = ()
    fetched_at: float = 0.0


class ProbeSource(Protocol):
    """Anything able to issue the catalog and running-model probes."""

    def probe_catalog(self) -> ProbeResult: ...

    def probe_running(self) -> ProbeResult: ...


class StatusCache:
    """Arbitrate between cached values and fresh probes.

    The catalog is refreshed at most once per ``catalog_ttl`` seconds while it
    is non-empty. Status probes are spaced by ``status_debounce`` seconds no
    matter how often callers ask, and the debounce window restarts even when a
    probe fails. Both records are replaced whole, never mutated.
    """

    def __init__(
        self,
        poller: ProbeSource,
        catalog_ttl: float = 30,
        status_debounce: float = 15,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._poller = poller
        self.catalog_ttl = catalog_ttl
        self.status_debounce = status_debounce
        self._clock = clock
        self._catalog = _CatalogRecord()
        self._status = StatusSnapshot()

    @property
    def catalog(self) -> tuple[ModelInfo, ...]:
        """Last known catalog, without probing."""
        return self._catalog.models

    @property
    def catalog_fetched_at(self) -> float:
        return self._catalog.fetched_at

    def snapshot(self) -> StatusSnapshot:
        """Return the current status record without probing."""
        return self._status

    def get_catalog(self, now: float | None = None) -> tuple[ModelInfo, ...]:
        """Return the model catalog, probing only when the TTL has lapsed."""
        if now is None:
            now = self._clock()
        record = self._catalog
        if now - record.fetched_at < self.catalog_ttl and record.models:
            return record.models

        result = self._poller.probe_catalog()
        if result.ok:
            models = tuple(extract_catalog(result.body))
            self._catalog = _CatalogRecord(models=models, fetched_at=now)
            self._status = replace(self._status, state=ServerState.RUNNING)
            LOGGER.debug(
                "cache.catalog.refreshed",
                extra={"event": "cache.catalog.refreshed", "count": len(models)},
            )
        else:
            # Keep the previous catalog; a transient failure should not empty
            # the picker.
            self._status = replace(self._status, state=ServerState.STOPPED)
            LOGGER.info(
                "cache.catalog.refresh_failed",
                extra={
                    "event": "cache.catalog.refresh_failed",
                    "cached_count": len(record.models),
                },
            )
        return self._catalog.models

    def get_status(self, now: float | None = None) -> tuple[ServerState, str | None]:
        """Return ``(state, loaded_model)``, probing at most once per debounce window."""
        if now is None:
            now = self._clock()
        current = self._status
        if now - current.checked_at < self.status_debounce:
            return current.state, current.loaded_model

        result = self._poller.probe_running()
        if result.ok:
            running = extract_running_names(result.body)
            updated = StatusSnapshot(
                state=ServerState.RUNNING,
                loaded_model=running[0] if running else None,
                checked_at=now,
            )
        else:
            updated = StatusSnapshot(
                state=ServerState.STOPPED, loaded_model=None, checked_at=now
            )
        self._status = updated

        if updated.state != current.state or updated.loaded_model != current.loaded_model:
            LOGGER.info(
                "cache.status.changed",
                extra={
                    "event": "cache.status.changed",
                    "from_state": current.state.value,
                    "to_state": updated.state.value,
                    "loaded_model": updated.loaded_model,
                },
            )
        return updated.state, updated.loaded_model
