"""Blocking curl probes against the Ollama HTTP API."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import NamedTuple

LOGGER = logging.getLogger(__name__)

CATALOG_CONNECT_TIMEOUT_SECONDS = 2
STATUS_CONNECT_TIMEOUT_SECONDS = 1
# Upper bound for the whole transfer, so a stalled read cannot hold the
# dispatch thread indefinitely.
MAX_TRANSFER_SECONDS = 5


class ProbeResult(NamedTuple):
    """Outcome of a single probe: success flag and raw response body."""

    ok: bool
    body: str


class Poller:
    """Issue one-shot GET requests through an external curl process."""

    def __init__(self, host: str, curl_path: str | None = None) -> None:
        self.host = host.rstrip("/")
        self.curl_path = curl_path or shutil.which("curl") or "curl"

    def probe_catalog(self) -> ProbeResult:
        """Fetch ``/api/tags`` with the catalog connect timeout."""
        return self._probe("/api/tags", CATALOG_CONNECT_TIMEOUT_SECONDS)

    def probe_running(self) -> ProbeResult:
        """Fetch ``/api/ps`` with the shorter status connect timeout."""
        return self._probe("/api/ps", STATUS_CONNECT_TIMEOUT_SECONDS)

    def _probe(self, path: str, connect_timeout: int) -> ProbeResult:
        url = f"{self.host}{path}"
        args = [
            self.curl_path,
            "-s",
            "--connect-timeout",
            str(connect_timeout),
            "--max-time",
            str(MAX_TRANSFER_SECONDS),
            url,
        ]
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=MAX_TRANSFER_SECONDS + 1,
            )
        except subprocess.TimeoutExpired:
            LOGGER.info(
                "poller.probe.timeout",
                extra={"event": "poller.probe.timeout", "url": url},
            )
            return ProbeResult(False, "")
        except OSError as exc:
            LOGGER.warning(
                "poller.probe.spawn_failed",
                extra={
                    "event": "poller.probe.spawn_failed",
                    "url": url,
                    "error": str(exc),
                },
            )
            return ProbeResult(False, "")

        body = completed.stdout or ""
        if completed.returncode != 0 or not body:
            LOGGER.debug(
                "poller.probe.failed",
                extra={
                    "event": "poller.probe.failed",
                    "url": url,
                    "returncode": completed.returncode,
                },
            )
            return ProbeResult(False, body)
        return ProbeResult(True, body)
