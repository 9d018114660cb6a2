"""Textual host application: status bar, LEADER bindings, pickers, and launches."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import os
import subprocess
from typing import Any

from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.events import Key
from textual.widgets import Header, Static

from .actions import Action, Choice, KeyBinding, LaunchRequest, NOTICE_TIMEOUT_MS
from .exceptions import LaunchError
from .plugin import OllamaStatusPlugin
from .screens import FuzzyPickerScreen
from .widgets.status_bar import StatusBar

LOGGER = logging.getLogger(__name__)


class TextualHost:
    """Adapt an :class:`OllamaStatusApp` to the services actions expect."""

    def __init__(self, app: OllamaStatusApp) -> None:
        self._app = app

    def notify(self, title: str, message: str, timeout_ms: int = NOTICE_TIMEOUT_MS) -> None:
        self._app.notify(message, title=title, timeout=timeout_ms / 1000)

    def choose(
        self,
        title: str,
        description: str,
        choices: Sequence[Choice],
        on_choice: Callable[[Choice | None], None],
    ) -> None:
        def deliver(choice: Choice | None) -> None:
            self._app.run_action_handler(lambda _host: on_choice(choice))

        self._app.disarm_leader()
        self._app.push_screen(
            FuzzyPickerScreen(title, description, choices), callback=deliver
        )

    def spawn(self, request: LaunchRequest) -> None:
        """Start the session in a new tab when a tab command is set, else inline."""
        env = {**os.environ, **request.env}
        tab_command = self._app.plugin.config.tab_command
        try:
            if tab_command:
                subprocess.Popen(
                    [*tab_command, *request.args],
                    env=env,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                )
            else:
                with self._app.suspend():
                    subprocess.run(list(request.args), env=env)
        except OSError as exc:
            raise LaunchError(
                f"Unable to launch {' '.join(request.args)}: {exc}"
            ) from exc
        except SuspendNotSupported as exc:
            raise LaunchError(
                "This terminal cannot hand over to ollama; set ui.tab_command to "
                "launch sessions in a new tab."
            ) from exc
        LOGGER.info(
            "app.session.spawned",
            extra={
                "event": "app.session.spawned",
                "args": list(request.args),
                "in_tab": bool(tab_command),
            },
        )


class OllamaStatusApp(App[None]):
    """Show Ollama server state and launch model sessions from LEADER keys."""

    TITLE = "Ollama Status"
    BINDINGS = [Binding("ctrl+q", "quit", "Quit")]

    CSS = """
    #help {
        padding: 1 2;
    }
    """

    def __init__(self, plugin: OllamaStatusPlugin) -> None:
        self.plugin = plugin
        self.host_adapter = TextualHost(self)
        self._leader_bindings: list[KeyBinding] = plugin.keybindings()
        self._leader_armed = False
        self._w_status: StatusBar | None = None
        super().__init__()

    @staticmethod
    def _binding_help(leader: str, bindings: Sequence[KeyBinding]) -> str:
        lines = [f"Leader: {leader.upper()}", ""]
        for binding in bindings:
            lines.append(f"{binding.mods} + {binding.key}  {binding.name}")
        if not bindings:
            lines.append("No bindings enabled.")
        return "\n".join(lines)

    def compose(self) -> ComposeResult:
        """Compose app widgets."""
        yield Header()
        yield Static(
            self._binding_help(self.plugin.config.leader, self._leader_bindings),
            id="help",
        )
        yield StatusBar(id="status_bar")

    def on_mount(self) -> None:
        """Register the leader key and start the status refresh timer."""
        self._w_status = self.query_one("#status_bar", StatusBar)
        self.bind(self.plugin.config.leader, "arm_leader", description="Leader")
        if self.plugin.config.show_status:
            self._refresh_status()
            self.set_interval(
                self.plugin.config.update_interval_ms / 1000, self._refresh_status
            )
        else:
            self._w_status.display = False

    def _refresh_status(self) -> None:
        # The cache debounces probes, so most ticks only repaint.
        status_widget = self._w_status or self.query_one("#status_bar", StatusBar)
        status_widget.set_segments(
            self.plugin.status_segments(), self.plugin.datetime_segments()
        )

    @property
    def leader_armed(self) -> bool:
        return self._leader_armed

    def action_arm_leader(self) -> None:
        # Modal screens own the keyboard until they close.
        if len(self.screen_stack) > 1:
            return
        self._leader_armed = True
        self.sub_title = "LEADER"

    def disarm_leader(self) -> None:
        self._leader_armed = False
        self.sub_title = ""

    def _binding_for_key(self, event: Key) -> KeyBinding | None:
        # Uppercase characters carry the SHIFT modifier.
        pressed = {event.character or "", event.key}
        for binding in self._leader_bindings:
            if binding.key in pressed:
                return binding
        return None

    def on_key(self, event: Key) -> None:
        if not self._leader_armed:
            return
        self.disarm_leader()
        event.stop()
        event.prevent_default()
        binding = self._binding_for_key(event)
        if binding is None:
            return
        LOGGER.debug(
            "app.binding.dispatch",
            extra={"event": "app.binding.dispatch", "binding": binding.name},
        )
        self.run_action_handler(binding.action)

    def run_action_handler(self, action: Action) -> None:
        """Run an action against this host; launch failures become notifications."""
        try:
            action(self.host_adapter)
        except LaunchError as exc:
            LOGGER.warning(
                "app.session.spawn_failed",
                extra={"event": "app.session.spawn_failed", "error": str(exc)},
            )
            self.notify(str(exc), title="Ollama", severity="error")

    def on_status_bar_model_picker_requested(self, event: Any) -> None:  # noqa: ANN401
        self.run_action_handler(self.plugin.model_selector_action())
