"""Interactive workflows: model picker, quick chat, and session resume.

Each builder returns a one-shot handler ``action(host)`` that the host's
dispatch loop invokes synchronously. Handlers gather data, show an empty-state
notice when there is nothing to offer, otherwise present a fuzzy choice list
and launch ``ollama run <model>`` for the chosen entry.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import logging
from typing import Protocol

from .cache import StatusCache
from .config import MODEL_ENV_VAR, ResolvedConfig
from .extract import ModelInfo
from .formatting import format_size
from .sessions import derive_session_model, list_sessions

LOGGER = logging.getLogger(__name__)

NOTICE_TITLE = "Ollama"
NOTICE_TIMEOUT_MS = 3000
NO_MODELS_MESSAGE = "No models found. Is Ollama running?"
SESSIONS_DISABLED_MESSAGE = "Session persistence not enabled"
NO_SESSIONS_MESSAGE = "No saved sessions found"


@dataclass(frozen=True)
class Choice:
    """One entry of a picker: the identifier returned and the label shown."""

    id: str
    label: str


@dataclass(frozen=True)
class LaunchRequest:
    """Command line and extra environment for an interactive session."""

    args: tuple[str, ...]
    env: dict[str, str] = field(default_factory=dict)


class Host(Protocol):
    """Services the hosting terminal provides to the actions."""

    def notify(self, title: str, message: str, timeout_ms: int = NOTICE_TIMEOUT_MS) -> None: ...

    def choose(
        self,
        title: str,
        description: str,
        choices: Sequence[Choice],
        on_choice: Callable[[Choice | None], None],
    ) -> None: ...

    def spawn(self, request: LaunchRequest) -> None: ...


Action = Callable[[Host], None]


@dataclass(frozen=True)
class KeyBinding:
    """A LEADER key binding for one of the actions."""

    key: str
    mods: str
    name: str
    action: Action


def launch_request(config: ResolvedConfig, model: str) -> LaunchRequest:
    """Build ``<ollama> run <model>`` with the model exported in the environment."""
    return LaunchRequest(
        args=(config.executable_path, "run", model),
        env={MODEL_ENV_VAR: model},
    )


def model_choice_label(model: ModelInfo) -> str:
    """Return ``name (params, size)``, omitting the suffix when nothing is known."""
    details: list[str] = []
    if model.parameter_size:
        details.append(model.parameter_size)
    if model.size_bytes > 0:
        details.append(format_size(model.size_bytes))
    if not details:
        return model.name
    return f"{model.name} ({', '.join(details)})"


def create_model_selector_action(config: ResolvedConfig, cache: StatusCache) -> Action:
    """Pick a model from the catalog and run it."""

    def select_model(host: Host) -> None:
        models = cache.get_catalog()
        if not models:
            host.notify(NOTICE_TITLE, NO_MODELS_MESSAGE, NOTICE_TIMEOUT_MS)
            return

        def on_choice(choice: Choice | None) -> None:
            if choice is None:
                return
            LOGGER.info(
                "actions.model.selected",
                extra={"event": "actions.model.selected", "model": choice.id},
            )
            host.spawn(launch_request(config, choice.id))

        host.choose(
            f"{config.icon} Select Ollama Model",
            "Choose a model to run",
            [Choice(id=model.name, label=model_choice_label(model)) for model in models],
            on_choice,
        )

    return select_model


def create_quick_chat_action(config: ResolvedConfig, cache: StatusCache) -> Action:
    """Run the default model directly, or fall back to the model picker."""
    if not config.default_model:
        return create_model_selector_action(config, cache)

    request = launch_request(config, config.default_model)

    def quick_chat(host: Host) -> None:
        host.spawn(request)

    return quick_chat


def create_session_picker_action(config: ResolvedConfig) -> Action:
    """Pick a saved session and relaunch the model its name starts with."""

    def resume_session(host: Host) -> None:
        if not config.save_sessions:
            host.notify(NOTICE_TITLE, SESSIONS_DISABLED_MESSAGE, NOTICE_TIMEOUT_MS)
            return

        sessions = list_sessions(
            config.sessions_dir, config.session_extension, config.session_limit
        )
        if not sessions:
            host.notify(NOTICE_TITLE, NO_SESSIONS_MESSAGE, NOTICE_TIMEOUT_MS)
            return

        def on_choice(choice: Choice | None) -> None:
            if choice is None:
                return
            model = derive_session_model(choice.label)
            if model is None:
                return
            LOGGER.info(
                "actions.session.resumed",
                extra={
                    "event": "actions.session.resumed",
                    "session": choice.id,
                    "model": model,
                },
            )
            host.spawn(launch_request(config, model))

        host.choose(
            f"{config.icon} Resume Ollama Session",
            "Choose a session to resume",
            [Choice(id=entry.path, label=entry.derived_name) for entry in sessions],
            on_choice,
        )

    return resume_session


def build_keybindings(config: ResolvedConfig, cache: StatusCache) -> list[KeyBinding]:
    """Return the enabled LEADER bindings in a stable order."""
    bindings: list[KeyBinding] = []
    if config.keys.select_model:
        bindings.append(
            KeyBinding(
                key=config.keys.select_model,
                mods="LEADER",
                name="select_model",
                action=create_model_selector_action(config, cache),
            )
        )
    if config.keys.quick_chat:
        bindings.append(
            KeyBinding(
                key=config.keys.quick_chat,
                mods="LEADER",
                name="quick_chat",
                action=create_quick_chat_action(config, cache),
            )
        )
    if config.save_sessions and config.keys.resume_session:
        bindings.append(
            KeyBinding(
                key=config.keys.resume_session,
                mods="LEADER|SHIFT",
                name="resume_session",
                action=create_session_picker_action(config),
            )
        )
    return bindings
