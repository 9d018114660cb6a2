"""Tests for the model picker, quick chat, and session resume workflows."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from pathlib import Path
import tempfile
import unittest

from ollama_status.actions import (
    NO_MODELS_MESSAGE,
    NO_SESSIONS_MESSAGE,
    SESSIONS_DISABLED_MESSAGE,
    Choice,
    LaunchRequest,
    build_keybindings,
    create_model_selector_action,
    create_quick_chat_action,
    create_session_picker_action,
    model_choice_label,
)
from ollama_status.cache import StatusCache
from ollama_status.config import DEFAULT_CONFIG, resolve_config
from ollama_status.extract import ModelInfo
from ollama_status.poller import ProbeResult


class _FakeHost:
    def __init__(self) -> None:
        self.notices: list[tuple[str, str]] = []
        self.spawned: list[LaunchRequest] = []
        self.choices: list[Choice] = []
        self.title = ""
        self.on_choice: Callable[[Choice | None], None] | None = None

    def notify(self, title: str, message: str, timeout_ms: int = 3000) -> None:  # noqa: ARG002
        self.notices.append((title, message))

    def choose(
        self,
        title: str,
        description: str,  # noqa: ARG002
        choices: Sequence[Choice],
        on_choice: Callable[[Choice | None], None],
    ) -> None:
        self.title = title
        self.choices = list(choices)
        self.on_choice = on_choice

    def spawn(self, request: LaunchRequest) -> None:
        self.spawned.append(request)


class _StaticPoller:
    def __init__(self, catalog: ProbeResult) -> None:
        self.catalog = catalog
        self.catalog_calls = 0

    def probe_catalog(self) -> ProbeResult:
        self.catalog_calls += 1
        return self.catalog

    def probe_running(self) -> ProbeResult:
        return ProbeResult(False, "")


def _config(**overrides: object):
    base = replace(resolve_config(DEFAULT_CONFIG), executable_path="/usr/bin/ollama")
    return replace(base, **overrides)


TAGS = (
    '{"models":[{"name":"llama3.2:latest","size":4000000000,'
    '"details":{"parameter_size":"3.2B"}},{"name":"tiny:1"}]}'
)


class ModelSelectorTests(unittest.TestCase):
    """Validate the model picker workflow."""

    def test_empty_catalog_shows_notice_and_spawns_nothing(self) -> None:
        cache = StatusCache(_StaticPoller(ProbeResult(False, "")))
        host = _FakeHost()
        create_model_selector_action(_config(), cache)(host)
        self.assertEqual(host.notices, [("Ollama", NO_MODELS_MESSAGE)])
        self.assertEqual(host.spawned, [])
        self.assertIsNone(host.on_choice)

    def test_choices_and_launch(self) -> None:
        cache = StatusCache(_StaticPoller(ProbeResult(True, TAGS)))
        host = _FakeHost()
        create_model_selector_action(_config(), cache)(host)
        self.assertEqual(
            host.choices,
            [
                Choice("llama3.2:latest", "llama3.2:latest (3.2B, 3.7GB)"),
                Choice("tiny:1", "tiny:1"),
            ],
        )
        self.assertIn("Select Ollama Model", host.title)
        assert host.on_choice is not None
        host.on_choice(host.choices[0])
        self.assertEqual(
            host.spawned,
            [
                LaunchRequest(
                    args=("/usr/bin/ollama", "run", "llama3.2:latest"),
                    env={"OLLAMA_MODEL": "llama3.2:latest"},
                )
            ],
        )

    def test_cancelled_choice_spawns_nothing(self) -> None:
        cache = StatusCache(_StaticPoller(ProbeResult(True, TAGS)))
        host = _FakeHost()
        create_model_selector_action(_config(), cache)(host)
        assert host.on_choice is not None
        host.on_choice(None)
        self.assertEqual(host.spawned, [])

    def test_choice_label_variants(self) -> None:
        self.assertEqual(model_choice_label(ModelInfo("a", 0, "")), "a")
        self.assertEqual(model_choice_label(ModelInfo("a", 0, "7B")), "a (7B)")
        self.assertEqual(
            model_choice_label(ModelInfo("a", 4_000_000_000, "")), "a (3.7GB)"
        )


class QuickChatTests(unittest.TestCase):
    """Validate the quick chat shortcut and its fallback."""

    def test_default_model_launches_directly(self) -> None:
        poller = _StaticPoller(ProbeResult(True, TAGS))
        host = _FakeHost()
        create_quick_chat_action(_config(default_model="mistral"), StatusCache(poller))(
            host
        )
        self.assertEqual(poller.catalog_calls, 0)
        self.assertEqual(host.spawned[0].args, ("/usr/bin/ollama", "run", "mistral"))
        self.assertEqual(host.spawned[0].env, {"OLLAMA_MODEL": "mistral"})

    def test_without_default_model_falls_back_to_picker(self) -> None:
        host = _FakeHost()
        cache = StatusCache(_StaticPoller(ProbeResult(True, TAGS)))
        create_quick_chat_action(_config(default_model=None), cache)(host)
        self.assertEqual(len(host.choices), 2)
        self.assertEqual(host.spawned, [])


class SessionPickerTests(unittest.TestCase):
    """Validate the session resume workflow."""

    def test_disabled_feature_shows_notice(self) -> None:
        host = _FakeHost()
        create_session_picker_action(_config(save_sessions=False))(host)
        self.assertEqual(host.notices, [("Ollama", SESSIONS_DISABLED_MESSAGE)])

    def test_no_sessions_shows_notice(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            host = _FakeHost()
            config = _config(save_sessions=True, sessions_dir=Path(temp_dir))
            create_session_picker_action(config)(host)
        self.assertEqual(host.notices, [("Ollama", NO_SESSIONS_MESSAGE)])

    def test_resume_derives_model_from_label(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "llama3.2_2024-01-01.json"
            session_path.write_text("{}", encoding="utf-8")
            host = _FakeHost()
            config = _config(save_sessions=True, sessions_dir=Path(temp_dir))
            create_session_picker_action(config)(host)

        self.assertEqual(
            host.choices, [Choice(str(session_path), "llama3.2_2024-01-01")]
        )
        assert host.on_choice is not None
        host.on_choice(host.choices[0])
        self.assertEqual(host.spawned[0].args, ("/usr/bin/ollama", "run", "llama3.2"))
        self.assertEqual(host.spawned[0].env, {"OLLAMA_MODEL": "llama3.2"})


class KeybindingTests(unittest.TestCase):
    """Validate LEADER binding derivation."""

    def _cache(self) -> StatusCache:
        return StatusCache(_StaticPoller(ProbeResult(False, "")))

    def test_resume_binding_requires_sessions(self) -> None:
        names = [b.name for b in build_keybindings(_config(), self._cache())]
        self.assertEqual(names, ["select_model", "quick_chat"])

        bindings = build_keybindings(_config(save_sessions=True), self._cache())
        self.assertEqual(
            [(b.name, b.key, b.mods) for b in bindings],
            [
                ("select_model", "i", "LEADER"),
                ("quick_chat", "o", "LEADER"),
                ("resume_session", "O", "LEADER|SHIFT"),
            ],
        )

    def test_disabled_binding_is_skipped(self) -> None:
        config = _config()
        config = replace(config, keys=replace(config.keys, quick_chat=""))
        names = [b.name for b in build_keybindings(config, self._cache())]
        self.assertEqual(names, ["select_model"])


if __name__ == "__main__":
    unittest.main()
