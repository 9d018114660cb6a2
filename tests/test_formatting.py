"""Tests for status segment and date/time formatting."""

from __future__ import annotations

from datetime import datetime
import unittest

from ollama_status.cache import ServerState
from ollama_status.config import resolve_config
from ollama_status.formatting import (
    Segment,
    datetime_segments,
    display_model_name,
    format_datetime,
    format_size,
    format_status,
)

PALETTE = resolve_config().palette
ICON = "🦙"


class FormatStatusTests(unittest.TestCase):
    """Validate the state x loaded-model grammar."""

    def test_running_with_model_strips_tag(self) -> None:
        segments = format_status(ServerState.RUNNING, "llama3.2:latest", PALETTE, ICON)
        self.assertEqual(
            segments,
            [
                Segment(PALETTE.model, "🦙 "),
                Segment(PALETTE.running, "● "),
                Segment(PALETTE.model, "llama3.2"),
            ],
        )

    def test_running_idle(self) -> None:
        segments = format_status(ServerState.RUNNING, None, PALETTE, ICON)
        self.assertEqual(segments[-1], Segment(PALETTE.separator, "idle"))

    def test_loading(self) -> None:
        segments = format_status(ServerState.LOADING, None, PALETTE, ICON)
        self.assertEqual(segments[-1], Segment(PALETTE.loading, "◐ loading"))

    def test_stopped_and_unknown_render_off(self) -> None:
        for state in (ServerState.STOPPED, ServerState.UNKNOWN):
            with self.subTest(state=state):
                segments = format_status(state, "ignored:tag", PALETTE, ICON)
                self.assertEqual(
                    segments,
                    [Segment(PALETTE.model, "🦙 "), Segment(PALETTE.stopped, "○ off")],
                )

    def test_identical_input_gives_identical_output(self) -> None:
        first = format_status(ServerState.RUNNING, "m:1", PALETTE, ICON)
        second = format_status(ServerState.RUNNING, "m:1", PALETTE, ICON)
        self.assertEqual(first, second)

    def test_display_model_name(self) -> None:
        self.assertEqual(display_model_name("qwen2.5-coder:7b"), "qwen2.5-coder")
        self.assertEqual(display_model_name("plain"), "plain")


class FormatDatetimeTests(unittest.TestCase):
    """Validate the compact 12-hour stamp."""

    def test_afternoon(self) -> None:
        # 2024-03-01 is a Friday.
        self.assertEqual(format_datetime(datetime(2024, 3, 1, 14, 30)), "Fri 2:30p")

    def test_midnight_renders_twelve_am(self) -> None:
        self.assertEqual(format_datetime(datetime(2024, 3, 3, 0, 5)), "Sun 12:05a")

    def test_noon_renders_twelve_pm(self) -> None:
        self.assertEqual(format_datetime(datetime(2024, 3, 4, 12, 0)), "Mon 12:00p")

    def test_datetime_segments(self) -> None:
        segments = datetime_segments(PALETTE, datetime(2024, 3, 1, 9, 7))
        self.assertEqual(
            segments,
            [
                Segment(PALETTE.separator, "  │  "),
                Segment(PALETTE.datetime, "Fri 9:07a  "),
            ],
        )


class FormatSizeTests(unittest.TestCase):
    def test_sizes(self) -> None:
        self.assertEqual(format_size(4_000_000_000), "3.7GB")
        self.assertEqual(format_size(500 * 1024 * 1024), "500MB")
        self.assertEqual(format_size(0), "")


if __name__ == "__main__":
    unittest.main()
