"""Status bar widget that draws colored text segments."""

from __future__ import annotations

from collections.abc import Sequence

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import Static

from ..formatting import Segment


class StatusBar(Static):
    """Render the server status block followed by the date/time block.

    Segments (left to right):
        🦙 ● llama3.2  │  Fri 2:30p
    """

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        width: 100%;
        content-align: right middle;
    }
    """

    class ModelPickerRequested(Message):
        """Posted when the status bar is clicked."""

    segments: tuple[Segment, ...] = ()

    @staticmethod
    def render_segments(segments: Sequence[Segment]) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        for segment in segments:
            text.append(segment.text, style=segment.color)
        return text

    def set_segments(
        self, status: Sequence[Segment], trailing: Sequence[Segment] = ()
    ) -> None:
        """Replace the bar content with the given segments."""
        self.segments = (*status, *trailing)
        self.update(self.render_segments(self.segments))

    def on_click(self, event: events.Click) -> None:
        """Open the model picker from a status bar click."""
        event.stop()
        self.post_message(self.ModelPickerRequested())
