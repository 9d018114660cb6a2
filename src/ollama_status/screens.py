"""Modal fuzzy picker used by the model and session actions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, OptionList, Static

from .actions import Choice


def fuzzy_match(query: str, label: str) -> bool:
    """Return True when every query character appears in order in the label."""
    remaining = iter(label.lower())
    return all(char in remaining for char in query.lower() if not char.isspace())


def filter_choices(query: str, choices: Sequence[Choice]) -> list[Choice]:
    return [choice for choice in choices if fuzzy_match(query, choice.label)]


class FuzzyPickerScreen(ModalScreen[Choice | None]):
    """Modal picker that narrows its options as the user types."""

    CSS = """
    FuzzyPickerScreen {
        align: center middle;
    }

    #picker-dialog {
        width: 70;
        max-height: 26;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    #picker-title {
        text-style: bold;
    }

    #picker-description {
        padding-bottom: 1;
        color: $text-muted;
    }

    #picker-help {
        padding-top: 1;
    }
    """

    def __init__(self, title: str, description: str, choices: Sequence[Choice]) -> None:
        super().__init__()
        self._title = title
        self._description = description
        self._choices = list(choices)
        self._visible: list[Choice] = list(choices)

    def compose(self) -> ComposeResult:
        with Container(id="picker-dialog"):
            yield Static(self._title, id="picker-title")
            yield Static(self._description, id="picker-description")
            yield Input(placeholder="Type to filter", id="picker-query")
            # Labels are file stems and model names, never markup.
            yield OptionList(
                *(Text(choice.label) for choice in self._visible),
                id="picker-options",
            )
            yield Static("Enter to select | Esc to cancel", id="picker-help")

    def on_mount(self) -> None:
        self.query_one("#picker-query", Input).focus()
        options = self.query_one("#picker-options", OptionList)
        if self._visible:
            options.highlighted = 0

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "picker-query":
            return
        self._visible = filter_choices(event.value, self._choices)
        options = self.query_one("#picker-options", OptionList)
        options.clear_options()
        options.add_options([Text(choice.label) for choice in self._visible])
        if self._visible:
            options.highlighted = 0

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "picker-query":
            return
        event.stop()
        highlighted = self.query_one("#picker-options", OptionList).highlighted
        self._dismiss_index(highlighted if highlighted is not None else 0)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self._dismiss_index(event.option_index)

    def on_key(self, event: Any) -> None:  # noqa: ANN401
        key = str(getattr(event, "key", "")).lower()
        if key == "escape":
            self.dismiss(None)
            return
        options = self.query_one("#picker-options", OptionList)
        if key == "down":
            event.stop()
            options.action_cursor_down()
        elif key == "up":
            event.stop()
            options.action_cursor_up()

    def _dismiss_index(self, index: int) -> None:
        if 0 <= index < len(self._visible):
            self.dismiss(self._visible[index])
