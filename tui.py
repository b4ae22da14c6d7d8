#!/usr/bin/env python3
"""
Hand Calculator TUI — Terminal menu using Textual.

Single-keystroke menu: P runs the analysis, R / O set rerolls and extra
rolls, E / I toggle excluded and included hands, X exits. Prompts take one
digit; X or Esc goes back.
"""
import argparse
import sys

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Center, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Static

from calculator_coordinator import (
    CalculatorCoordinator,
    configure_logging,
    coordinator_from_args,
    parse_args,
)
from hand import ConfigurationError

INVALID_ENTRY = "Invalid Entry"


class DigitPromptScreen(ModalScreen):
    """Asks for a single digit. Dismisses with the digit, or None on X / Esc."""

    BINDINGS = [
        Binding("x", "back", "Back"),
        Binding("escape", "back", "Back"),
    ]

    def __init__(self, prompt: str):
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        with Center():
            with VerticalScroll(id="prompt-panel"):
                yield Static(f"[bold]{self.prompt}[/bold] (X to quit)")
                yield Static("", id="prompt-status")

    def on_key(self, event: events.Key):
        if event.key in ("x", "escape"):
            return
        event.stop()
        if event.character and event.character.isdigit():
            self.dismiss(int(event.character))
        else:
            self.query_one("#prompt-status", Static).update(INVALID_ENTRY)

    def action_back(self):
        self.dismiss(None)


class CategoryToggleScreen(ModalScreen):
    """Toggles hand categories in or out of a selection by rank."""

    BINDINGS = [
        Binding("x", "back", "Back"),
        Binding("escape", "back", "Back"),
    ]

    def __init__(self, coordinator, mode: str):
        super().__init__()
        self.coordinator = coordinator
        self.mode = mode

    @property
    def selection(self):
        if self.mode == "exclude":
            return self.coordinator.excluded
        return self.coordinator.included

    def compose(self) -> ComposeResult:
        with Center():
            with VerticalScroll(id="toggle-panel"):
                yield Static(self._build_text(), id="toggle-text")
                yield Static("", id="toggle-status")

    def _build_text(self):
        coord = self.coordinator
        if self.mode == "exclude":
            heading = "Currently Excluded Hands:"
            empty = "No hands excluded."
            instructions = "Set Excluded Hands (calculate odds IGNORING hands in this list)."
            all_selected = "All hands excluded."
        else:
            heading = "Currently Included Hands:"
            empty = "No hands included."
            instructions = "Set Included Hands (calculate odds REQUIRES hands in this list)."
            all_selected = "All hands included."
        return (
            f"[bold]{heading}[/bold]\n"
            f"{coord.selected_text(self.selection, empty)}\n\n"
            f"{instructions} Enter hand value to toggle:\n"
            f"{coord.available_text(self.selection, all_selected)}\n\n"
            "X - Back"
        )

    def on_key(self, event: events.Key):
        if event.key in ("x", "escape"):
            return
        event.stop()
        status = self.query_one("#toggle-status", Static)
        if event.character and event.character.isdigit():
            if self.mode == "exclude":
                toggled = self.coordinator.toggle_excluded(int(event.character))
            else:
                toggled = self.coordinator.toggle_included(int(event.character))
            if toggled:
                self.query_one("#toggle-text", Static).update(self._build_text())
                status.update("")
                return
        status.update(INVALID_ENTRY)

    def action_back(self):
        self.dismiss(None)


class HandCalculatorApp(App):
    """Hand calculator terminal UI application."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #config-display {
        height: auto;
        padding: 0 2;
    }

    #menu-display {
        height: auto;
        padding: 1 2;
    }

    #report-panel {
        height: 1fr;
        padding: 0 2;
    }

    #prompt-panel, #toggle-panel {
        padding: 2 4;
        border: thick $accent;
        background: $surface;
        width: 70;
        height: auto;
        max-height: 80vh;
    }
    """

    BINDINGS = [
        Binding("p", "analyze", "Possible Hands", show=True),
        Binding("r", "set_rerolls", "Set Rerolls", show=True),
        Binding("o", "set_extra_rolls", "Set Extra Rolls", show=True),
        Binding("e", "set_excluded", "Excluded Hands", show=True),
        Binding("i", "set_included", "Included Hands", show=True),
        Binding("x", "quit", "Exit", show=True),
        Binding("escape", "quit_or_close", "Quit"),
    ]

    def __init__(self, coordinator=None):
        super().__init__()
        self.coordinator = coordinator if coordinator is not None else CalculatorCoordinator()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(self._config_text(), id="config-display")
        yield Static(self.coordinator.menu_text(), id="menu-display")
        with VerticalScroll(id="report-panel"):
            yield Static("", id="report-display")
        yield Footer()

    def on_mount(self):
        self.title = "Hand Calculator"

    def _config_text(self):
        config = self.coordinator.config
        return (f"Communal: {config.communal_rolls} | Normal: {config.normal_rolls} | "
                f"Extra: {config.extra_rolls} | Rerolls: {config.rerolls}")

    def _refresh_config(self):
        self.query_one("#config-display", Static).update(self._config_text())

    def _show(self, text):
        self.query_one("#report-display", Static).update(text)

    # ── Actions ──────────────────────────────────────────────────────────

    def action_analyze(self):
        self._show(self.coordinator.analysis_text())

    def action_set_rerolls(self):
        limit = self.coordinator.config.normal_rolls

        def on_digit(value):
            if value is not None:
                applied = self.coordinator.set_rerolls(value)
                self._show(f"Rerolls set to {applied}")
                self._refresh_config()

        self.push_screen(DigitPromptScreen(f"Set Rerolls (max {limit} / min 0)"), on_digit)

    def action_set_extra_rolls(self):
        limit = self.coordinator.max_extra_rolls

        def on_digit(value):
            if value is not None:
                applied = self.coordinator.set_extra_rolls(value)
                self._show(f"Extra Rolls set to {applied}")
                self._refresh_config()

        self.push_screen(DigitPromptScreen(f"Set Extra Rolls (max {limit} / min 0)"), on_digit)

    def action_set_excluded(self):
        self.push_screen(CategoryToggleScreen(self.coordinator, "exclude"))

    def action_set_included(self):
        self.push_screen(CategoryToggleScreen(self.coordinator, "include"))

    def action_quit_or_close(self):
        if len(self.screen_stack) > 1:
            self.pop_screen()
        else:
            self.exit()


def main(argv=None):
    """Entry point for the TUI."""
    args = parse_args(argv)
    configure_logging(args)
    try:
        coordinator = coordinator_from_args(args)
    except (ConfigurationError, argparse.ArgumentTypeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)
    app = HandCalculatorApp(coordinator=coordinator)
    app.run()


if __name__ == "__main__":
    main()
