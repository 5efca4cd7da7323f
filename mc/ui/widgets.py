"""Timer card widget: one bordered box per chronometer in the main grid.

A card sends its button presses and label edits straight to the bank. It
never reads the bank on its own; the app pushes a ChronometerView into
``show_view()`` on every refresh tick.
"""

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Static

from mc.core.bank import ChronometerBank, ChronometerView
from mc.core.duration import format_duration

RUNNING_MARKER = "●"


def card_title(chrono_id, running):
    if running:
        return f"Timer {chrono_id} [green]{RUNNING_MARKER}[/]"
    return f"Timer {chrono_id}"


def status_text(running):
    return "Status: Running" if running else "Status: Stopped"


class ChronometerCard(Vertical):

    def __init__(self, bank: ChronometerBank, chrono_id: int, label: str):
        super().__init__(id=f"chrono-{chrono_id}", classes="chrono-card")
        self.bank = bank
        self.chrono_id = chrono_id
        self.initial_label = label
        # Last rendered values, so a refresh tick only touches what changed
        self._shown_elapsed = None
        self._shown_running = None

    def compose(self) -> ComposeResult:
        cid = self.chrono_id
        yield Input(value=self.initial_label, placeholder="Label", id=f"label-{cid}", classes="label-input")
        yield Static(f"[yellow]{format_duration(0)}[/]", id=f"elapsed-{cid}", classes="elapsed")
        with Horizontal(classes="card-buttons"):
            yield Button("Start", variant="success", id=f"start-{cid}", classes="start")
            yield Button("Stop", id=f"stop-{cid}", classes="stop")
            yield Button("Reset", id=f"reset-{cid}", classes="reset")
        yield Static(status_text(False), id=f"status-{cid}", classes="status")

    def on_mount(self) -> None:
        self.border_title = card_title(self.chrono_id, False)

    #region === Input handlers ===

    @on(Button.Pressed, ".start")
    def _start_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.bank.start_exclusive(self.chrono_id)

    @on(Button.Pressed, ".stop")
    def _stop_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.bank.stop(self.chrono_id)

    @on(Button.Pressed, ".reset")
    def _reset_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.bank.reset(self.chrono_id)

    # Labels are applied on enter, not on every keystroke.
    @on(Input.Submitted, ".label-input")
    def _label_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.bank.set_label(self.chrono_id, event.value)

    #endregion === Input handlers ===

    #region === Display ===

    def show_view(self, view: ChronometerView) -> None:
        elapsed_text = view.formatted_elapsed
        if elapsed_text != self._shown_elapsed:
            self.query_one(f"#elapsed-{self.chrono_id}", Static).update(f"[yellow]{elapsed_text}[/]")
            self._shown_elapsed = elapsed_text
        if view.is_running != self._shown_running:
            self.query_one(f"#status-{self.chrono_id}", Static).update(status_text(view.is_running))
            self.border_title = card_title(self.chrono_id, view.is_running)
            self.set_class(view.is_running, "running")
            self._shown_running = view.is_running

    # Overwrites whatever is in the label box, used after loading a save file.
    def show_label(self, label: str) -> None:
        self.query_one(f"#label-{self.chrono_id}", Input).value = label

    #endregion === Display ===
