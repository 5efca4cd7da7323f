"""Modal dialogs: filename prompts, result messages and the quit confirmation."""

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class FilenameDialog(ModalScreen[str | None]):
    """Asks for a filename. Dismisses with the stripped name, or None on cancel."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, title, default_filename, confirm_label):
        super().__init__()
        self.dialog_title = title
        self.default_filename = default_filename
        self.confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Vertical(id="filename-dialog", classes="dialog"):
            yield Static("Filename", classes="dialog-caption")
            yield Input(value=self.default_filename, id="filename-input")
            with Horizontal(classes="dialog-buttons"):
                yield Button(self.confirm_label, variant="primary", id="filename-confirm")
                yield Button("Cancel", id="filename-cancel")

    def on_mount(self) -> None:
        self.query_one("#filename-dialog").border_title = self.dialog_title
        self.query_one("#filename-input", Input).focus()

    @on(Button.Pressed, "#filename-confirm")
    @on(Input.Submitted, "#filename-input")
    def confirm(self) -> None:
        filename = self.query_one("#filename-input", Input).value.strip()
        # An empty name is treated the same as cancelling
        self.dismiss(filename or None)

    @on(Button.Pressed, "#filename-cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)


class MessageDialog(ModalScreen[None]):
    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, text):
        super().__init__()
        self.text = text

    def compose(self) -> ComposeResult:
        with Vertical(id="message-dialog", classes="dialog"):
            yield Static(self.text, id="message-text", markup=False)
            with Horizontal(classes="dialog-buttons"):
                yield Button("OK", variant="primary", id="message-ok")

    def on_mount(self) -> None:
        self.query_one("#message-ok", Button).focus()

    @on(Button.Pressed, "#message-ok")
    def action_close(self) -> None:
        self.dismiss(None)


class ConfirmDialog(ModalScreen[bool]):
    """Yes/no question. Dismisses with True only when the confirm button is pressed."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, question, confirm_label="Quit"):
        super().__init__()
        self.question = question
        self.confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog", classes="dialog"):
            yield Static(self.question, id="confirm-text")
            with Horizontal(classes="dialog-buttons"):
                yield Button(self.confirm_label, variant="error", id="confirm-yes")
                yield Button("Cancel", id="confirm-no")

    def on_mount(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    @on(Button.Pressed, "#confirm-yes")
    def confirm(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#confirm-no")
    def action_cancel(self) -> None:
        self.dismiss(False)
