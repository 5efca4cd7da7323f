from pathlib import Path
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Grid, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header

from mc.common.logger import log, set_level
from mc.core import config
from mc.core.bank import ChronometerBank
from mc.core.errors import ParseError
from mc.ui.dialogs import ConfirmDialog, FilenameDialog, MessageDialog
from mc.ui.widgets import ChronometerCard

GRID_COLUMNS = 3
DIALOG_ACTIONS = ("save", "load", "export", "request_quit")


# ---------------------------------------------------------------------------
# Main app
# ---------------------------------------------------------------------------

# Main screen of metrochrono: the grid of timer cards plus the Save/Load/Export/Quit panel.
class ChronoApp(App):

    TITLE = "MetroChrono"
    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("ctrl+o", "load", "Load", priority=True),
        Binding("ctrl+e", "export", "Export CSV", priority=True),
        Binding("q", "request_quit", "Quit"),
        Binding("escape", "quit", "Quit now", show=False),
    ]

    CSS = """
    #chrono-grid {
        grid-size: 3;
        grid-gutter: 0 1;
        height: 1fr;
    }

    .chrono-card {
        border: round $secondary;
        border-title-align: center;
        height: 100%;
        padding: 0 1;
    }

    .chrono-card.running {
        border: round $success;
    }

    .elapsed, .status {
        width: 100%;
        text-align: center;
    }

    .card-buttons {
        height: auto;
        align-horizontal: center;
    }

    .card-buttons Button {
        min-width: 9;
        margin: 0 1;
    }

    #button-panel {
        height: 3;
        align-horizontal: center;
    }

    #button-panel Button {
        margin: 0 1;
    }

    FilenameDialog, MessageDialog, ConfirmDialog {
        align: center middle;
    }

    .dialog {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    .dialog-buttons {
        height: auto;
        align-horizontal: center;
        margin-top: 1;
    }

    .dialog-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(self, bank: ChronometerBank | None = None, settings: dict | None = None):
        super().__init__()
        self.settings = settings if settings is not None else config.build_default_settings()
        self.bank = bank if bank is not None else ChronometerBank(self.settings["chronometer_count"])
        self._cards = {}

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Grid(id="chrono-grid"):
            for view in self.bank.views():
                card = ChronometerCard(self.bank, view.id, view.label)
                self._cards[view.id] = card
                yield card
        with Horizontal(id="button-panel"):
            yield Button("Save", id="save-btn")
            yield Button("Load", id="load-btn")
            yield Button("Export CSV", id="export-btn")
            yield Button("Quit", variant="error", id="quit-btn")
        yield Footer()

    def on_mount(self) -> None:
        rows = -(-len(self._cards) // GRID_COLUMNS)
        self.query_one("#chrono-grid", Grid).styles.grid_size_rows = rows
        self.refresh_displays()
        self.set_interval(self.settings["refresh_ms"] / 1000, self.refresh_displays)
        log.info(f"MetroChrono UI started with {len(self._cards)} chronometers")

    # Shortcuts stay quiet while a dialog is up, so a second ctrl+s can't stack another modal on top.
    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action in DIALOG_ACTIONS and isinstance(self.screen, ModalScreen):
            return False
        return True

    # ------------------------------------------------------------------ #
    #  Refresh                                                             #
    # ------------------------------------------------------------------ #

    # Polls the bank and repaints every card. Runs on the refresh interval, never does I/O.
    def refresh_displays(self) -> None:
        for view in self.bank.views():
            card = self._cards.get(view.id)
            if card is not None:
                card.show_view(view)

    def sync_labels(self) -> None:
        for view in self.bank.views():
            card = self._cards.get(view.id)
            if card is not None:
                card.show_label(view.label)

    # ------------------------------------------------------------------ #
    #  Button panel / actions                                              #
    # ------------------------------------------------------------------ #

    @on(Button.Pressed, "#save-btn")
    def action_save(self) -> None:
        self.push_screen(
            FilenameDialog("Save Timers", self.settings["default_save_file"], "Save"),
            self._on_save_filename,
        )

    @on(Button.Pressed, "#load-btn")
    def action_load(self) -> None:
        self.push_screen(
            FilenameDialog("Load Timers", self.settings["default_save_file"], "Load"),
            self._on_load_filename,
        )

    @on(Button.Pressed, "#export-btn")
    def action_export(self) -> None:
        self.push_screen(
            FilenameDialog("Export to CSV", self.settings["default_export_file"], "Export"),
            self._on_export_filename,
        )

    @on(Button.Pressed, "#quit-btn")
    def action_request_quit(self) -> None:
        if not self.settings["confirm_quit"]:
            self.exit()
            return
        self.push_screen(ConfirmDialog("Are you sure you want to quit?"), self._on_quit_answer)

    def _on_quit_answer(self, confirmed: bool | None) -> None:
        if confirmed:
            self.exit()

    def _on_save_filename(self, filename: str | None) -> None:
        if filename:
            self.save_to(filename)

    def _on_load_filename(self, filename: str | None) -> None:
        if filename:
            self.load_from(filename)

    def _on_export_filename(self, filename: str | None) -> None:
        if filename:
            self.export_to(filename)

    def show_message(self, text: str) -> None:
        self.push_screen(MessageDialog(text))

    # ------------------------------------------------------------------ #
    #  File workers                                                        #
    # ------------------------------------------------------------------ #

    # File work happens off the UI thread; the bank only holds its lock for the in-memory part.
    @work(thread=True, group="files")
    def save_to(self, filename: str) -> None:
        try:
            self.bank.save(Path(filename))
            message = f"Successfully saved to {filename}"
        except OSError as e:
            log.warning(f"Failed to save timers to '{filename}'", exc_info=True)
            message = f"Error saving: {e}"
        self.call_from_thread(self.show_message, message)

    @work(thread=True, group="files")
    def load_from(self, filename: str) -> None:
        try:
            self.bank.restore(Path(filename))
        except (OSError, ParseError) as e:
            log.warning(f"Failed to load timers from '{filename}'", exc_info=True)
            self.call_from_thread(self.show_message, f"Error loading: {e}")
            return
        self.call_from_thread(self.sync_labels)
        self.call_from_thread(self.show_message, f"Successfully loaded from {filename}")

    @work(thread=True, group="files")
    def export_to(self, filename: str) -> None:
        try:
            self.bank.export_table(Path(filename))
            message = f"Successfully exported to {filename}"
        except OSError as e:
            log.warning(f"Failed to export timers to '{filename}'", exc_info=True)
            message = f"Error exporting: {e}"
        self.call_from_thread(self.show_message, message)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    settings = config.load_settings()
    set_level(log, settings["log_level"])
    bank = ChronometerBank(settings["chronometer_count"])
    ChronoApp(bank, settings).run()
