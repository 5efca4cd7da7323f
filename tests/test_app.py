"""Headless UI tests driven through Textual's pilot.

Covers: mc.ui.app, mc.ui.widgets, mc.ui.dialogs
"""

import json
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from textual.widgets import Button, Input

from mc.core.bank import ChronometerBank
from mc.core.config import build_default_settings
from mc.ui.app import ChronoApp
from mc.ui.dialogs import ConfirmDialog, FilenameDialog, MessageDialog
from mc.ui.widgets import ChronometerCard, card_title, status_text

SIZE = (200, 60)


class _AppTestCase(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self._tmppath = Path(self.tmpdir)
        self.settings = build_default_settings()
        self.settings["default_save_file"] = str(self._tmppath / "timers.json")
        self.settings["default_export_file"] = str(self._tmppath / "timers.csv")
        self.bank = ChronometerBank(self.settings["chronometer_count"])
        self.app = ChronoApp(self.bank, self.settings)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    async def _confirm_filename(self, pilot, filename=None):
        """Accepts the open filename dialog and waits for the file worker to report back."""
        screen = self.app.screen
        self.assertIsInstance(screen, FilenameDialog)
        if filename is not None:
            screen.query_one("#filename-input", Input).value = filename
        screen.query_one("#filename-confirm", Button).press()
        await pilot.pause()
        await self.app.workers.wait_for_complete()
        await pilot.pause()


# ──────────────────────────────────────────────────────────────────────────
# Layout and card buttons
# ──────────────────────────────────────────────────────────────────────────

class TestCards(_AppTestCase):

    async def test_one_card_per_chronometer(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            cards = self.app.query(ChronometerCard)
            self.assertEqual(len(cards), 15)
            self.assertEqual([c.chrono_id for c in cards], list(range(1, 16)))
            self.assertEqual(self.app.query_one("#label-7", Input).value, "Timer 7")

    async def test_start_button_runs_exclusively(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.query_one("#start-1", Button).press()
            await pilot.pause()
            self.assertEqual(self.bank.running_id(), 1)

            self.app.query_one("#start-2", Button).press()
            await pilot.pause()
            self.assertEqual(self.bank.running_id(), 2)
            self.assertFalse(self.bank.is_running(1))

    async def test_stop_and_reset_buttons(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.query_one("#start-4", Button).press()
            await pilot.pause()
            self.app.query_one("#stop-4", Button).press()
            await pilot.pause()
            self.assertFalse(self.bank.is_running(4))
            self.assertIsNone(self.bank.running_id())

            self.app.query_one("#reset-4", Button).press()
            await pilot.pause()
            self.assertEqual(self.bank.elapsed(4), 0)

    async def test_running_card_is_highlighted(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            card = self.app.query_one("#chrono-5", ChronometerCard)
            self.assertFalse(card.has_class("running"))

            self.app.query_one("#start-5", Button).press()
            await pilot.pause()
            self.app.refresh_displays()
            self.assertTrue(card.has_class("running"))

            self.app.query_one("#stop-5", Button).press()
            await pilot.pause()
            self.app.refresh_displays()
            self.assertFalse(card.has_class("running"))

    async def test_label_applied_on_enter(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            label_input = self.app.query_one("#label-3", Input)
            label_input.value = "Client call"
            label_input.focus()
            await pilot.pause()
            self.assertEqual(self.bank.label(3), "Timer 3")

            await pilot.press("enter")
            await pilot.pause()
            self.assertEqual(self.bank.label(3), "Client call")

    def test_card_title_and_status(self):
        self.assertEqual(card_title(3, False), "Timer 3")
        self.assertIn("●", card_title(3, True))
        self.assertEqual(status_text(True), "Status: Running")
        self.assertEqual(status_text(False), "Status: Stopped")


# ──────────────────────────────────────────────────────────────────────────
# Save / Load / Export
# ──────────────────────────────────────────────────────────────────────────

class TestFiles(_AppTestCase):

    async def test_save_writes_file_and_reports(self):
        self.bank.set_label(1, "Design")
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.action_save()
            await pilot.pause()
            await self._confirm_filename(pilot)

            self.assertIsInstance(self.app.screen, MessageDialog)
            path = Path(self.settings["default_save_file"])
            self.assertTrue(path.exists())
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            self.assertEqual(data["chronometers"][0]["displayLabel"], "Design")

            self.app.screen.query_one("#message-ok", Button).press()
            await pilot.pause()
            self.assertNotIsInstance(self.app.screen, MessageDialog)

    async def test_load_updates_labels(self):
        other = ChronometerBank(15)
        other.set_label(2, "Support")
        save_path = self._tmppath / "other.json"
        other.save(save_path)

        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.action_load()
            await pilot.pause()
            await self._confirm_filename(pilot, str(save_path))

            self.assertIsInstance(self.app.screen, MessageDialog)
            self.assertEqual(self.bank.label(2), "Support")
            self.assertEqual(self.app.query_one("#label-2", Input).value, "Support")

    async def test_malformed_load_leaves_bank_untouched(self):
        bad_path = self._tmppath / "bad.json"
        bad_path.write_text('{"chronometers": [', encoding="utf-8")
        self.bank.set_label(1, "Keep me")

        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.query_one("#start-1", Button).press()
            await pilot.pause()

            self.app.action_load()
            await pilot.pause()
            await self._confirm_filename(pilot, str(bad_path))

            self.assertIsInstance(self.app.screen, MessageDialog)
            self.assertEqual(self.bank.label(1), "Keep me")
            self.assertEqual(self.bank.running_id(), 1)

    async def test_undecodable_load_reports_error(self):
        bad_files = {
            "huge_number.json": '{"chronometers": [{"id": 1, "displayLabel": "X", "elapsedTime": 1'
                                + "0" * 5000 + ', "isRunning": false}]}',
            "deep.json": "[" * 200000,
        }
        self.bank.set_label(1, "Keep me")

        for name, content in bad_files.items():
            with self.subTest(file=name):
                path = self._tmppath / name
                path.write_text(content, encoding="utf-8")
                self.app = ChronoApp(self.bank, self.settings)
                async with self.app.run_test(size=SIZE) as pilot:
                    await pilot.pause()
                    self.app.action_load()
                    await pilot.pause()
                    await self._confirm_filename(pilot, str(path))

                    self.assertIsInstance(self.app.screen, MessageDialog)
                    self.assertTrue(self.app.is_running)
                    self.assertEqual(self.bank.label(1), "Keep me")

    async def test_shortcuts_ignored_while_dialog_open(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            await pilot.press("ctrl+s")
            await pilot.pause()
            self.assertIsInstance(self.app.screen, FilenameDialog)
            depth = len(self.app.screen_stack)

            for key in ("ctrl+s", "ctrl+o", "ctrl+e"):
                await pilot.press(key)
                await pilot.pause()
            self.assertEqual(len(self.app.screen_stack), depth)
            self.assertIsInstance(self.app.screen, FilenameDialog)

    async def test_quit_key_ignored_over_message(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.show_message("Hello")
            await pilot.pause()
            depth = len(self.app.screen_stack)

            await pilot.press("q")
            await pilot.pause()
            self.assertEqual(len(self.app.screen_stack), depth)
            self.assertIsInstance(self.app.screen, MessageDialog)

    async def test_export_writes_csv(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.action_export()
            await pilot.pause()
            await self._confirm_filename(pilot)

            self.assertIsInstance(self.app.screen, MessageDialog)
            with open(self.settings["default_export_file"], encoding="utf-8", newline="") as f:
                lines = f.read().split("\n")
            self.assertEqual(lines[0], "Timer ID,Label,Elapsed Time")
            self.assertEqual(lines[1], "1,Timer 1,00:00:00.000")

    async def test_cancel_does_nothing(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.action_save()
            await pilot.pause()
            self.app.screen.query_one("#filename-cancel", Button).press()
            await pilot.pause()

            self.assertNotIsInstance(self.app.screen, FilenameDialog)
            self.assertFalse(Path(self.settings["default_save_file"]).exists())

    async def test_empty_filename_is_cancel(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.action_save()
            await pilot.pause()
            await self._confirm_filename(pilot, "   ")

            self.assertNotIsInstance(self.app.screen, MessageDialog)
            self.assertFalse(Path(self.settings["default_save_file"]).exists())


# ──────────────────────────────────────────────────────────────────────────
# Quit
# ──────────────────────────────────────────────────────────────────────────

class TestQuit(_AppTestCase):

    async def test_quit_cancel_keeps_running(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.action_request_quit()
            await pilot.pause()
            self.assertIsInstance(self.app.screen, ConfirmDialog)

            with patch.object(ChronoApp, "exit") as exit_mock:
                self.app.screen.query_one("#confirm-no", Button).press()
                await pilot.pause()
                exit_mock.assert_not_called()
            self.assertNotIsInstance(self.app.screen, ConfirmDialog)

    async def test_quit_confirm_exits(self):
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            self.app.action_request_quit()
            await pilot.pause()

            with patch.object(ChronoApp, "exit") as exit_mock:
                self.app.screen.query_one("#confirm-yes", Button).press()
                await pilot.pause()
                exit_mock.assert_called_once()

    async def test_quit_without_confirmation(self):
        self.settings["confirm_quit"] = False
        async with self.app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            with patch.object(ChronoApp, "exit") as exit_mock:
                self.app.action_request_quit()
                await pilot.pause()
                exit_mock.assert_called_once()
            self.assertNotIsInstance(self.app.screen, ConfirmDialog)


if __name__ == "__main__":
    unittest.main()
