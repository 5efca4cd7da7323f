"""The chronometer bank: a fixed set of stopwatches where only one runs at a time.

Every operation holds one lock for the whole bank. File operations take their
snapshot under the lock and do the actual disk I/O after releasing it, so a
slow disk never holds up start/stop from the UI.

Ids are 1-based. Any id-addressed call with an id the bank doesn't hold raises
UnknownChronometerError before anything is touched. ``restore()`` is the one
exception and quietly skips records for unknown ids.
"""

import csv
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from mc.common.logger import log
from mc.core.chronometer import Chronometer
from mc.core.duration import format_duration
from mc.core.errors import UnknownChronometerError
from mc.core.snapshot import SaveFile, SaveRecord, decode_save_file, encode_save_file, now_iso

DEFAULT_COUNT = 15
EXPORT_HEADER = ("Timer ID", "Label", "Elapsed Time")


# Read-only copy of one chronometer at a single instant, handed to the UI on every refresh tick.
@dataclass(frozen=True)
class ChronometerView:
    id: int
    label: str
    elapsed: int
    is_running: bool

    @property
    def formatted_elapsed(self):
        return format_duration(self.elapsed)


class ChronometerBank:

    def __init__(self, count: int = DEFAULT_COUNT, clock=time.monotonic_ns):
        if count < 1:
            raise ValueError(f"A bank needs at least one chronometer, got {count}")
        self._lock = threading.Lock()
        self._chronometers = [Chronometer(i + 1, clock=clock) for i in range(count)]
        self._by_id = {c.id: c for c in self._chronometers}
        log.debug(f"Initialized chronometer bank with {count} chronometers")

    def __len__(self):
        return len(self._chronometers)

    @property
    def ids(self):
        return [c.id for c in self._chronometers]

    def _get(self, chrono_id) -> Chronometer:
        try:
            return self._by_id[chrono_id]
        except (KeyError, TypeError):
            raise UnknownChronometerError(chrono_id) from None

    #region === Timer control ===

    # Stops everything, then starts the requested chronometer. The id is checked first so a bad id leaves
    # whatever was running alone.
    def start_exclusive(self, chrono_id: int):
        with self._lock:
            target = self._get(chrono_id)
            for c in self._chronometers:
                c.stop()
            target.start()
        log.info(f"Started chronometer {chrono_id} exclusively")

    def stop(self, chrono_id: int):
        with self._lock:
            self._get(chrono_id).stop()

    def reset(self, chrono_id: int):
        with self._lock:
            self._get(chrono_id).reset()

    def stop_all(self):
        with self._lock:
            for c in self._chronometers:
                c.stop()

    def set_label(self, chrono_id: int, text: str):
        with self._lock:
            self._get(chrono_id).set_label(text)
        log.debug(f"Relabelled chronometer {chrono_id} to '{text}'")

    #endregion === Timer control ===

    #region === Reads ===

    def views(self):
        with self._lock:
            return [self._view(c) for c in self._chronometers]

    def view(self, chrono_id: int) -> ChronometerView:
        with self._lock:
            return self._view(self._get(chrono_id))

    def label(self, chrono_id: int) -> str:
        with self._lock:
            return self._get(chrono_id).label

    def elapsed(self, chrono_id: int) -> int:
        with self._lock:
            return self._get(chrono_id).elapsed

    def formatted_elapsed(self, chrono_id: int) -> str:
        return format_duration(self.elapsed(chrono_id))

    def is_running(self, chrono_id: int) -> bool:
        with self._lock:
            return self._get(chrono_id).is_running

    # Id of the running chronometer, or None when everything is stopped.
    def running_id(self):
        with self._lock:
            return next((c.id for c in self._chronometers if c.is_running), None)

    @staticmethod
    def _view(c):
        return ChronometerView(id=c.id, label=c.label, elapsed=c.elapsed, is_running=c.is_running)

    #endregion === Reads ===

    #region === Persistence ===

    # Resolves every chronometer's elapsed time right now. Running timers keep running.
    def snapshot(self) -> SaveFile:
        with self._lock:
            records = tuple(
                SaveRecord(id=c.id, label=c.label, elapsed=c.elapsed, is_running=c.is_running)
                for c in self._chronometers
            )
        return SaveFile(records=records, save_time=now_iso())

    def save(self, path):
        path = Path(path)
        payload = encode_save_file(self.snapshot())
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)
        log.info(f"Saved {len(self._chronometers)} chronometers to '{path}'")

    # Loads a save file over the bank. The file is read and fully parsed before anything changes, so a
    # ParseError or OSError leaves the bank exactly as it was.
    def restore(self, path):
        path = Path(path)
        save_file = decode_save_file(path.read_bytes())
        self.apply(save_file)
        log.info(f"Restored chronometers from '{path}' (saved {save_file.save_time or 'at an unknown time'})")

    # Applies an already parsed save file. Everything stops first, then records are matched by id. A record
    # flagged running restarts from its saved elapsed time, anchored to now. If several are flagged only the
    # last one in the file restarts, since the bank never runs two at once.
    def apply(self, save_file: SaveFile):
        latest = {r.id: r for r in save_file.records}
        ignored = sorted(rid for rid in latest if rid not in self._by_id)
        running = [r.id for r in save_file.records
                   if r.is_running and r.id in self._by_id and latest[r.id] is r]

        with self._lock:
            for c in self._chronometers:
                c.stop()
            for c in self._chronometers:
                record = latest.get(c.id)
                if record is not None:
                    c.restore(record.label, record.elapsed)
            if running:
                self._by_id[running[-1]].start()

        if ignored:
            log.warning(f"Ignored save records for unknown chronometer ids: {ignored}")
        if len(running) > 1:
            log.warning(f"Save file had {len(running)} running chronometers {running}, only resumed {running[-1]}")

    def export_table(self, path):
        path = Path(path)
        with self._lock:
            rows = [(str(c.id), c.label, format_duration(c.elapsed)) for c in self._chronometers]
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(EXPORT_HEADER)
            writer.writerows(rows)
        log.info(f"Exported {len(rows)} chronometers to '{path}'")

    #endregion === Persistence ===
