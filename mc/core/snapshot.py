"""Save-file model: what a bank looks like on disk.

The JSON layout keeps the field names of the original save files::

    {
      "chronometers": [
        {"id": 1, "displayLabel": "Timer 1", "elapsedTime": 1500000000, "isRunning": false}
      ],
      "saveTime": "2026-10-19T12:00:00.000000-04:00"
    }

``elapsedTime`` is integer nanoseconds, already resolved at save time.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from mc.core.errors import ParseError


# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()


@dataclass(frozen=True)
class SaveRecord:
    id: int
    label: str
    elapsed: int
    is_running: bool

    def to_dict(self):
        return {
            "id": self.id,
            "displayLabel": self.label,
            "elapsedTime": self.elapsed,
            "isRunning": self.is_running,
        }

    @staticmethod
    def from_dict(raw, index=0):
        where = f"chronometers[{index}]"
        if not isinstance(raw, dict):
            raise ParseError(f"{where} must be an object, got {type(raw).__name__}")

        missing = [k for k in ("id", "displayLabel", "elapsedTime", "isRunning") if k not in raw]
        if missing:
            raise ParseError(f"{where} is missing {', '.join(missing)}")

        chrono_id = raw["id"]
        label = raw["displayLabel"]
        elapsed = raw["elapsedTime"]
        is_running = raw["isRunning"]

        # bool is an int subclass, so it has to be ruled out explicitly
        if not isinstance(chrono_id, int) or isinstance(chrono_id, bool):
            raise ParseError(f"{where}.id must be an integer, got {chrono_id!r}")
        if not isinstance(label, str):
            raise ParseError(f"{where}.displayLabel must be a string, got {label!r}")
        if not isinstance(elapsed, int) or isinstance(elapsed, bool):
            raise ParseError(f"{where}.elapsedTime must be integer nanoseconds, got {elapsed!r}")
        if elapsed < 0:
            raise ParseError(f"{where}.elapsedTime must not be negative, got {elapsed}")
        if not isinstance(is_running, bool):
            raise ParseError(f"{where}.isRunning must be a boolean, got {is_running!r}")

        return SaveRecord(id=chrono_id, label=label, elapsed=elapsed, is_running=is_running)


@dataclass(frozen=True)
class SaveFile:
    records: tuple = field(default_factory=tuple)
    save_time: str | None = None

    def to_dict(self):
        return {
            "chronometers": [r.to_dict() for r in self.records],
            "saveTime": self.save_time,
        }

    # Parses the save time when it is there and readable. Unreadable stamps are not an error, nothing depends
    # on them.
    @property
    def saved_at(self):
        if not self.save_time:
            return None
        try:
            return datetime.fromisoformat(self.save_time)
        except ValueError:
            return None

    @staticmethod
    def from_dict(raw):
        if not isinstance(raw, dict):
            raise ParseError(f"Save file must be a JSON object, got {type(raw).__name__}")
        if "chronometers" not in raw:
            raise ParseError("Save file has no 'chronometers' list")

        entries = raw["chronometers"]
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            raise ParseError(f"'chronometers' must be a list, got {type(entries).__name__}")

        save_time = raw.get("saveTime")
        if save_time is not None and not isinstance(save_time, str):
            raise ParseError(f"'saveTime' must be a string, got {save_time!r}")

        records = tuple(SaveRecord.from_dict(entry, i) for i, entry in enumerate(entries))
        return SaveFile(records=records, save_time=save_time)


def encode_save_file(save_file: SaveFile) -> str:
    return json.dumps(save_file.to_dict(), indent=2)


# Accepts str or raw bytes straight off disk.
def decode_save_file(text) -> SaveFile:
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Save file is not UTF-8 text: {e}") from e
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Save file is not valid JSON: {e}") from e
    # Oversized integer literals and very deep nesting fail outside the JSON decoder proper
    except (ValueError, RecursionError) as e:
        raise ParseError(f"Save file could not be decoded: {e}") from e
    return SaveFile.from_dict(raw)
