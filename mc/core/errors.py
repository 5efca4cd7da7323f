"""Exceptions raised by the chronometer engine.

File-system failures are not wrapped: callers get the plain ``OSError``.
"""


class MetroChronoError(Exception):
    """Base class for all engine errors."""


class ParseError(MetroChronoError, ValueError):
    """Save-file content or duration text could not be understood."""


class UnknownChronometerError(MetroChronoError, KeyError):
    """A chronometer id that the bank does not hold."""

    def __init__(self, chrono_id):
        super().__init__(chrono_id)
        self.chrono_id = chrono_id

    def __str__(self):
        return f"No chronometer with id {self.chrono_id!r}"
