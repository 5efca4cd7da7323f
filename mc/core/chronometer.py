import time
from mc.common.logger import log

# Tracks the elapsed time of one stopwatch. Readings come from a monotonic nanosecond clock so a wall-clock
# change can never make a timer jump.
#
# While running, elapsed is simply `clock() - running_since`. Starting folds whatever was already accumulated
# into running_since, so no per-tick bookkeeping is needed.
class Chronometer:

    def __init__(self, chrono_id: int, label: str | None = None, clock=time.monotonic_ns):
        self._id = chrono_id
        self.label = label if label is not None else default_label(chrono_id)
        self.accumulated = 0
        self.running_since = None
        self.is_running = False
        self._clock = clock

    @property
    def id(self) -> int:
        return self._id

    # Current elapsed nanoseconds, running or not. Pure read.
    @property
    def elapsed(self) -> int:
        if self.is_running:
            return self._clock() - self.running_since
        return self.accumulated

    # Start and stop are both no-ops when already in the requested state.
    def start(self):
        if not self.is_running:
            self.running_since = self._clock() - self.accumulated
            self.is_running = True
            log.debug(f"Started chronometer {self._id} from {self.accumulated} ns")
    def stop(self):
        if self.is_running:
            self.accumulated = self._clock() - self.running_since
            self.is_running = False
            log.debug(f"Stopped chronometer {self._id} at {self.accumulated} ns")

    # Zeroes the timer. A running timer keeps running, it just counts from zero again.
    def reset(self):
        self.accumulated = 0
        if self.is_running:
            self.running_since = self._clock()
        log.debug(f"Reset chronometer {self._id} (running={self.is_running})")

    def set_label(self, text: str):
        self.label = text

    # Overwrites label and banked time from a save record. Only meant for stopped chronometers.
    def restore(self, label: str, elapsed: int):
        self.label = label
        self.accumulated = elapsed

    def __repr__(self):
        return (f"Chronometer(id={self._id}, label={self.label!r}, elapsed={self.elapsed}, "
                f"running={self.is_running})")


def default_label(chrono_id: int) -> str:
    return f"Timer {chrono_id}"
