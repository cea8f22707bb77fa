from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .clock import monotonic_now, seconds_between


FOCUS_DURATION = 25 * 60
SHORT_BREAK_DURATION = 5 * 60
LONG_BREAK_DURATION = 30 * 60
CYCLES_PER_LONG_BREAK = 4


class Phase(str, Enum):
    FOCUS = "Focus"
    SHORT_BREAK = "ShortBreak"
    LONG_BREAK = "LongBreak"

    @property
    def duration(self) -> int:
        if self is Phase.SHORT_BREAK:
            return SHORT_BREAK_DURATION
        if self is Phase.LONG_BREAK:
            return LONG_BREAK_DURATION
        return FOCUS_DURATION


def format_clock(seconds: int) -> str:
    minutes, sec = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{sec:02d}"


@dataclass(frozen=True)
class TimerStatus:
    phase: Phase
    elapsed_seconds: int
    remaining_seconds: int
    is_running: bool
    cycles_completed: int
    transition: Phase | None = None  # phase entered during this status read

    def to_dict(self) -> dict[str, str]:
        return {
            "elapsed_time": format_clock(self.elapsed_seconds),
            "text": format_clock(self.remaining_seconds),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


class PomodoroTimer:
    """Focus/break cycle driven by monotonic instants.

    Only whole seconds are shown and compared against the phase duration.
    Sub-second remainders stay in ``elapsed_time`` so repeated pause/start
    does not drift.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or monotonic_now
        self.phase = Phase.FOCUS
        self.start_instant: float | None = None
        self.end_instant: float | None = None
        self.is_running = False
        self.elapsed_time = 0.0
        self.total_time = FOCUS_DURATION
        self.cycles_completed = 0

    def now(self) -> float:
        return self._clock()

    @property
    def is_fresh(self) -> bool:
        return (
            self.phase is Phase.FOCUS
            and self.cycles_completed == 0
            and not self.is_running
            and self.start_instant is None
            and self.elapsed_time == 0
        )

    def start(self, now: float | None = None) -> None:
        if self.is_running:
            return
        if now is None:
            now = self._clock()
        if self.start_instant is not None and self.end_instant is not None:
            self.end_instant = now + seconds_between(self.start_instant, self.end_instant)
        else:
            self.end_instant = now + self.total_time
        self.start_instant = now
        self.is_running = True

    def pause(self, now: float | None = None) -> None:
        if not self.is_running:
            return
        if now is None:
            now = self._clock()
        if self.start_instant is not None:
            self.elapsed_time += seconds_between(self.start_instant, now)
        self.is_running = False

    def toggle(self, now: float | None = None) -> None:
        if self.is_running:
            self.pause(now)
        else:
            self.start(now)

    def setup_timer(self, duration: int) -> None:
        self.total_time = duration
        self.elapsed_time = 0.0
        self.is_running = False
        self.start_instant = None
        self.end_instant = None

    def live_elapsed(self, now: float | None = None) -> float:
        if not self.is_running or self.start_instant is None:
            return self.elapsed_time
        if now is None:
            now = self._clock()
        return self.elapsed_time + seconds_between(self.start_instant, now)

    def current_status(self, now: float | None = None) -> TimerStatus:
        elapsed = int(self.live_elapsed(now))
        if elapsed > self.total_time:
            entered = self._advance_phase()
            return TimerStatus(
                phase=entered,
                elapsed_seconds=0,
                remaining_seconds=self.total_time,
                is_running=self.is_running,
                cycles_completed=self.cycles_completed,
                transition=entered,
            )
        return TimerStatus(
            phase=self.phase,
            elapsed_seconds=elapsed,
            remaining_seconds=self.total_time - elapsed,
            is_running=self.is_running,
            cycles_completed=self.cycles_completed,
        )

    def _next_phase(self) -> Phase:
        if self.phase is not Phase.FOCUS:
            return Phase.FOCUS
        self.cycles_completed += 1
        # Equality, not >=: a counter pushed past the threshold never resets.
        if self.cycles_completed == CYCLES_PER_LONG_BREAK:
            self.cycles_completed = 0
            return Phase.LONG_BREAK
        return Phase.SHORT_BREAK

    def _advance_phase(self) -> Phase:
        finished = self.phase
        self.phase = self._next_phase()
        self.setup_timer(self.phase.duration)
        logging.info(
            "pomodoro switch: %s -> %s (cycles=%s)",
            finished.value,
            self.phase.value,
            self.cycles_completed,
        )
        return self.phase
