from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict

from .clock import monotonic_now, seconds_between
from .timer import (
    FOCUS_DURATION,
    LONG_BREAK_DURATION,
    SHORT_BREAK_DURATION,
    Phase,
    PomodoroTimer,
)


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0:
        return None
    return float(value)


def _seconds(value: Any) -> int | None:
    number = _number(value)
    return None if number is None else int(number)


def _phase_from(value: Any, total_time: int) -> Phase:
    try:
        return Phase(value)
    except ValueError:
        pass
    if total_time == SHORT_BREAK_DURATION:
        return Phase.SHORT_BREAK
    if total_time == LONG_BREAK_DURATION:
        return Phase.LONG_BREAK
    return Phase.FOCUS


def to_record(timer: PomodoroTimer, now: float | None = None) -> Dict[str, Any]:
    if now is None:
        now = timer.now()
    start_time = None
    end_time = None
    if timer.start_instant is not None:
        start_time = int(seconds_between(timer.start_instant, now))
    if timer.end_instant is not None:
        end_time = int(seconds_between(now, timer.end_instant))
    return {
        "phase": timer.phase.value,
        "start_time": start_time,
        "end_time": end_time,
        "total_time": int(timer.total_time),
        "is_running": timer.is_running,
        "elapsed_time": round(timer.elapsed_time, 3),
        "cycles_completed": int(timer.cycles_completed),
    }


def from_record(
    record: Any,
    now: float | None = None,
    clock: Callable[[], float] | None = None,
) -> PomodoroTimer:
    timer = PomodoroTimer(clock)
    if not isinstance(record, dict):
        return timer
    if now is None:
        now = timer.now()

    start_time = _seconds(record.get("start_time"))
    end_time = _seconds(record.get("end_time"))
    total_time = _seconds(record.get("total_time"))
    elapsed_time = _number(record.get("elapsed_time"))
    cycles = _seconds(record.get("cycles_completed"))
    if cycles is None:
        cycles = _seconds(record.get("pomodoros_completed"))

    timer.total_time = total_time if total_time else FOCUS_DURATION
    timer.phase = _phase_from(record.get("phase"), timer.total_time)
    timer.start_instant = now - start_time if start_time is not None else None
    timer.end_instant = now + end_time if end_time is not None else None
    timer.elapsed_time = float(elapsed_time or 0)
    timer.cycles_completed = cycles or 0
    timer.is_running = record.get("is_running") is True and timer.start_instant is not None
    return timer


class StateStore:
    def __init__(self, path: str, clock: Callable[[], float] | None = None) -> None:
        self._path = path
        self._clock = clock or monotonic_now

    @property
    def path(self) -> str:
        return self._path

    def load(self, now: float | None = None) -> PomodoroTimer:
        record: Dict[str, Any] = {}
        try:
            if os.path.exists(self._path):
                with open(self._path, "r", encoding="utf-8") as f:
                    record = json.load(f)
                logging.info("pomodoro state loaded: %s", self._path)
            else:
                logging.info("pomodoro state missing, starting fresh: %s", self._path)
        except Exception as exc:
            logging.exception("pomodoro state load failed: %s", exc)
            record = {}
        return from_record(record, now=now, clock=self._clock)

    def write(self, record: Dict[str, Any]) -> bool:
        try:
            directory = os.path.dirname(self._path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(record, f, ensure_ascii=False, indent=2)
        except Exception as exc:
            logging.exception("pomodoro state save failed: %s", exc)
            return False
        logging.info("pomodoro state saved: %s", self._path)
        return True

    def save(self, timer: PomodoroTimer, now: float | None = None) -> bool:
        return self.write(to_record(timer, now))
