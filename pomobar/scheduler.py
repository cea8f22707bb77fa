from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Dict

from PySide6.QtCore import QObject, QTimer, Signal

from .commands import Command, apply_command
from .persistence import to_record
from .status import StatusPublisher
from .timer import PomodoroTimer


TICK_MS = 1000


class PomodoroScheduler(QObject):
    """Applies queued commands and publishes status once per tick.

    The timer is only touched while holding ``lock``; printing and
    notifications happen after it is released.
    """

    stopped = Signal()

    def __init__(
        self,
        timer: PomodoroTimer,
        commands: "queue.Queue[Command]",
        publisher: StatusPublisher,
    ) -> None:
        super().__init__()
        self.lock = threading.Lock()
        self._timer = timer
        self._commands = commands
        self._publisher = publisher
        self._tick_timer: QTimer | None = None
        self._running = True
        self._stop_requested = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(TICK_MS)
        self._tick_timer.timeout.connect(self.tick)
        self._tick_timer.start()
        logging.info("scheduler started: tick=%sms", TICK_MS)

    def request_stop(self) -> None:
        self._stop_requested = True

    def _next_command(self) -> Command | None:
        if self._stop_requested:
            return Command.STOP
        try:
            return self._commands.get_nowait()
        except queue.Empty:
            return None

    def tick(self) -> bool:
        if not self._running:
            return False
        command = self._next_command()
        if command is not None:
            with self.lock:
                apply_command(self._timer, command)
            logging.info("command applied: %s", command.value)
            if command is Command.STOP:
                self._finish()
                return False
        with self.lock:
            status = self._timer.current_status()
        self._publisher.publish(status)
        if self._publisher.closed:
            logging.info("status reader gone, stopping")
            self.request_stop()
        return True

    def publish_startup(self) -> None:
        with self.lock:
            status = None if self._timer.is_fresh else self._timer.current_status()
        if status is None:
            self._publisher.publish_blank()
        else:
            self._publisher.publish(status)

    def snapshot(self, now: float | None = None) -> Dict[str, Any]:
        with self.lock:
            return to_record(self._timer, now)

    def _finish(self) -> None:
        self._running = False
        if self._tick_timer is not None:
            self._tick_timer.stop()
        logging.info("scheduler stopped")
        self.stopped.emit()
