from __future__ import annotations

import json
import logging
import sys
from typing import Protocol, TextIO

from .timer import TimerStatus


class Notifier(Protocol):
    def send(self, event: str, block: bool = False) -> None:
        ...


class StatusPublisher:
    """Writes one JSON line per status for the status bar and notifies on phase switches.

    Once the reader of the stream goes away the publisher marks itself
    ``closed`` and drops further lines.
    """

    def __init__(self, notifier: Notifier, stream: TextIO | None = None) -> None:
        self._notifier = notifier
        self._stream = stream
        self.closed = False

    def _write(self, line: str) -> None:
        if self.closed:
            return
        stream = self._stream or sys.stdout
        try:
            stream.write(line + "\n")
            stream.flush()
        except BrokenPipeError as exc:
            logging.warning("status output closed: %s", exc)
            self.closed = True

    def publish(self, status: TimerStatus) -> str:
        line = status.to_json()
        self._write(line)
        if status.transition is not None:
            logging.info("pomodoro notify: %s", status.transition.value)
            self._notifier.send(status.transition.value)
        return line

    def publish_blank(self) -> str:
        line = json.dumps({"text": ""})
        self._write(line)
        return line
