from __future__ import annotations

import logging
import os
import queue
import stat
import threading
from collections import deque
from enum import Enum

from .timer import PomodoroTimer


class Command(str, Enum):
    START = "start"
    PAUSE = "pause"
    TOGGLE = "toggle"
    STOP = "stop"


def parse_command(text: str) -> Command | None:
    word = str(text or "").strip().lower()
    try:
        return Command(word)
    except ValueError:
        return None


def apply_command(timer: PomodoroTimer, command: Command, now: float | None = None) -> None:
    if command is Command.START:
        timer.start(now)
    elif command is Command.TOGGLE:
        timer.toggle(now)
    else:
        # pause and stop both commit the running segment
        timer.pause(now)


class CommandChannel:
    """Non-blocking reader for the command FIFO.

    Normally the path is a named pipe. The reader keeps its own write end open
    so the pipe never reports EOF and writers never block on a missing
    reader. If the path is a plain file instead, its first line is the
    command and the file is removed after reading.
    """

    def __init__(self, path: str, read_size: int = 4096) -> None:
        self._path = path
        self._read_size = read_size
        self._fd: int | None = None
        self._keepalive_fd: int | None = None
        self._buffer = b""
        self._pending: deque[str] = deque()

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_fifo(self) -> bool:
        return self._fd is not None

    def open(self) -> None:
        if not os.path.exists(self._path):
            os.mkfifo(self._path, 0o600)
            logging.info("command fifo created: %s", self._path)
        if not stat.S_ISFIFO(os.stat(self._path).st_mode):
            logging.info("command channel is a plain file: %s", self._path)
            return
        self._open_fifo()

    def _open_fifo(self) -> None:
        self._fd = os.open(self._path, os.O_RDONLY | os.O_NONBLOCK)
        self._keepalive_fd = os.open(self._path, os.O_WRONLY | os.O_NONBLOCK)

    def close(self) -> None:
        for fd in (self._fd, self._keepalive_fd):
            if fd is not None:
                os.close(fd)
        self._fd = None
        self._keepalive_fd = None

    def read_command(self) -> str:
        if self._pending:
            return self._pending.popleft()
        if self._fd is None:
            return self._read_file()
        try:
            chunk = os.read(self._fd, self._read_size)
        except BlockingIOError:
            return ""
        if not chunk:
            return ""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split(b"\n")
        for line in lines:
            word = line.decode("utf-8", errors="replace").strip()
            if word:
                self._pending.append(word)
        return self._pending.popleft() if self._pending else ""

    def _read_file(self) -> str:
        try:
            mode = os.stat(self._path).st_mode
        except FileNotFoundError:
            return ""
        if stat.S_ISFIFO(mode):
            # the plain file was replaced by a pipe; a blocking open would hang
            logging.info("command channel switched to fifo: %s", self._path)
            self._open_fifo()
            return self.read_command()
        try:
            with open(self._path, "r", encoding="utf-8", errors="replace") as f:
                line = f.readline()
        except FileNotFoundError:
            return ""
        os.remove(self._path)
        return line.strip()


class CommandListener(threading.Thread):
    def __init__(
        self,
        channel: CommandChannel,
        commands: "queue.Queue[Command]",
        poll_interval: float = 0.2,
    ) -> None:
        super().__init__(name="pomobar-commands", daemon=True)
        self._channel = channel
        self._commands = commands
        self._poll_interval = poll_interval
        self._stopped = threading.Event()

    def stop(self) -> None:
        self._stopped.set()

    def poll_once(self) -> Command | None:
        word = self._channel.read_command()
        if not word:
            return None
        command = parse_command(word)
        if command is None:
            logging.warning("invalid command: %s", word)
            return None
        logging.info("command received: %s", command.value)
        self._commands.put(command)
        return command

    def run(self) -> None:
        logging.info("command listener started: %s", self._channel.path)
        while not self._stopped.is_set():
            try:
                command = self.poll_once()
            except OSError as exc:
                logging.exception("command read failed: %s", exc)
                command = None
            if command is None:
                self._stopped.wait(self._poll_interval)
        logging.info("command listener stopped")
