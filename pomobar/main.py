from __future__ import annotations

import logging
import os
import queue
import signal
import sys
from typing import Sequence

from PySide6.QtCore import QCoreApplication

from .commands import Command, CommandChannel, CommandListener
from .config import AppConfig, load_config
from .notifier import ERROR, DunstNotifier
from .persistence import StateStore
from .scheduler import PomodoroScheduler
from .status import StatusPublisher


def setup_logging(path: str, level: str = "INFO") -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(path, encoding="utf-8"),
            # stdout carries the status lines
            logging.StreamHandler(sys.stderr),
        ],
    )


def run(config: AppConfig) -> int:
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    store = StateStore(config.state_path)
    timer = store.load()

    channel = CommandChannel(config.fifo_path)
    try:
        channel.open()
    except OSError as exc:
        logging.exception("command channel setup failed: %s", exc)
        return 1

    commands: "queue.Queue[Command]" = queue.Queue()
    notifier = DunstNotifier(config.sound_path)
    scheduler = PomodoroScheduler(timer, commands, StatusPublisher(notifier))
    listener = CommandListener(channel, commands)
    scheduler.stopped.connect(app.quit)

    def handle_signal(signum, _frame) -> None:
        logging.info("signal received: %s", signum)
        scheduler.request_stop()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    listener.start()
    scheduler.publish_startup()
    scheduler.start()
    app.exec()

    listener.stop()
    listener.join(timeout=1.0)
    channel.close()
    if not store.write(scheduler.snapshot()):
        notifier.send(ERROR, block=True)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    config = load_config(argv)
    setup_logging(config.log_path, config.log_level)
    logging.info("pomobar start: fifo=%s state=%s", config.fifo_path, config.state_path)
    code = run(config)
    logging.info("pomobar exit: %s", code)
    return code


if __name__ == "__main__":
    sys.exit(main())
