from __future__ import annotations

import logging
import subprocess
import threading
from typing import Dict, Tuple


FOCUS = "Focus"
SHORT_BREAK = "ShortBreak"
LONG_BREAK = "LongBreak"
ERROR = "Error"

NOTIFICATIONS: Dict[str, Tuple[str, str]] = {
    FOCUS: ("Time for a Pomodoro session!", "tomato"),
    SHORT_BREAK: ("Take a short break.", "coffee"),
    LONG_BREAK: ("Take a long break.", "rest"),
    ERROR: ("An error occurred.", "dialog-error"),
}


class DunstNotifier:
    def __init__(
        self,
        sound_path: str | None = None,
        command: str = "dunstify",
        player: str = "paplay",
    ) -> None:
        self.sound_path = sound_path
        self.command = command
        self.player = player

    def build_command(self, event: str) -> list[str]:
        message, icon = NOTIFICATIONS.get(event, NOTIFICATIONS[ERROR])
        return [self.command, "-i", icon, message]

    def send(self, event: str, block: bool = False) -> None:
        if block:
            self._deliver(event)
            return
        threading.Thread(target=self._deliver, args=(event,), daemon=True).start()

    def _deliver(self, event: str) -> None:
        try:
            result = subprocess.run(
                self.build_command(event),
                capture_output=True,
                text=True,
                check=False,
            )
            if result.returncode != 0:
                logging.warning("notification failed: %s", (result.stderr or "").strip())
        except Exception as exc:
            logging.exception("notification send failed: %s", exc)
        if self.sound_path:
            self._play_sound()

    def _play_sound(self) -> None:
        try:
            subprocess.Popen(
                [self.player, str(self.sound_path)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except Exception as exc:
            logging.exception("sound playback failed: %s", exc)
