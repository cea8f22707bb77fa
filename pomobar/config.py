from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, replace
from typing import Mapping, Sequence


DEFAULT_FIFO_PATH = "pomodoro_fifo"
DEFAULT_STATE_PATH = "pomodoro_state.json"
DEFAULT_LOG_PATH = "pomobar.log"


@dataclass
class AppConfig:
    fifo_path: str = DEFAULT_FIFO_PATH
    state_path: str = DEFAULT_STATE_PATH
    log_path: str = DEFAULT_LOG_PATH
    log_level: str = "INFO"
    sound_path: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "AppConfig":
        if env is None:
            env = os.environ
        return cls(
            fifo_path=env.get("POMOBAR_FIFO", "").strip() or DEFAULT_FIFO_PATH,
            state_path=env.get("POMOBAR_STATE", "").strip() or DEFAULT_STATE_PATH,
            log_path=env.get("POMOBAR_LOG", "").strip() or DEFAULT_LOG_PATH,
            log_level=env.get("POMOBAR_LOG_LEVEL", "").strip().upper() or "INFO",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pomobar",
        description="Pomodoro timer for status bars, controlled through a named pipe.",
    )
    parser.add_argument("sound_file", nargs="?", help="sound played with every notification")
    parser.add_argument("--fifo", help="command pipe path (env POMOBAR_FIFO)")
    parser.add_argument("--state", help="state file path (env POMOBAR_STATE)")
    parser.add_argument("--log", help="log file path (env POMOBAR_LOG)")
    return parser


def load_config(
    argv: Sequence[str] | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.sound_file and not os.path.isfile(args.sound_file):
        parser.error(f"sound file not found: {args.sound_file}")
    config = AppConfig.from_env(env)
    return replace(
        config,
        fifo_path=args.fifo or config.fifo_path,
        state_path=args.state or config.state_path,
        log_path=args.log or config.log_path,
        sound_path=args.sound_file,
    )
