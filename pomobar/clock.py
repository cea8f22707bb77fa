from __future__ import annotations

import time


def monotonic_now() -> float:
    return time.monotonic()


def seconds_between(start: float, end: float) -> float:
    return max(0.0, end - start)
