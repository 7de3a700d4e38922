"""
ids.py
──────
Backend identifier generation.

Identifiers look like "b-<millis>-<counter>". The counter alone guarantees
uniqueness inside one process; the millisecond part only makes ids readable
and roughly ordered across restarts.
"""

import itertools
import threading
import time
from typing import Callable, Optional


class BackendIdGenerator:
    def __init__(self, clock: Optional[Callable[[], float]] = None, start: int = 0):
        self._clock = clock or time.time
        self._counter = itertools.count(start)
        self._last_ms = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            # never let the timestamp part run backwards within this process
            now_ms = int(self._clock() * 1000)
            self._last_ms = max(self._last_ms, now_ms)
            return f"b-{self._last_ms}-{next(self._counter)}"
