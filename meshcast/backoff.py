"""Per-peer exponential backoff for reconnection attempts."""

from __future__ import annotations

import asyncio
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional

MIN_BACKOFF_DELAY = 0.1
MAX_BACKOFF_DELAY = 10.0
TIME_TO_LIVE = 600.0
BACKOFF_CLEANUP_INTERVAL = 60.0
BACKOFF_MULTIPLIER = 2
MAX_BACKOFF_JITTER_COFF = 100  # milliseconds
MAX_BACKOFF_ATTEMPTS = 4


class BackoffAttemptsExceeded(Exception):
    """Raised when a peer has used up all of its backoff attempts."""

    def __init__(self, peer_id: Hashable) -> None:
        super().__init__(f"peer {peer_id} has reached its maximum backoff attempts")
        self.peer_id = peer_id


@dataclass
class _History:
    duration: float = 0.0
    last_tried: float = 0.0
    attempts: int = 0


class Backoff:
    """Tracks how long to wait before the next connection attempt to each peer.

    Durations are in seconds. ``clock`` returns the current time in seconds.
    """

    def __init__(
        self,
        size_threshold: int,
        cleanup_interval: float = BACKOFF_CLEANUP_INTERVAL,
        max_attempts: int = MAX_BACKOFF_ATTEMPTS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.size_threshold = size_threshold
        self.cleanup_interval = cleanup_interval
        self.max_attempts = max_attempts
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._info: Dict[Hashable, _History] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._info)

    def __contains__(self, peer_id: object) -> bool:
        with self._lock:
            return peer_id in self._info

    def update_and_get(self, peer_id: Hashable) -> float:
        """Record an attempt for ``peer_id`` and return the delay to apply."""
        with self._lock:
            now = self._clock()
            history = self._info.get(peer_id)
            if history is None or now - history.last_tried > TIME_TO_LIVE:
                # first request goes immediately
                history = _History()
            elif history.attempts >= self.max_attempts:
                raise BackoffAttemptsExceeded(peer_id)
            elif history.duration < MIN_BACKOFF_DELAY:
                history.duration = MIN_BACKOFF_DELAY
            elif history.duration < MAX_BACKOFF_DELAY:
                jitter = random.randrange(MAX_BACKOFF_JITTER_COFF) / 1000
                history.duration = BACKOFF_MULTIPLIER * history.duration + jitter
                if history.duration > MAX_BACKOFF_DELAY or history.duration < 0:
                    history.duration = MAX_BACKOFF_DELAY

            history.attempts += 1
            history.last_tried = now
            self._info[peer_id] = history
            return history.duration

    def cleanup(self) -> None:
        """Forget peers whose last attempt is older than the time to live."""
        with self._lock:
            now = self._clock()
            expired = [
                pid for pid, h in self._info.items() if now - h.last_tried > TIME_TO_LIVE
            ]
            for pid in expired:
                del self._info[pid]

    async def cleanup_loop(self) -> None:
        """Run :meth:`cleanup` every ``cleanup_interval`` until cancelled."""
        while True:
            await asyncio.sleep(self.cleanup_interval)
            self.cleanup()