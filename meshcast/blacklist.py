"""Peer blacklists."""

from __future__ import annotations

import abc
import threading
import time
from typing import Callable, Dict, Hashable, Optional, Set


class Blacklist(abc.ABC):
    """A set of peers whose messages are refused."""

    @abc.abstractmethod
    def add(self, peer_id: Hashable) -> bool:
        """Add a peer; return whether it was newly added."""

    @abc.abstractmethod
    def contains(self, peer_id: Hashable) -> bool:
        """Return whether the peer is blacklisted."""

    def __contains__(self, peer_id: object) -> bool:
        return self.contains(peer_id)  # type: ignore[arg-type]


class MapBlacklist(Blacklist):
    """A blacklist that keeps every peer forever."""

    def __init__(self) -> None:
        self._peers: Set[Hashable] = set()

    def add(self, peer_id: Hashable) -> bool:
        self._peers.add(peer_id)
        return True

    def contains(self, peer_id: Hashable) -> bool:
        return peer_id in self._peers


class TimeCachedBlacklist(Blacklist):
    """A blacklist whose entries expire ``expiry`` seconds after being added."""

    def __init__(self, expiry: float, clock: Optional[Callable[[], float]] = None) -> None:
        self.expiry = expiry
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._entries: Dict[str, float] = {}

    def _has(self, key: str) -> bool:
        deadline = self._entries.get(key)
        if deadline is None:
            return False
        if self._clock() >= deadline:
            del self._entries[key]
            return False
        return True

    def add(self, peer_id: Hashable) -> bool:
        key = str(peer_id)
        with self._lock:
            if self._has(key):
                return False
            self._entries[key] = self._clock() + self.expiry
            return True

    def contains(self, peer_id: Hashable) -> bool:
        with self._lock:
            return self._has(str(peer_id))