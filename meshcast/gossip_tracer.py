"""Tracking of IWANT promises made by peers after IHAVE advertisements."""

from __future__ import annotations

import random
import threading
import time
from typing import Callable, Dict, FrozenSet, Hashable, Optional, Sequence, Set

from meshcast.rpc import Message

REJECT_MISSING_SIGNATURE = "missing signature"
REJECT_INVALID_SIGNATURE = "invalid signature"


class GossipTracer:
    """Tracks promised message deliveries so that peers who break them can be penalised.

    Only one randomly chosen message ID per request is tracked, to bound memory.
    """

    def __init__(
        self,
        id_fn: Callable[[Message], str],
        follow_up_time: float,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.id_fn = id_fn
        self.follow_up_time = follow_up_time
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._promises: Dict[str, Dict[Hashable, float]] = {}
        self._peer_promises: Dict[Hashable, Set[str]] = {}

    @property
    def promised_peers(self) -> FrozenSet[Hashable]:
        """Peers that still have outstanding promises."""
        with self._lock:
            return frozenset(self._peer_promises)

    def add_promise(self, peer_id: Hashable, msg_ids: Sequence[str]) -> None:
        """Track a promise by ``peer_id`` to deliver one of ``msg_ids``."""
        if not msg_ids:
            raise ValueError("cannot track a promise for an empty message id list")
        mid = random.choice(list(msg_ids))

        with self._lock:
            promises = self._promises.setdefault(mid, {})
            if peer_id not in promises:
                promises[peer_id] = self._clock() + self.follow_up_time
                self._peer_promises.setdefault(peer_id, set()).add(mid)

    def get_broken_promises(self) -> Dict[Hashable, int]:
        """Return, per peer, how many promises expired unfulfilled, and forget them."""
        result: Dict[Hashable, int] = {}
        with self._lock:
            now = self._clock()
            for mid, promises in list(self._promises.items()):
                for peer_id, expire in list(promises.items()):
                    if expire < now:
                        result[peer_id] = result.get(peer_id, 0) + 1
                        del promises[peer_id]
                        peer_promises = self._peer_promises.get(peer_id)
                        if peer_promises is not None:
                            peer_promises.discard(mid)
                            if not peer_promises:
                                del self._peer_promises[peer_id]
                if not promises:
                    del self._promises[mid]
        return result

    def _fulfill_promise(self, msg: Message) -> None:
        mid = self.id_fn(msg)
        with self._lock:
            promises = self._promises.pop(mid, None)
            if promises is None:
                return
            # every peer that promised it can no longer fulfil it
            for peer_id in promises:
                peer_promises = self._peer_promises.get(peer_id)
                if peer_promises is not None:
                    peer_promises.discard(mid)
                    if not peer_promises:
                        del self._peer_promises[peer_id]

    def deliver_message(self, msg: Message) -> None:
        self._fulfill_promise(msg)

    def reject_message(self, msg: Message, reason: str) -> None:
        # Obviously invalid deliveries keep the promise penalty in force.
        if reason in (REJECT_MISSING_SIGNATURE, REJECT_INVALID_SIGNATURE):
            return
        self._fulfill_promise(msg)

    def validate_message(self, msg: Message) -> None:
        self._fulfill_promise(msg)

    def throttle_peer(self, peer_id: Hashable) -> None:
        """Void all promises of a throttled peer."""
        with self._lock:
            peer_promises = self._peer_promises.pop(peer_id, None)
            if peer_promises is None:
                return
            for mid in peer_promises:
                promises = self._promises.get(mid)
                if promises is None:
                    continue
                promises.pop(peer_id, None)
                if not promises:
                    del self._promises[mid]