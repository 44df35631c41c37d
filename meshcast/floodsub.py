"""The flooding router: every message goes to every peer subscribed to its topic."""

from __future__ import annotations

import enum
import logging
import queue
from typing import Any, Hashable, Iterable, List, Optional, Sequence

from meshcast.rpc import RPC, Message, rpc_with_messages

FLOODSUB_ID = "/floodsub/1.0.0"
FLOODSUB_TOPIC_SEARCH_SIZE = 5

log = logging.getLogger(__name__)


class AcceptStatus(enum.IntEnum):
    """How much of an incoming RPC a router is willing to process."""

    NONE = 0
    CONTROL = 1
    ALL = 2


def _is_author(peer_id: Hashable, author: Optional[bytes]) -> bool:
    if author is None:
        return False
    if isinstance(peer_id, (bytes, bytearray)):
        return bytes(peer_id) == author
    return str(peer_id).encode() == author


class FloodSubRouter:
    """Router that forwards each message to all known peers in the topic.

    The attached pubsub object must provide ``topics`` (topic -> collection of
    peer ids), ``peers`` (peer id -> outbound queue whose ``push(rpc, urgent)``
    raises :class:`queue.Full` when the peer is too slow) and ``tracer``
    (which may be ``None``).
    """

    def __init__(self, protocols: Optional[Iterable[str]] = None) -> None:
        self._protocols: List[str] = list(protocols) if protocols is not None else [FLOODSUB_ID]
        self.pubsub: Any = None
        self.tracer: Any = None

    def protocols(self) -> List[str]:
        return self._protocols

    def attach(self, pubsub: Any) -> None:
        self.pubsub = pubsub
        self.tracer = getattr(pubsub, "tracer", None)

    def _trace(self, event: str, *args: Any) -> None:
        if self.tracer is not None:
            getattr(self.tracer, event)(*args)

    def add_peer(self, peer_id: Hashable, protocol: str) -> None:
        self._trace("add_peer", peer_id, protocol)

    def remove_peer(self, peer_id: Hashable) -> None:
        self._trace("remove_peer", peer_id)

    def enough_peers(self, topic: str, suggested: int = 0) -> bool:
        """Return whether the topic has at least ``suggested`` peers (5 when 0)."""
        peers = self.pubsub.topics.get(topic)
        if peers is None:
            return False
        if suggested == 0:
            suggested = FLOODSUB_TOPIC_SEARCH_SIZE
        return len(peers) >= suggested

    def accept_from(self, peer_id: Hashable) -> AcceptStatus:
        return AcceptStatus.ALL

    def preprocess(self, sender: Hashable, msgs: Sequence[Message]) -> None:
        """Flooding needs no preprocessing."""

    def handle_rpc(self, rpc: RPC) -> None:
        """Flooding has no control messages to handle."""

    def publish(self, msg: Message) -> None:
        """Send ``msg`` to every topic peer except its sender and its author."""
        out = rpc_with_messages(msg)
        for pid in list(self.pubsub.topics.get(msg.topic, ())):
            if pid == msg.received_from or _is_author(pid, msg.from_):
                continue
            q = self.pubsub.peers.get(pid)
            if q is None:
                continue
            try:
                q.push(out, False)
            except queue.Full:
                log.info("dropping message to peer %s: queue full", pid)
                self._trace("drop_rpc", out, pid)
                continue
            self._trace("send_rpc", out, pid)

    def join(self, topic: str) -> None:
        self._trace("join", topic)

    def leave(self, topic: str) -> None:
        self._trace("leave", topic)