"""RPC data types, builders and length-delimited framing."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional


@dataclass
class Message:
    """A published message as carried on the wire, plus the peer it came from."""

    from_: Optional[bytes] = None
    data: Optional[bytes] = None
    seqno: Optional[bytes] = None
    topic: Optional[str] = None
    signature: Optional[bytes] = None
    key: Optional[bytes] = None
    received_from: Optional[str] = None


@dataclass
class SubOpts:
    subscribe: Optional[bool] = None
    topicid: Optional[str] = None


@dataclass
class ControlIHave:
    topic_id: Optional[str] = None
    message_ids: List[str] = field(default_factory=list)


@dataclass
class ControlIWant:
    message_ids: List[str] = field(default_factory=list)


@dataclass
class ControlGraft:
    topic_id: Optional[str] = None


@dataclass
class ControlPrune:
    topic_id: Optional[str] = None
    peers: list = field(default_factory=list)
    backoff: Optional[int] = None


@dataclass
class ControlIDontWant:
    message_ids: List[str] = field(default_factory=list)


@dataclass
class ControlMessage:
    ihave: List[ControlIHave] = field(default_factory=list)
    iwant: List[ControlIWant] = field(default_factory=list)
    graft: List[ControlGraft] = field(default_factory=list)
    prune: List[ControlPrune] = field(default_factory=list)
    idontwant: List[ControlIDontWant] = field(default_factory=list)


@dataclass
class RPC:
    subscriptions: List[SubOpts] = field(default_factory=list)
    publish: List[Message] = field(default_factory=list)
    control: Optional[ControlMessage] = None
    from_peer: Optional[str] = None


def rpc_with_subs(*subs: SubOpts) -> RPC:
    return RPC(subscriptions=list(subs))


def rpc_with_messages(*msgs: Message) -> RPC:
    return RPC(publish=list(msgs))


def rpc_with_control(msgs, ihave, iwant, graft, prune, idontwant) -> RPC:
    return RPC(
        publish=list(msgs or []),
        control=ControlMessage(
            ihave=list(ihave or []),
            iwant=list(iwant or []),
            graft=list(graft or []),
            prune=list(prune or []),
            idontwant=list(idontwant or []),
        ),
    )


def copy_rpc(rpc: RPC) -> RPC:
    """Shallow-copy an RPC, giving the copy its own control message."""
    res = dataclasses.replace(rpc)
    if rpc.control is not None:
        res.control = dataclasses.replace(rpc.control)
    return res


def hello_packet(subscriptions: Iterable[str], relays: Iterable[str]) -> RPC:
    """Build the initial RPC announcing every subscribed or relayed topic."""
    topics = dict.fromkeys(subscriptions)
    topics.update(dict.fromkeys(relays))
    return RPC(subscriptions=[SubOpts(subscribe=True, topicid=t) for t in topics])


def _encode_uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_frame(payload: bytes) -> bytes:
    """Prefix ``payload`` with its length as an unsigned varint."""
    return _encode_uvarint(len(payload)) + bytes(payload)


def iter_frames(data: bytes, max_size: int) -> Iterator[bytes]:
    """Yield the non-empty payloads of varint-delimited frames in ``data``.

    Raises ValueError on a frame longer than ``max_size`` or on truncated input.
    """
    view = memoryview(data)
    pos = 0
    end = len(view)
    while pos < end:
        length = 0
        shift = 0
        while True:
            if pos >= end:
                raise ValueError("truncated varint length prefix")
            byte = view[pos]
            pos += 1
            length |= (byte & 0x7F) << shift
            if not byte & 0x80:
                break
            shift += 7
            if shift >= 64:
                raise ValueError("varint length prefix overflows")
        if length > max_size:
            raise ValueError(f"message too large: {length} > {max_size}")
        if pos + length > end:
            raise ValueError("truncated frame")
        payload = bytes(view[pos : pos + length])
        pos += length
        if payload:
            yield payload