# meshcast

Building blocks for topic-based publish/subscribe overlays (overlay
multicast). Each module is a self-contained piece that a pubsub node uses
around its routing. Times are in seconds, and every component that depends
on time takes an optional `clock` callable (defaulting to `time.monotonic`),
so it can be driven deterministically.

## Modules

### `meshcast.backoff`

`Backoff(size_threshold, cleanup_interval=60.0, max_attempts=4, clock=None)`
decides how long to wait before the next connection attempt to a peer.

- `update_and_get(peer_id)` records an attempt and returns the delay. The
  first attempt (or the first after ten minutes without one) returns `0.0`,
  the next `0.1`, and after that the delay doubles plus up to 99 ms of
  jitter, capped at `10.0`. Once a peer has made `max_attempts` attempts,
  `BackoffAttemptsExceeded` is raised.
- `cleanup()` forgets peers whose last attempt is older than ten minutes.
- `cleanup_loop()` is a coroutine that calls `cleanup()` every
  `cleanup_interval` seconds until it is cancelled.
- `len(backoff)` and `peer_id in backoff` report what is being tracked.

### `meshcast.blacklist`

`Blacklist` is the abstract base, with `add(peer_id)` (returns whether the
peer was newly added) and `contains(peer_id)`; it also supports `in`.

- `MapBlacklist()` keeps every peer forever; `add` always returns `True`.
- `TimeCachedBlacklist(expiry, clock=None)` forgets a peer `expiry` seconds
  after it was added; `add` returns `False` while the peer is still listed.
  Peers are keyed by `str(peer_id)`.

### `meshcast.rpc`

Dataclasses for what travels between peers: `RPC`, `Message`, `SubOpts`,
`ControlMessage`, `ControlIHave`, `ControlIWant`, `ControlGraft`,
`ControlPrune` and `ControlIDontWant`.

- `rpc_with_subs(*subs)`, `rpc_with_messages(*msgs)` and
  `rpc_with_control(msgs, ihave, iwant, graft, prune, idontwant)` build RPCs.
- `copy_rpc(rpc)` makes a shallow copy that has its own control message.
- `hello_packet(subscriptions, relays)` builds the RPC announcing every
  subscribed or relayed topic once.
- `encode_frame(payload)` prefixes bytes with their length as an unsigned
  varint; `iter_frames(data, max_size)` yields the non-empty payloads back
  and raises `ValueError` on an oversized or truncated frame.

### `meshcast.gossip_tracer`

`GossipTracer(id_fn, follow_up_time, clock=None)` tracks promises made by
peers to deliver requested messages. `add_promise(peer_id, msg_ids)` tracks
one randomly chosen ID from the list (an empty list raises `ValueError`).
`deliver_message`, `validate_message` and `reject_message` fulfil the
promise for a message's ID (`id_fn(msg)`), except that rejections for a
missing or invalid signature leave it in force. `get_broken_promises()`
returns a dict of peer → number of expired promises and forgets them;
`throttle_peer(peer_id)` voids a peer's promises; `promised_peers` lists
peers with outstanding promises.

### `meshcast.floodsub`

`FloodSubRouter(protocols=None)` forwards each message to every peer
subscribed to its topic, except the peer it came from and its author.
It defaults to the protocol `/floodsub/1.0.0`. After `attach(pubsub)`, the
router reads `pubsub.topics` (topic → peer ids), `pubsub.peers` (peer id →
outbound queue with `push(rpc, urgent)`, raising `queue.Full` when the peer
is too slow, in which case the message is dropped for that peer) and an
optional `pubsub.tracer`. `enough_peers(topic, suggested=0)` checks for at
least `suggested` peers in a topic (5 when `suggested` is 0);
`accept_from` always returns `AcceptStatus.ALL`.

### `meshcast.discovery`

`min_topic_size(size)` returns a readiness check `ready(router, topic)` that
asks the router's `enough_peers`. `PubSubDiscovery(discovery, opts=None)`
wraps a discovery service whose `advertise` and `find_peers` take a
namespace; it prefixes the namespace with `floodsub:` and appends its fixed
options.

## What this package does not do

There is no pubsub node here: nothing opens connections or streams, runs an
event loop, signs or validates messages, or keeps subscriptions. There is no
gossip mesh router and no discovery service or polling loop. The pieces
above are meant to be driven by such a node.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from meshcast.backoff import Backoff
from meshcast.blacklist import MapBlacklist
from meshcast.rpc import Message, encode_frame, iter_frames, rpc_with_messages

blacklist = MapBlacklist()
blacklist.add("peer-1")
assert "peer-1" in blacklist

backoff = Backoff(size_threshold=10)
assert backoff.update_and_get("peer-1") == 0.0
assert backoff.update_and_get("peer-1") == 0.1

rpc = rpc_with_messages(Message(data=b"hello", topic="news"))
assert rpc.publish[0].topic == "news"

assert list(iter_frames(encode_frame(b"abc"), max_size=1024)) == [b"abc"]
```