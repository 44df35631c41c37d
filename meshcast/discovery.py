"""Discovery helpers: readiness checks and topic namespacing."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Tuple

DISCOVERY_POLL_INITIAL_DELAY = 0.0
DISCOVERY_POLL_INTERVAL = 1.0
DISCOVERY_ADVERTISE_RETRY_INTERVAL = 120.0

NAMESPACE_PREFIX = "floodsub:"

RouterReady = Callable[[Any, str], bool]


def min_topic_size(size: int) -> RouterReady:
    """Return a readiness check asking the router for at least ``size`` topic peers.

    The size is a suggestion; the router decides. It does not count ourselves.
    """

    def ready(router: Any, topic: str) -> bool:
        return router.enough_peers(topic, size)

    return ready


class PubSubDiscovery:
    """Wraps a discovery service, namespacing topics and appending fixed options."""

    def __init__(self, discovery: Any, opts: Optional[Iterable[Any]] = None) -> None:
        self.discovery = discovery
        self.opts: Tuple[Any, ...] = tuple(opts or ())

    def advertise(self, ns: str, *args: Any) -> Any:
        return self.discovery.advertise(NAMESPACE_PREFIX + ns, *args, *self.opts)

    def find_peers(self, ns: str, *args: Any) -> Any:
        return self.discovery.find_peers(NAMESPACE_PREFIX + ns, *args, *self.opts)