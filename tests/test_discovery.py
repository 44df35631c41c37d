from meshcast.discovery import NAMESPACE_PREFIX, PubSubDiscovery, min_topic_size
from meshcast.floodsub import FloodSubRouter


class RecordingDiscovery:
    def __init__(self):
        self.calls = []

    def advertise(self, ns, *opts):
        self.calls.append(("advertise", ns, opts))
        return 3600.0

    def find_peers(self, ns, *opts):
        self.calls.append(("find_peers", ns, opts))
        return iter(["peer-a", "peer-b"])


class RecordingRouter:
    def __init__(self, answer):
        self.answer = answer
        self.asked = []

    def enough_peers(self, topic, suggested):
        self.asked.append((topic, suggested))
        return self.answer


class FakePubSub:
    def __init__(self, topics):
        self.topics = topics
        self.peers = {}
        self.tracer = None


def test_min_topic_size_asks_router():
    router = RecordingRouter(True)
    ready = min_topic_size(7)
    assert ready(router, "foobar") is True
    assert router.asked == [("foobar", 7)]


def test_min_topic_size_with_floodsub_router():
    router = FloodSubRouter()
    router.attach(FakePubSub({"t": {"a"}}))
    assert min_topic_size(1)(router, "t") is True
    assert min_topic_size(2)(router, "t") is False
    assert min_topic_size(1)(router, "missing") is False


def test_advertise_namespaces_and_appends_opts():
    inner = RecordingDiscovery()
    disc = PubSubDiscovery(inner, ["fixed"])
    assert disc.advertise("foobar", "extra") == 3600.0
    assert inner.calls == [("advertise", "floodsub:foobar", ("extra", "fixed"))]


def test_find_peers_namespaces_and_returns_result():
    inner = RecordingDiscovery()
    disc = PubSubDiscovery(inner)
    assert list(disc.find_peers("foobar")) == ["peer-a", "peer-b"]
    assert inner.calls == [("find_peers", NAMESPACE_PREFIX + "foobar", ())]


def test_prefix_matches_source():
    inner = RecordingDiscovery()
    PubSubDiscovery(inner).advertise("x")
    assert inner.calls[0][1].startswith("floodsub:")