import pytest

from meshcast.blacklist import Blacklist, MapBlacklist, TimeCachedBlacklist


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def test_map_blacklist():
    b = MapBlacklist()
    assert b.add("test") is True
    assert b.contains("test")
    assert "test" in b
    assert not b.contains("other")


def test_map_blacklist_add_twice_still_true():
    b = MapBlacklist()
    b.add("p")
    assert b.add("p") is True
    assert b.contains("p")


def test_time_cached_blacklist():
    b = TimeCachedBlacklist(10 * 60)
    b.add("test")
    assert b.contains("test")
    assert not b.contains("nobody")


def test_time_cached_blacklist_duplicate_add_returns_false():
    b = TimeCachedBlacklist(600, FakeClock())
    assert b.add("p") is True
    assert b.add("p") is False


def test_time_cached_blacklist_expires():
    clock = FakeClock()
    b = TimeCachedBlacklist(60, clock)
    b.add("p")
    clock.advance(59)
    assert "p" in b
    clock.advance(2)
    assert "p" not in b
    assert b.add("p") is True


def test_blacklist_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Blacklist()