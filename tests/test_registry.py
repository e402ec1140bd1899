"""Tests for the in-process connection registry."""

import pytest

from peerwatch.models import Observation


def obs(key, address=None, sub_version="app", ping_time=None):
    return Observation(key=key, address=address or str(key), sub_version=sub_version, ping_time=ping_time)


def test_ids_are_never_reused(registry):
    a = registry.connect("a")
    b = registry.connect("b")
    registry.disconnect(b)
    c = registry.connect("c")
    assert (a, b, c) == (1, 2, 3)
    assert registry.node_ids() == [1, 3]


def test_disconnect_unknown(registry):
    assert registry.disconnect(42) is False


def test_update_fields(registry):
    nid = registry.connect("a", "v1")
    assert registry.update(nid, ping_time=0.5)
    assert registry.update(nid, sub_version="v2")
    with registry.try_read() as nodes:
        stats = nodes[0].copy_stats()
    assert stats.ping_time == 0.5
    assert stats.sub_version == "v2"
    assert registry.update(99, ping_time=1.0) is False


def test_update_can_clear_ping(registry):
    nid = registry.connect("a", ping_time=0.3)
    registry.update(nid, ping_time=None)
    with registry.try_read() as nodes:
        assert nodes[0].ping_time is None


def test_duplicate_key_rejected(registry):
    registry.connect("a", key="k")
    with pytest.raises(ValueError):
        registry.connect("a", key="k")


def test_try_read_fails_while_writer_holds(registry):
    with registry.write():
        with registry.try_read() as nodes:
            assert nodes is None
    with registry.try_read() as nodes:
        assert nodes == []
    assert not registry.lock.locked()


def test_try_read_releases_on_error(registry):
    with pytest.raises(RuntimeError):
        with registry.try_read():
            raise RuntimeError("boom")
    assert not registry.lock.locked()


def test_sync_keeps_ids_for_known_connections(registry):
    assert registry.sync([obs("x"), obs("y")]) == (2, 0)
    assert registry.sync([obs("y", ping_time=0.02), obs("z")]) == (1, 1)
    assert registry.node_ids() == [2, 3]
    with registry.try_read() as nodes:
        assert nodes[0].ping_time == 0.02


def test_sync_ignores_duplicate_keys_in_one_pass(registry):
    assert registry.sync([obs("x"), obs("x")]) == (1, 0)
    assert len(registry) == 1


def test_sync_leaves_manual_connections(registry):
    nid = registry.connect("manual")
    registry.sync([obs("x")])
    registry.sync([])
    assert registry.node_ids() == [nid]


def test_copy_stats_is_detached(registry):
    nid = registry.connect("a", ping_time=0.1)
    with registry.try_read() as nodes:
        stats = nodes[0].copy_stats()
    registry.update(nid, ping_time=0.9)
    assert stats.ping_time == 0.1
    assert stats.node_id == nid
