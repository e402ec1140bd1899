"""Tests for the connection collectors and address helpers."""

import pytest

from peerwatch.collectors import loop
from peerwatch.collectors.linux import parse_ss
from peerwatch.config import CFG
from peerwatch.models import Observation
from peerwatch.utils.net import format_endpoint, split_endpoint

SS_OUTPUT = """\
State      Recv-Q Send-Q  Local Address:Port    Peer Address:Port Process
LISTEN     0      128           0.0.0.0:8333         0.0.0.0:*     users:(("bitcoind",pid=812,fd=12))
ESTAB      0      0           10.0.0.5:43210    93.184.216.34:8333  users:(("bitcoind",pid=812,fd=20))
\t cubic wscale:7,7 rto:228 rtt:27.5/13.75 ato:40 mss:1448 minrtt:25.1 rcv_rtt:30
ESTAB      0      0        [::1]:55000              [::1]:8332  users:(("curl",pid=9001,fd=3))
\t cubic rto:201 rtt:0.042/0.021 mss:32768
SYN-SENT   0      1           10.0.0.5:40000        203.0.113.9:8333
TIME-WAIT  0      0           10.0.0.5:40001        203.0.113.10:443
\t cubic
"""


def test_parse_ss_rows_and_rtt():
    out = parse_ss(SS_OUTPUT)
    assert [o.address for o in out] == [
        "93.184.216.34:8333", "[::1]:8332", "203.0.113.9:8333", "203.0.113.10:443"]
    assert out[0].sub_version == "bitcoind"
    assert out[0].ping_time == pytest.approx(0.0275)
    assert out[1].sub_version == "curl"
    assert out[1].ping_time == pytest.approx(0.000042)
    assert out[2].sub_version == "?"
    assert out[2].ping_time is None
    assert out[3].ping_time is None


def test_parse_ss_keys_identify_connection():
    out = parse_ss(SS_OUTPUT)
    assert out[0].key == ("tcp", ("10.0.0.5", 43210), ("93.184.216.34", 8333))
    assert len({o.key for o in out}) == len(out)


def test_parse_ss_empty():
    assert parse_ss("") == []


@pytest.mark.parametrize("addr,expected", [
    ("1.2.3.4:5678", ("1.2.3.4", 5678)),
    ("[::1]:443", ("::1", 443)),
    ("[fe80::1%eth0]:22", ("fe80::1", 22)),
    ("10.0.0.1%eth0:22", ("10.0.0.1", 22)),
    ("0.0.0.0:*", ("0.0.0.0", 0)),
    ("*:*", ("*", 0)),
    ("*", ("*", 0)),
    ("localhost", ("localhost", 0)),
])
def test_split_endpoint(addr, expected):
    assert split_endpoint(addr) == expected


def test_format_endpoint():
    assert format_endpoint("1.2.3.4", 8333) == "1.2.3.4:8333"
    assert format_endpoint("2001:db8::1", 8333) == "[2001:db8::1]:8333"


def fake_sources(monkeypatch, ss_result):
    calls = []

    def generic_collect(kinds):
        calls.append(tuple(kinds))
        return [Observation(key=(kinds[0], 1), address=f"{kinds[0]}-peer")]

    monkeypatch.setattr(loop.linux, "collect", lambda: ss_result)
    monkeypatch.setattr(loop.generic, "collect", generic_collect)
    return calls


def test_collect_once_prefers_ss(monkeypatch):
    calls = fake_sources(monkeypatch, [Observation(key="ss", address="ss-peer")])
    out = loop.collect_once(CFG(collector="linux"))
    assert [o.address for o in out] == ["ss-peer"]
    assert calls == []


def test_collect_once_falls_back_to_psutil(monkeypatch):
    calls = fake_sources(monkeypatch, None)
    out = loop.collect_once(CFG(collector="linux"))
    assert [o.address for o in out] == ["tcp-peer"]
    assert calls == [("tcp",)]


def test_collect_once_adds_udp(monkeypatch):
    calls = fake_sources(monkeypatch, [])
    out = loop.collect_once(CFG(collector="psutil", udp_enabled=True))
    assert [o.address for o in out] == ["tcp-peer", "udp-peer"]
    assert calls == [("tcp",), ("udp",)]


def test_collector_loop_syncs_until_stopped(monkeypatch, registry):
    import threading

    stop = threading.Event()

    def collect_once(cfg):
        stop.set()
        return [Observation(key="k", address="peer")]

    monkeypatch.setattr(loop, "collect_once", collect_once)
    loop.collector_loop(CFG(), registry, 0.01, stop)
    assert len(registry) == 1


def test_collector_loop_survives_errors(monkeypatch, registry):
    import threading

    stop = threading.Event()
    calls = []

    def collect_once(cfg):
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("ss exploded")
        stop.set()
        return []

    monkeypatch.setattr(loop, "collect_once", collect_once)
    loop.collector_loop(CFG(), registry, 0.01, stop)
    assert len(calls) == 2
