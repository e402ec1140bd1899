from __future__ import annotations
import logging
from typing import Iterable

import psutil

from ..models import Observation
from ..utils.net import format_endpoint

log = logging.getLogger(__name__)

def _endpoint(addr) -> tuple[str, int]:
    return (addr.ip, addr.port) if hasattr(addr, "ip") else (addr[0], addr[1])

def process_name(pid: int, names: dict[int, str]) -> str:
    if pid not in names:
        try:
            names[pid] = psutil.Process(pid).name()
        except psutil.Error:
            names[pid] = "?"
    return names[pid]

def collect(kinds: Iterable[str] = ("tcp",)) -> list[Observation]:
    """Peers from psutil's connection table. psutil reports no RTT."""
    out: list[Observation] = []
    names: dict[int, str] = {}
    for kind in kinds:
        try:
            conns = psutil.net_connections(kind=kind)
        except psutil.AccessDenied:
            log.warning("psutil: access denied listing %s connections", kind)
            continue
        for c in conns:
            if not c.pid or not c.raddr or not c.laddr:
                continue
            if kind.startswith("tcp") and c.status == psutil.CONN_LISTEN:
                continue
            laddr, raddr = _endpoint(c.laddr), _endpoint(c.raddr)
            out.append(Observation(
                key=(kind, laddr, raddr),
                address=format_endpoint(*raddr),
                sub_version=process_name(c.pid, names),
            ))
    return out
