from __future__ import annotations
from typing import Tuple

def format_endpoint(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"

def split_endpoint(addr: str) -> Tuple[str, int]:
    """Split 'host:port', '[v6]:port' or 'host%iface:port' as printed by ss.

    Wildcard ports ('*') map to 0.
    """
    if not addr or addr == "*":
        return ("*", 0)
    if addr.startswith("["):
        host, _, port = addr[1:].partition("]")
        port = port.lstrip(":")
    else:
        host, sep, port = addr.rpartition(":")
        if not sep:
            return (addr, 0)
    host = host.split("%", 1)[0]
    return (host or "*", int(port) if port.isdigit() else 0)
