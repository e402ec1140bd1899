from __future__ import annotations
import logging
import re
import subprocess
from typing import List, Optional

from ..models import Observation
from ..utils.net import format_endpoint, split_endpoint

log = logging.getLogger(__name__)

SS_CMD = ["ss", "-tanpi"]

ROW_RE = re.compile(
    r"^(?P<state>[A-Z][A-Z0-9-]*)\s+\d+\s+\d+\s+(?P<laddr>\S+)\s+(?P<raddr>\S+)(?:\s+(?P<rest>.*))?$")
NAME_RE = re.compile(r"users:\(\(\"(?P<name>[^\"]+)\"")
RTT_RE = re.compile(r"\brtt:(?P<rtt>\d+(?:\.\d+)?)")

def parse_ss(output: str) -> List[Observation]:
    """Parse `ss -tanpi`. Each socket row may be followed by an indented
    info line; its rtt (milliseconds) becomes the ping time in seconds."""
    out: List[Observation] = []
    last: Optional[Observation] = None
    for line in output.splitlines():
        if not line.strip():
            continue
        if line[0].isspace():
            m = RTT_RE.search(line)
            if last is not None and m:
                last.ping_time = float(m.group("rtt")) / 1000.0
            continue
        last = None
        m = ROW_RE.match(line)
        if not m or m.group("state") == "LISTEN":
            continue
        laddr = split_endpoint(m.group("laddr"))
        raddr = split_endpoint(m.group("raddr"))
        if raddr == ("*", 0):
            continue
        mname = NAME_RE.search(m.group("rest") or "")
        last = Observation(
            key=("tcp", laddr, raddr),
            address=format_endpoint(*raddr),
            sub_version=mname.group("name") if mname else "?",
        )
        out.append(last)
    return out

def collect() -> Optional[List[Observation]]:
    """None when ss is unavailable, so the caller can fall back to psutil."""
    try:
        output = subprocess.check_output(SS_CMD, text=True, stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError) as exc:
        log.warning("ss failed: %s", exc)
        return None
    return parse_ss(output)
