from __future__ import annotations
import logging
import platform
import shutil
import threading

from ..config import CFG
from ..models import Observation
from ..registry import ConnectionRegistry
from . import generic, linux

log = logging.getLogger(__name__)

def use_ss(cfg: CFG) -> bool:
    if cfg.collector == "linux":
        return True
    if cfg.collector == "psutil":
        return False
    return platform.system() == "Linux" and shutil.which("ss") is not None

def collect_once(cfg: CFG) -> list[Observation]:
    obs = linux.collect() if use_ss(cfg) else None
    if obs is None:
        obs = generic.collect(("tcp",))
    # ss runs tcp only; UDP peers always come from psutil
    if cfg.udp_enabled:
        obs.extend(generic.collect(("udp",)))
    return obs

def collector_loop(cfg: CFG, registry: ConnectionRegistry, interval: float,
                   stop: threading.Event) -> None:
    while not stop.is_set():
        try:
            registry.sync(collect_once(cfg))
        except Exception:
            log.exception("peer collection failed")
        stop.wait(interval)
