from __future__ import annotations
import itertools
import logging
import threading
from contextlib import contextmanager
from typing import Hashable, Iterable, Iterator, Optional

from .models import Observation, PeerRecord

log = logging.getLogger(__name__)

_UNSET = object()

class Node:
    """Live handle for one connection. Stats are mutated under the registry lock."""

    def __init__(self, node_id: int, address: str, sub_version: str = "",
                 ping_time: Optional[float] = None, key: Hashable = None):
        self.node_id = node_id
        self.address = address
        self.sub_version = sub_version
        self.ping_time = ping_time
        self.key = key

    def copy_stats(self) -> PeerRecord:
        return PeerRecord(node_id=self.node_id, address=self.address,
                          sub_version=self.sub_version, ping_time=self.ping_time)

    def __repr__(self) -> str:
        return f"Node({self.node_id}, {self.address!r})"

class ConnectionRegistry:
    """Owns the live node list; writers block, the table only try-acquires."""

    def __init__(self):
        self.lock = threading.Lock()
        self._nodes: list[Node] = []
        self._by_key: dict[Hashable, Node] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._nodes)

    @contextmanager
    def try_read(self) -> Iterator[Optional[list[Node]]]:
        """Yield the node list if the lock is free right now, else None."""
        acquired = self.lock.acquire(blocking=False)
        try:
            yield self._nodes if acquired else None
        finally:
            if acquired:
                self.lock.release()

    @contextmanager
    def write(self) -> Iterator[list[Node]]:
        with self.lock:
            yield self._nodes

    def node_ids(self) -> list[int]:
        with self.lock:
            return [n.node_id for n in self._nodes]

    def _add(self, address: str, sub_version: str, ping_time: Optional[float], key: Hashable) -> Node:
        node = Node(next(self._ids), address, sub_version, ping_time, key)
        self._nodes.append(node)
        if key is not None:
            self._by_key[key] = node
        return node

    def _drop(self, node: Node) -> None:
        self._nodes.remove(node)
        if node.key is not None:
            self._by_key.pop(node.key, None)

    def connect(self, address: str, sub_version: str = "",
                ping_time: Optional[float] = None, key: Hashable = None) -> int:
        with self.lock:
            if key is not None and key in self._by_key:
                raise ValueError(f"connection already registered: {key!r}")
            node = self._add(address, sub_version, ping_time, key)
        log.debug("peer connected: id=%d addr=%s", node.node_id, address)
        return node.node_id

    def disconnect(self, node_id: int) -> bool:
        with self.lock:
            for node in self._nodes:
                if node.node_id == node_id:
                    self._drop(node)
                    break
            else:
                return False
        log.debug("peer disconnected: id=%d", node_id)
        return True

    def update(self, node_id: int, ping_time=_UNSET, sub_version=_UNSET) -> bool:
        with self.lock:
            for node in self._nodes:
                if node.node_id != node_id:
                    continue
                if ping_time is not _UNSET:
                    node.ping_time = ping_time
                if sub_version is not _UNSET:
                    node.sub_version = sub_version
                return True
        return False

    def sync(self, observations: Iterable[Observation]) -> tuple[int, int]:
        """Reconcile the node list with one collector pass.

        Connections seen before keep their node id, new ones get a fresh id
        and the ones missing from this pass are dropped.
        Returns (added, removed).
        """
        added = removed = 0
        with self.lock:
            seen: set = set()
            for obs in observations:
                if obs.key in seen:
                    continue
                seen.add(obs.key)
                node = self._by_key.get(obs.key)
                if node is None:
                    self._add(obs.address, obs.sub_version, obs.ping_time, obs.key)
                    added += 1
                else:
                    node.address = obs.address
                    node.sub_version = obs.sub_version
                    node.ping_time = obs.ping_time
            for node in [n for n in self._nodes if n.key is not None and n.key not in seen]:
                self._drop(node)
                removed += 1
        if added or removed:
            log.debug("registry sync: +%d -%d (%d peers)", added, removed, len(self._nodes))
        return added, removed
