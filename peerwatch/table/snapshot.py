from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..models import PeerRecord, SortColumn, SortOrder
from ..registry import ConnectionRegistry
from .sorting import SortPolicy

log = logging.getLogger(__name__)

class CacheState(Enum):
    STALE = "stale"
    POPULATED = "populated"

@dataclass(frozen=True)
class SnapshotView:
    records: tuple[PeerRecord, ...] = ()
    index: dict[int, int] = field(default_factory=dict)
    state: CacheState = CacheState.STALE

class SnapshotCache:
    """Sorted, indexed copy of the registry's peers.

    `records` and the node_id -> row index are published together as one
    `SnapshotView`; readers that take one view always see a matching pair.
    refresh() never waits for the registry lock and keeps the previous view
    when it is busy.
    Calls to refresh() must be serialized by the owner.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry
        self.policy = SortPolicy()
        self._view = SnapshotView()

    @property
    def sort_column(self) -> SortColumn:
        return self.policy.column

    @property
    def sort_order(self) -> SortOrder:
        return self.policy.order

    @property
    def state(self) -> CacheState:
        return self._view.state

    @property
    def records(self) -> tuple[PeerRecord, ...]:
        return self._view.records

    def refresh(self) -> bool:
        with self.registry.try_read() as nodes:
            if nodes is None:
                log.debug("peer refresh skipped, registry busy")
                return False
            fresh = [node.copy_stats() for node in nodes]

        records = tuple(self.policy.apply(fresh))
        index = {rec.node_id: row for row, rec in enumerate(records)}
        self._view = SnapshotView(records, index, CacheState.POPULATED)
        return True

    def size(self) -> int:
        return len(self._view.records)

    __len__ = size

    def record_at(self, row: int) -> Optional[PeerRecord]:
        records = self._view.records
        if 0 <= row < len(records):
            return records[row]
        return None

    def row_of(self, node_id: int) -> Optional[int]:
        return self._view.index.get(node_id)

    def view(self) -> SnapshotView:
        return self._view

    def lookup(self, node_id: int) -> Optional[tuple[int, PeerRecord]]:
        """Row and record for node_id, both taken from the same snapshot."""
        view = self._view
        row = view.index.get(node_id)
        if row is None:
            return None
        return row, view.records[row]

    def set_sort(self, column: SortColumn, order: SortOrder = SortOrder.ASCENDING) -> bool:
        self.policy = SortPolicy(SortColumn(column), SortOrder(order))
        return self.refresh()
