from __future__ import annotations
import logging
import threading
from typing import Callable, Optional

from ..models import PeerRecord, SortColumn, SortOrder
from ..registry import ConnectionRegistry
from .snapshot import SnapshotCache, SnapshotView

log = logging.getLogger(__name__)

COLUMNS = [
    (SortColumn.ADDRESS, "Address"),
    (SortColumn.SUBVERSION, "Subversion"),
    (SortColumn.PING, "Ping (secs)"),
]

LAYOUT_ABOUT_TO_CHANGE = "layout_about_to_change"
LAYOUT_CHANGED = "layout_changed"
EVENTS = (LAYOUT_ABOUT_TO_CHANGE, LAYOUT_CHANGED)

def format_ping(ping: Optional[float]) -> str:
    return "" if ping is None else f"{ping:.3f}"

class PeerTableModel:
    """Row/column view over a SnapshotCache with change notifications."""

    def __init__(self, registry: ConnectionRegistry, load: bool = True):
        self.cache = SnapshotCache(registry)
        self.lock = threading.Lock()
        self._listeners: dict[str, list[Callable[[], None]]] = {e: [] for e in EVENTS}
        if load:
            self.refresh()

    def connect(self, event: str, callback: Callable[[], None]) -> None:
        if event not in self._listeners:
            raise ValueError(f"unknown event: {event}")
        self._listeners[event].append(callback)

    def _emit(self, event: str) -> None:
        for cb in self._listeners[event]:
            cb()

    def row_count(self) -> int:
        return self.cache.size()

    def column_count(self) -> int:
        return len(COLUMNS)

    def header_data(self, section: int) -> Optional[str]:
        if 0 <= section < len(COLUMNS):
            return COLUMNS[section][1]
        return None

    def data(self, row: int, column: int) -> Optional[str]:
        rec = self.cache.record_at(row)
        if rec is None:
            return None
        if column == SortColumn.ADDRESS:
            return rec.address
        if column == SortColumn.SUBVERSION:
            return rec.sub_version
        if column == SortColumn.PING:
            return format_ping(rec.ping_time)
        return None

    def get_node_stats(self, row: int) -> Optional[PeerRecord]:
        return self.cache.record_at(row)

    def get_row_by_node_id(self, node_id: int) -> Optional[int]:
        return self.cache.row_of(node_id)

    def find_node(self, node_id: int) -> Optional[tuple[int, PeerRecord]]:
        return self.cache.lookup(node_id)

    def refresh(self) -> bool:
        with self.lock:
            self._emit(LAYOUT_ABOUT_TO_CHANGE)
            try:
                return self.cache.refresh()
            finally:
                self._emit(LAYOUT_CHANGED)

    def sort(self, column: SortColumn, order: SortOrder = SortOrder.ASCENDING) -> bool:
        with self.lock:
            self._emit(LAYOUT_ABOUT_TO_CHANGE)
            try:
                refreshed = self.cache.set_sort(column, order)
            finally:
                self._emit(LAYOUT_CHANGED)
        log.info("peer table sorted by %s %s (refreshed=%s)",
                 SortColumn(column).name.lower(), SortOrder(order).value, refreshed)
        return refreshed

    def to_rows(self, view: Optional[SnapshotView] = None) -> list[dict]:
        if view is None:
            view = self.cache.view()
        rows = []
        for row, rec in enumerate(view.records):
            d = rec.to_dict()
            d["row"] = row
            d["ping"] = format_ping(rec.ping_time)
            rows.append(d)
        return rows
