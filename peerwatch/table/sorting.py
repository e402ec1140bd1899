from __future__ import annotations
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable

from ..models import PeerRecord, SortColumn, SortOrder

def _ping_key(rec: PeerRecord) -> tuple[int, float]:
    # unknown ping orders before any measured value
    if rec.ping_time is None:
        return (0, 0.0)
    return (1, rec.ping_time)

@dataclass(frozen=True)
class SortPolicy:
    column: SortColumn = SortColumn.NONE
    order: SortOrder = SortOrder.ASCENDING

    @property
    def active(self) -> bool:
        return self.column != SortColumn.NONE

    def less(self, left: PeerRecord, right: PeerRecord) -> bool:
        """Strict ordering between two records under this policy.

        Descending order swaps the operands instead of negating the result,
        so records with equal keys still compare equal and keep their
        relative order in a stable sort.
        """
        if self.order == SortOrder.DESCENDING:
            left, right = right, left
        if self.column == SortColumn.ADDRESS:
            return left.address < right.address
        if self.column == SortColumn.SUBVERSION:
            return left.sub_version < right.sub_version
        if self.column == SortColumn.PING:
            return _ping_key(left) < _ping_key(right)
        return False

    def compare(self, left: PeerRecord, right: PeerRecord) -> int:
        if self.less(left, right):
            return -1
        if self.less(right, left):
            return 1
        return 0

    def apply(self, records: Iterable[PeerRecord]) -> list[PeerRecord]:
        """Return the records in policy order; registry order for NONE."""
        if not self.active:
            return list(records)
        # sorted() is a stable merge sort, ties keep registry order
        return sorted(records, key=cmp_to_key(self.compare))
