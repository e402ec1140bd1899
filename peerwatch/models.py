from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Hashable, Optional

class SortColumn(IntEnum):
    NONE = -1
    ADDRESS = 0
    SUBVERSION = 1
    PING = 2

class SortOrder(Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

@dataclass(frozen=True)
class PeerRecord:
    node_id: int
    address: str
    sub_version: str = ""
    ping_time: Optional[float] = None  # seconds, None = not measured yet

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "address": self.address,
            "sub_version": self.sub_version,
            "ping_time": self.ping_time,
        }

@dataclass
class Observation:
    key: Hashable  # identifies one connection across collector passes
    address: str
    sub_version: str = ""
    ping_time: Optional[float] = None
