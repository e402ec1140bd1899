from .sorting import SortPolicy
from .snapshot import CacheState, SnapshotCache, SnapshotView
from .model import COLUMNS, LAYOUT_ABOUT_TO_CHANGE, LAYOUT_CHANGED, PeerTableModel
from .scheduler import DEFAULT_INTERVAL, RefreshScheduler
