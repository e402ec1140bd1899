from __future__ import annotations
import logging
import threading
from typing import Optional

log = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0

class RefreshScheduler:
    """Calls model.refresh() every `interval` seconds on a daemon thread."""

    def __init__(self, model, interval: float = DEFAULT_INTERVAL):
        if interval <= 0:
            raise ValueError("refresh interval must be positive")
        self.model = model
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._alive() and not self._stop.is_set()

    def _alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        if self._alive():
            # clearing the event now would revive the old loop
            log.warning("refresh thread still stopping, not restarted")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="peer-refresh", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if not self._thread.is_alive():
                self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.model.refresh()
            except Exception:
                log.exception("peer table refresh failed")
