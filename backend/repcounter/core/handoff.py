"""
Single-slot handoff between sample ingestion and classification.

Holds at most one pending window. If classification falls behind, a newer
window overwrites the pending one instead of queueing, so memory stays
fixed and the rep state always reflects the freshest motion.
"""

import threading
from typing import Callable, Optional
import logging

from repcounter.core.window_buffer import Window

logger = logging.getLogger(__name__)


class ClassificationWorker:
    """Background thread consuming windows from a one-element slot."""

    def __init__(self, handle: Callable[[Window], None], name: str = "repcounter-classify"):
        self._handle = handle
        self._name = name
        self._cond = threading.Condition()
        self._pending: Optional[Window] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        with self._cond:
            if self._running:
                return
            self._running = True
            self._pending = None
        self._thread = threading.Thread(target=self._loop, name=self._name, daemon=True)
        self._thread.start()

    def submit(self, window: Window) -> bool:
        """Place a window in the slot. Returns False if it overwrote a pending one."""
        with self._cond:
            if not self._running:
                return False
            replaced = self._pending is not None
            if replaced:
                self.dropped += 1
                logger.warning(
                    f"Classification behind, dropping window {self._pending.sequence} "
                    f"for window {window.sequence}"
                )
            self._pending = window
            self._cond.notify()
            return not replaced

    def _loop(self):
        while True:
            with self._cond:
                while self._running and self._pending is None:
                    self._cond.wait()
                if not self._running:
                    return
                window, self._pending = self._pending, None
            try:
                self._handle(window)
            except Exception:
                logger.exception(f"Window {window.sequence} handler failed")

    def stop(self):
        """Discard any pending window and join the thread."""
        with self._cond:
            self._running = False
            self._pending = None
            self._cond.notify_all()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None
