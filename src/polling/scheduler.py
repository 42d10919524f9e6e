"""
Interval Trigger.

A recurring trigger that calls a callback every ``interval_seconds`` from a
background daemon thread. The callback is expected to return quickly (the
polling service hands the real work to a separate thread), so firings stay
close to a fixed rate measured from ``start()``.
"""
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class IntervalTrigger:
    """Fire a callback at a fixed interval until cancelled.

    Attributes:
        interval_seconds: Seconds between firings
        callback: Zero-argument callable invoked on every firing
        name: Thread name, used in log messages
    """

    def __init__(self, interval_seconds: float, callback: Callable[[], None], name: str = "interval-trigger"):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_active(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def start(self) -> None:
        """Start firing in a background thread."""
        if self._thread is not None:
            logger.warning(f"{self.name} already started")
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """Stop future firings. Safe to call more than once."""
        self._stop_event.set()

    def _wait(self, timeout: float) -> bool:
        """Block until the next firing is due; True means cancelled."""
        return self._stop_event.wait(min(timeout, threading.TIMEOUT_MAX))

    def _run(self) -> None:
        logger.debug(f"{self.name} running every {self.interval_seconds}s")
        while not self._wait(self.interval_seconds):
            try:
                self.callback()
            except Exception as e:
                logger.error(f"Error in {self.name} callback: {e}", exc_info=True)
        logger.debug(f"{self.name} stopped")
