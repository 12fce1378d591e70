"""Frame scheduling for coalesced overlay repaints."""

import itertools
import logging
from typing import Callable, Protocol

from PySide6.QtCore import QTimer

FrameCallback = Callable[[], None]

FRAME_INTERVAL_MS = 16


class FrameScheduler(Protocol):
    """Schedules a callback for the next frame and hands back a cancelable token."""

    def request_frame(self, callback: FrameCallback) -> int: ...

    def cancel_frame(self, token: int) -> None: ...


class QtFrameScheduler:
    """Frame scheduler on top of single-shot QTimers."""

    def __init__(self, interval_ms: int = FRAME_INTERVAL_MS):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.interval_ms = interval_ms
        self._ids = itertools.count(1)
        self._timers: dict[int, QTimer] = {}

    def request_frame(self, callback: FrameCallback) -> int:
        token = next(self._ids)
        timer = QTimer()
        timer.setSingleShot(True)
        timer.setInterval(self.interval_ms)
        timer.timeout.connect(lambda: self._fire(token, callback))
        self._timers[token] = timer
        timer.start()
        return token

    def _fire(self, token: int, callback: FrameCallback) -> None:
        timer = self._timers.pop(token, None)
        if timer is None:
            return
        timer.deleteLater()
        callback()

    def cancel_frame(self, token: int) -> None:
        timer = self._timers.pop(token, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()

    @property
    def pending(self) -> int:
        return len(self._timers)


class ManualFrameScheduler:
    """Frame scheduler that runs callbacks only when flushed.

    Used for headless rendering and tests, where there is no event loop to
    drive frames.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._callbacks: dict[int, FrameCallback] = {}
        self.requested = 0

    def request_frame(self, callback: FrameCallback) -> int:
        token = next(self._ids)
        self._callbacks[token] = callback
        self.requested += 1
        return token

    def cancel_frame(self, token: int) -> None:
        self._callbacks.pop(token, None)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def flush(self) -> int:
        """Run every pending callback.

        Returns:
            Number of callbacks that ran
        """
        callbacks, self._callbacks = self._callbacks, {}
        for callback in callbacks.values():
            callback()
        return len(callbacks)
