"""Forward batch completion counts to a progress display.

The batch runner pushes each new completion count onto the reporter's
channel; the reporter thread is the only caller of the display, so a slow or
broken display never holds up a fetch worker.
"""

import logging
import queue
import threading
from typing import Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)

_CLOSE = None


class NullDisplay:
    def start(self, total: int) -> None:
        pass

    def update(self, completed: int) -> None:
        pass

    def finish(self) -> None:
        pass


class TqdmDisplay:
    """Terminal progress bar over batches."""

    def __init__(self, desc: str = "Fetching batches", **tqdm_kwargs):
        self._desc = desc
        self._kwargs = tqdm_kwargs
        self._bar: Optional[tqdm] = None

    def start(self, total: int) -> None:
        self._bar = tqdm(total=total, desc=self._desc, unit="batch", **self._kwargs)

    def update(self, completed: int) -> None:
        if self._bar is not None:
            self._bar.update(completed - self._bar.n)

    def finish(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


class ProgressReporter(threading.Thread):
    def __init__(self, total: int, display=None):
        super().__init__(name="progress-reporter", daemon=True)
        self.total = total
        self.last_forwarded = 0
        self._display = display if display is not None else NullDisplay()
        self._events: "queue.Queue[Optional[int]]" = queue.Queue()

    def start(self) -> None:
        self._safe_call("start", self.total)
        super().start()

    def notify(self, completed: int) -> None:
        """Called by the batch runner each time a batch reaches a terminal state."""
        self._events.put(completed)

    def close(self) -> None:
        self._events.put(_CLOSE)

    def run(self) -> None:
        try:
            while self.last_forwarded < self.total:
                completed = self._events.get()
                if completed is _CLOSE:
                    break
                if completed > self.last_forwarded:
                    self.last_forwarded = min(completed, self.total)
                    self._safe_call("update", self.last_forwarded)
        finally:
            self._safe_call("finish")

    def _safe_call(self, method: str, *args) -> None:
        if self._display is None:
            return
        try:
            getattr(self._display, method)(*args)
        except Exception:
            logger.warning("Progress display failed; disabling it", exc_info=True)
            self._display = None
