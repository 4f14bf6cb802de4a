"""Concurrent batch fetching: chunk ids, fetch each chunk with retries, collect results."""

import logging
import queue
import threading
import time
from typing import Callable, List, Optional, Sequence

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sra_harvester.models import PackageSet
from sra_harvester.sra_xml import DecodeError

logger = logging.getLogger(__name__)

# A malformed body is retried like a dropped connection.
RETRYABLE_ERRORS = (requests.RequestException, DecodeError)

FetchFn = Callable[[Sequence[str]], PackageSet]


def chunk_ids(ids: Sequence[str], size: int) -> List[List[str]]:
    """Split ids into consecutive batches of ``size``; the last may be shorter."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(ids[i : i + size]) for i in range(0, len(ids), size)]


class BatchFetcher:
    """Fetch one batch, retrying with exponential backoff.

    The wait before retry attempt ``k`` (0-indexed) is ``2**k`` backoff units.
    Returns None once ``max_attempts`` attempts have failed; errors listed in
    RETRYABLE_ERRORS never escape.
    """

    def __init__(
        self,
        fetch: FetchFn,
        max_attempts: int,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._fetch = fetch
        self.max_attempts = max_attempts
        self._backoff = backoff_seconds
        self._sleep = sleep

    def __call__(self, batch: Sequence[str]) -> Optional[PackageSet]:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=2 * self._backoff),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            sleep=self._sleep,
            reraise=True,
        )
        try:
            package_set = retrying(self._fetch, batch)
        except RETRYABLE_ERRORS as exc:
            logger.warning(
                "Failed batch of %d ids (%s...) after %d attempts: %s",
                len(batch), batch[0] if batch else "", self.max_attempts, exc,
            )
            return None
        logger.debug("Fetched %d packages for %d ids", len(package_set.packages), len(batch))
        return package_set


class ResultSink:
    """Unordered, unbounded collection of successful batch results."""

    def __init__(self):
        self._queue: "queue.Queue[PackageSet]" = queue.Queue()
        self._closed = False
        self._drained = False

    def put(self, package_set: PackageSet) -> None:
        if self._closed:
            raise RuntimeError("Result sink is closed")
        self._queue.put_nowait(package_set)

    def close(self) -> None:
        self._closed = True

    def drain(self) -> List[PackageSet]:
        if not self._closed:
            raise RuntimeError("Result sink must be closed before draining")
        if self._drained:
            raise RuntimeError("Result sink was already drained")
        self._drained = True
        results = []
        while True:
            try:
                results.append(self._queue.get_nowait())
            except queue.Empty:
                return results


class BatchRunner:
    """Run one worker thread per batch, at most ``max_workers`` at a time."""

    def __init__(
        self,
        worker: Callable[[Sequence[str]], Optional[PackageSet]],
        max_workers: int,
        on_complete: Optional[Callable[[int], None]] = None,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self._worker = worker
        self._max_workers = max_workers
        self._on_complete = on_complete
        self._lock = threading.Lock()
        self.completed = 0

    def run(self, batches: Sequence[Sequence[str]]) -> List[PackageSet]:
        """Fetch every batch and return the successful results, unordered.

        Blocks until every batch has either succeeded or been dropped.
        """
        sink = ResultSink()
        slots = threading.BoundedSemaphore(self._max_workers)
        threads = [
            threading.Thread(
                target=self._run_one, args=(batch, slots, sink), name=f"batch-{i}", daemon=True
            )
            for i, batch in enumerate(batches)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        sink.close()
        return sink.drain()

    def _run_one(self, batch, slots: threading.BoundedSemaphore, sink: ResultSink) -> None:
        try:
            with slots:
                package_set = self._worker(batch)
                if package_set is not None:
                    sink.put(package_set)
        except Exception:
            logger.exception(
                "Unexpected error in batch of %d ids (%s...); batch dropped",
                len(batch), batch[0] if batch else "",
            )
        finally:
            self._mark_complete()

    def _mark_complete(self) -> None:
        with self._lock:
            self.completed += 1
            completed = self.completed
            # callbacks must observe counts in increasing order
            if self._on_complete is not None:
                self._on_complete(completed)
