"""Orchestrator: list run ids, fetch them in concurrent batches, collect packages."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sra_harvester.config import HarvestConfig
from sra_harvester.eutils import EutilsClient
from sra_harvester.models import PackageSet
from sra_harvester.pipeline import BatchFetcher, BatchRunner, chunk_ids
from sra_harvester.progress import ProgressReporter

logger = logging.getLogger(__name__)

REPORTER_JOIN_TIMEOUT = 5.0


@dataclass
class HarvestResult:
    package_sets: List[PackageSet] = field(default_factory=list)
    total_batches: int = 0


class Harvester:
    def __init__(
        self,
        config: HarvestConfig,
        client: Optional[EutilsClient] = None,
        display=None,
    ):
        self.config = config
        self._client = client or EutilsClient(api_key=config.api_key, timeout=config.timeout)
        self._display = display

    def search(self) -> List[str]:
        """Run the listing query. Raises ListingError."""
        logger.debug("ESearch query: %s", self.config.query)
        return self._client.search_ids(self.config.query)

    def fetch(self, ids: Sequence[str]) -> HarvestResult:
        """Fetch packages for ``ids``. Dropped batches are logged, never raised."""
        batches = chunk_ids(ids, self.config.batch_size)
        reporter = ProgressReporter(len(batches), self._display)
        reporter.start()

        fetcher = BatchFetcher(
            self._client.fetch_packages,
            max_attempts=self.config.max_retries,
            backoff_seconds=self.config.backoff_seconds,
        )
        runner = BatchRunner(fetcher, self.config.max_workers, on_complete=reporter.notify)
        try:
            package_sets = runner.run(batches)
        finally:
            reporter.close()
            reporter.join(REPORTER_JOIN_TIMEOUT)

        logger.debug(
            "%d of %d batches returned data", len(package_sets), len(batches)
        )
        return HarvestResult(package_sets=package_sets, total_batches=len(batches))

    def harvest(self) -> HarvestResult:
        return self.fetch(self.search())
