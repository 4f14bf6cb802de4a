"""NCBI E-utilities client: ESearch for run ids, EFetch for experiment packages."""

import logging
from typing import List, Optional, Sequence

import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from sra_harvester import __version__
from sra_harvester.models import PackageSet
from sra_harvester.rate_limiter import RateLimiter
from sra_harvester.resolution import resolve_package_set
from sra_harvester.sra_xml import DecodeError, parse_package_set, parse_search_result

logger = logging.getLogger(__name__)

ESEARCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi"
EFETCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"
SEARCH_RETMAX = 100_000


class ListingError(RuntimeError):
    """The identifier listing could not be obtained; nothing can be fetched."""


class EutilsClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
    ):
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": f"sraHarvester/{__version__}"})
        self._limiter = rate_limiter or RateLimiter.for_ncbi(api_key)
        self._api_key = api_key
        self._timeout = timeout

    def search_ids(self, query: str) -> List[str]:
        """Return every SRA uid matching ``query``. Raises ListingError."""
        try:
            resp = self._search(query)
            result = parse_search_result(resp.content)
        except (requests.RequestException, DecodeError) as exc:
            raise ListingError(f"Failed to retrieve IDs: {exc}") from exc
        if result.count > len(result.ids):
            logger.warning(
                "Search matched %d records but only %d ids were returned",
                result.count, len(result.ids),
            )
        return result.ids

    def fetch_packages(self, ids: Sequence[str]) -> PackageSet:
        """Fetch and decode one batch. Network and decode errors propagate."""
        params = {"db": "sra", "id": ",".join(ids), "retmode": "xml"}
        resp = self._get(EFETCH_URL, params)
        return resolve_package_set(parse_package_set(resp.content))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def _search(self, query: str) -> requests.Response:
        params = {"db": "sra", "term": query, "retmode": "xml", "retmax": str(SEARCH_RETMAX)}
        return self._get(ESEARCH_URL, params)

    def _get(self, url: str, params: dict) -> requests.Response:
        self._limiter.acquire()
        if self._api_key:
            params["api_key"] = self._api_key
        resp = self._session.get(url, params=params, timeout=self._timeout)
        if resp.status_code == 429:
            raise requests.ConnectionError("Rate limited (429)")
        resp.raise_for_status()
        return resp
