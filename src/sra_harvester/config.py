"""Run configuration passed explicitly into the harvest pipeline."""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TERM = "sars-cov-2 wastewater"
DEFAULT_START_DATE = "2024/09/15"
DEFAULT_END_DATE = "2030/12/31"
DEFAULT_BATCH_SIZE = 100
DEFAULT_MAX_WORKERS = 10
DEFAULT_MAX_RETRIES = 7

API_KEY_ENV = "NCBI_API_KEY"


@dataclass(frozen=True)
class HarvestConfig:
    term: str = DEFAULT_TERM
    start_date: str = DEFAULT_START_DATE  # yyyy/mm/dd
    end_date: str = DEFAULT_END_DATE
    api_key: Optional[str] = None
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    max_retries: int = DEFAULT_MAX_RETRIES  # total attempts per batch
    backoff_seconds: float = 1.0
    timeout: float = 60.0

    def __post_init__(self):
        for name in ("batch_size", "max_workers", "max_retries"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must not be negative")

    @property
    def query(self) -> str:
        """ESearch term restricted to the publication date range."""
        return f'({self.term}) AND ("{self.start_date}"[PDAT] : "{self.end_date}"[PDAT])'

    @classmethod
    def with_env_api_key(cls, api_key: Optional[str] = None, **kwargs) -> "HarvestConfig":
        """Build a config, falling back to NCBI_API_KEY when no key is given."""
        key = api_key or os.environ.get(API_KEY_ENV) or None
        return cls(api_key=key, **kwargs)
