"""Command-line interface for sra-harvester."""

import argparse
import logging
import sys
import time
from datetime import datetime
from typing import List, Optional

from sra_harvester import config as defaults
from sra_harvester.config import HarvestConfig
from sra_harvester.core import Harvester
from sra_harvester.eutils import ListingError
from sra_harvester.extract import iter_rows
from sra_harvester.output import write_tsv
from sra_harvester.progress import NullDisplay, TqdmDisplay

logger = logging.getLogger(__name__)


def default_output_path(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%y.%m.%d.%H.%M")
    return f"parsed_metadata.{stamp}.tsv"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sra-harvester",
        description="Fetch SRA run metadata matching a search term and write a TSV report.",
    )
    parser.add_argument(
        "--term", type=str, default=defaults.DEFAULT_TERM,
        help=f"Search term (default: {defaults.DEFAULT_TERM!r})",
    )
    parser.add_argument(
        "--start", type=str, default=defaults.DEFAULT_START_DATE,
        help=f"Start publication date, yyyy/mm/dd (default: {defaults.DEFAULT_START_DATE})",
    )
    parser.add_argument(
        "--end", type=str, default=defaults.DEFAULT_END_DATE,
        help=f"End publication date, yyyy/mm/dd (default: {defaults.DEFAULT_END_DATE})",
    )
    parser.add_argument(
        "--api-key", type=str, default=None,
        help="NCBI API key for higher rate limits; not required (env: NCBI_API_KEY)",
    )
    parser.add_argument(
        "--batch-size", type=int, default=defaults.DEFAULT_BATCH_SIZE,
        help=f"Run ids per EFetch request (default: {defaults.DEFAULT_BATCH_SIZE})",
    )
    parser.add_argument(
        "--max-workers", type=int, default=defaults.DEFAULT_MAX_WORKERS,
        help=f"Concurrent fetch workers (default: {defaults.DEFAULT_MAX_WORKERS})",
    )
    parser.add_argument(
        "--max-retries", type=int, default=defaults.DEFAULT_MAX_RETRIES,
        help=f"Attempts per batch before it is dropped (default: {defaults.DEFAULT_MAX_RETRIES})",
    )
    parser.add_argument(
        "-o", "--output", type=str, default=None,
        help="Output file path (default: parsed_metadata.<yy.mm.dd.HH.MM>.tsv)",
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Do not show the progress bar",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose/debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = HarvestConfig.with_env_api_key(
            api_key=args.api_key,
            term=args.term,
            start_date=args.start,
            end_date=args.end,
            batch_size=args.batch_size,
            max_workers=args.max_workers,
            max_retries=args.max_retries,
        )
    except ValueError as exc:
        parser.error(str(exc))

    output = args.output or default_output_path()
    started = time.monotonic()
    display = NullDisplay() if args.no_progress else TqdmDisplay()
    harvester = Harvester(config, display=display)

    try:
        ids = harvester.search()
    except ListingError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    print(f"Found {len(ids)} IDs", file=sys.stderr)

    result = harvester.fetch(ids)

    try:
        n_rows = write_tsv(iter_rows(result.package_sets), output)
    except OSError as exc:
        logger.error("Failed to create TSV %s: %s", output, exc)
        sys.exit(1)

    print(f"Saved parsed metadata to {output} ({n_rows} runs)", file=sys.stderr)
    logger.info("Total time: %.2fs", time.monotonic() - started)


if __name__ == "__main__":
    main()
