"""Flatten experiment packages into one output row per run."""

from typing import Iterable, Iterator, List

from sra_harvester.models import Package, PackageSet, Row
from sra_harvester.resolution import (
    BIOPROJECT_RULES,
    BIOSAMPLE_RULES,
    SUBMITTER_RULES,
    resolve,
    sample_attribute,
)


def extract_rows(package: Package) -> List[Row]:
    """Return one Row per run; package-level fields are shared by all of them."""
    bioproject = resolve(package, BIOPROJECT_RULES)
    biosample = resolve(package, BIOSAMPLE_RULES)
    submitter = resolve(package, SUBMITTER_RULES)
    collection_date = sample_attribute(package, "collection_date")
    location = sample_attribute(package, "geo_loc_name")
    population = sample_attribute(package, "ww_population")

    rows = []
    for run in package.runs:
        rows.append(
            Row(
                run_accession=run.accession,
                bioproject=bioproject,
                biosample=biosample,
                submitter=submitter,
                collection_date=collection_date,
                location=location,
                population=population,
                total_spots=run.total_spots,
                release_date=run.release_date or package.release_date,
                load_date=run.load_date or package.load_date,
            )
        )
    return rows


def iter_rows(package_sets: Iterable[PackageSet]) -> Iterator[Row]:
    for package_set in package_sets:
        for package in package_set.packages:
            yield from extract_rows(package)
