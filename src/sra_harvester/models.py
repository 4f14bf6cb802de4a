"""SRA experiment package data model and the flat output row."""

from dataclasses import dataclass, field
from typing import List, Optional

OUTPUT_COLUMNS = [
    "RunAccession",
    "BioProject",
    "BioSample",
    "Submitter",
    "CollectionDate",
    "Location",
    "Population",
    "TotalSpots",
    "ReleaseDate",
    "LoadDate",
]


@dataclass
class ExternalId:
    namespace: str
    value: str


@dataclass
class SampleAttribute:
    tag: str
    value: str


@dataclass
class LibraryDescriptor:
    strategy: str = ""
    source: str = ""
    selection: str = ""


@dataclass
class Experiment:
    accession: str = ""
    title: str = ""
    library: LibraryDescriptor = field(default_factory=LibraryDescriptor)
    study_ids: List[ExternalId] = field(default_factory=list)
    bioproject: str = ""  # filled in by the resolution pass, not the decoder


@dataclass
class Sample:
    accession: str = ""
    title: str = ""
    identifiers: List[ExternalId] = field(default_factory=list)
    attributes: List[SampleAttribute] = field(default_factory=list)


@dataclass
class Run:
    accession: str = ""
    total_spots: str = ""
    total_bases: str = ""
    load_date: str = ""
    release_date: str = ""


@dataclass
class Platform:
    name: str = ""  # e.g. ILLUMINA, OXFORD_NANOPORE
    instrument_model: str = ""


@dataclass
class Organization:
    name: str = ""
    type: str = ""


@dataclass
class Package:
    experiment: Experiment = field(default_factory=Experiment)
    sample: Sample = field(default_factory=Sample)
    runs: List[Run] = field(default_factory=list)
    platform: Platform = field(default_factory=Platform)
    organization: Optional[Organization] = None
    release_date: str = ""
    load_date: str = ""


@dataclass
class PackageSet:
    packages: List[Package] = field(default_factory=list)


@dataclass
class SearchResult:
    count: int = 0
    ids: List[str] = field(default_factory=list)


@dataclass
class Row:
    run_accession: str = ""
    bioproject: str = ""
    biosample: str = ""
    submitter: str = ""
    collection_date: str = ""
    location: str = ""
    population: str = ""
    total_spots: str = ""
    release_date: str = ""
    load_date: str = ""

    def to_dict(self) -> dict:
        """Return the row keyed by output column name, in column order."""
        values = (
            self.run_accession,
            self.bioproject,
            self.biosample,
            self.submitter,
            self.collection_date,
            self.location,
            self.population,
            self.total_spots,
            self.release_date,
            self.load_date,
        )
        return dict(zip(OUTPUT_COLUMNS, values))
