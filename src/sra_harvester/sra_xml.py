"""Decode E-utilities XML (ESearch results and SRA experiment packages).

Decoding is purely structural: elements are mapped onto the dataclasses in
``models`` and anything absent becomes an empty string or empty list. Picking
values out of identifier/attribute lists is left to ``resolution``.
"""

import xml.etree.ElementTree as ET
from typing import List, Optional, Union

from sra_harvester.models import (
    Experiment,
    ExternalId,
    LibraryDescriptor,
    Organization,
    Package,
    PackageSet,
    Platform,
    Run,
    Sample,
    SampleAttribute,
    SearchResult,
)

PACKAGE_SET_TAG = "EXPERIMENT_PACKAGE_SET"
SEARCH_RESULT_TAG = "eSearchResult"


class DecodeError(ValueError):
    """Response body is not the XML document we asked for."""


def _parse_root(content: Union[bytes, str], expected_tag: str) -> ET.Element:
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise DecodeError(f"Malformed XML: {exc}") from exc
    if root.tag != expected_tag:
        raise DecodeError(f"Expected <{expected_tag}> root, got <{root.tag}>")
    return root


def _text(elem: Optional[ET.Element], path: str = "") -> str:
    if elem is None:
        return ""
    node = elem.find(path) if path else elem
    if node is None or node.text is None:
        return ""
    return node.text


def _attr(elem: Optional[ET.Element], name: str) -> str:
    if elem is None:
        return ""
    return elem.get(name) or ""


def parse_search_result(content: Union[bytes, str]) -> SearchResult:
    root = _parse_root(content, SEARCH_RESULT_TAG)
    count_text = _text(root, "Count").strip()
    ids = [_text(node).strip() for node in root.findall("IdList/Id")]
    ids = [i for i in ids if i]
    try:
        count = int(count_text) if count_text else len(ids)
    except ValueError as exc:
        raise DecodeError(f"Non-numeric Count: {count_text!r}") from exc
    return SearchResult(count=count, ids=ids)


def parse_package_set(content: Union[bytes, str]) -> PackageSet:
    root = _parse_root(content, PACKAGE_SET_TAG)
    return PackageSet(packages=[_package(p) for p in root.findall("EXPERIMENT_PACKAGE")])


def _external_ids(elem: Optional[ET.Element], path: str) -> List[ExternalId]:
    if elem is None:
        return []
    return [
        ExternalId(namespace=_attr(node, "namespace"), value=_text(node))
        for node in elem.findall(path)
    ]


def _package(elem: ET.Element) -> Package:
    org_elem = elem.find("Organization")
    return Package(
        experiment=_experiment(elem.find("EXPERIMENT")),
        sample=_sample(elem.find("SAMPLE")),
        runs=[_run(r) for r in elem.findall("RUN_SET/RUN")],
        platform=_platform(elem),
        organization=_organization(org_elem) if org_elem is not None else None,
        release_date=_text(elem, "ReleaseDate"),
        load_date=_text(elem, "LoadDate"),
    )


def _experiment(elem: Optional[ET.Element]) -> Experiment:
    if elem is None:
        return Experiment()
    lib = elem.find("DESIGN/LIBRARY_DESCRIPTOR")
    return Experiment(
        accession=_attr(elem, "accession"),
        title=_text(elem, "TITLE"),
        library=LibraryDescriptor(
            strategy=_text(lib, "LIBRARY_STRATEGY"),
            source=_text(lib, "LIBRARY_SOURCE"),
            selection=_text(lib, "LIBRARY_SELECTION"),
        ),
        study_ids=_external_ids(elem, "STUDY_REF/IDENTIFIERS/EXTERNAL_ID"),
    )


def _sample(elem: Optional[ET.Element]) -> Sample:
    if elem is None:
        return Sample()
    attributes = [
        SampleAttribute(tag=_text(node, "TAG"), value=_text(node, "VALUE"))
        for node in elem.findall("SAMPLE_ATTRIBUTES/SAMPLE_ATTRIBUTE")
    ]
    return Sample(
        accession=_attr(elem, "accession"),
        title=_text(elem, "TITLE"),
        identifiers=_external_ids(elem, "IDENTIFIERS/EXTERNAL_ID"),
        attributes=attributes,
    )


def _run(elem: ET.Element) -> Run:
    return Run(
        accession=_attr(elem, "accession"),
        total_spots=_attr(elem, "total_spots"),
        total_bases=_attr(elem, "total_bases"),
        load_date=_attr(elem, "load_date"),
        release_date=_attr(elem, "published"),
    )


def _platform(package_elem: ET.Element) -> Platform:
    # efetch nests PLATFORM inside EXPERIMENT; older dumps put it on the package
    platform = package_elem.find("EXPERIMENT/PLATFORM")
    if platform is None:
        platform = package_elem.find("PLATFORM")
    if platform is None or len(platform) == 0:
        return Platform()
    vendor = platform[0]
    return Platform(name=vendor.tag, instrument_model=_text(vendor, "INSTRUMENT_MODEL"))


def _organization(elem: ET.Element) -> Organization:
    return Organization(
        name=_text(elem, "Name"),
        type=_attr(elem, "type") or _text(elem, "Type"),
    )
