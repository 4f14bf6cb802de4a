"""Post-decode resolution of values scattered across a package.

A :class:`Rule` pairs a *locator* (which list of ``(key, value)`` candidates
to look at) with a *predicate* on the key. A rule yields the value of the
first candidate whose key matches, even if that value is empty. A chain of
rules is evaluated in order and stops at the first non-empty result.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from sra_harvester.models import Package, PackageSet

Candidate = Tuple[str, str]
Locator = Callable[[Package], Iterable[Candidate]]
Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class Rule:
    locator: Locator
    predicate: Predicate

    def apply(self, package: Package) -> Optional[str]:
        for key, value in self.locator(package):
            if self.predicate(key):
                return value
        return None


def resolve(package: Package, rules: Sequence[Rule]) -> str:
    for rule in rules:
        value = rule.apply(package)
        if value:
            return value
    return ""


# --- Locators ---

def study_external_ids(package: Package) -> List[Candidate]:
    return [(i.namespace, i.value) for i in package.experiment.study_ids]


def experiment_bioproject(package: Package) -> List[Candidate]:
    return [("BioProject", package.experiment.bioproject)]


def sample_external_ids(package: Package) -> List[Candidate]:
    return [(i.namespace, i.value) for i in package.sample.identifiers]


def sample_attributes(package: Package) -> List[Candidate]:
    return [(a.tag, a.value) for a in package.sample.attributes]


def organization_name(package: Package) -> List[Candidate]:
    if package.organization is None:
        return []
    return [("Name", package.organization.name)]


# --- Predicates ---

def namespace_is(namespace: str) -> Predicate:
    return lambda key: key == namespace


def tag_is(tag: str) -> Predicate:
    """Case-insensitive attribute tag match."""
    wanted = tag.casefold()
    return lambda key: key.casefold() == wanted


def any_key(key: str) -> bool:
    return True


# --- Rule chains ---

BIOPROJECT_RULES = (
    Rule(experiment_bioproject, any_key),
    Rule(sample_external_ids, namespace_is("BioProject")),
    Rule(sample_attributes, tag_is("bioproject")),
)

SUBMITTER_RULES = (
    Rule(organization_name, any_key),
    Rule(sample_attributes, tag_is("submitter")),
    Rule(sample_attributes, tag_is("submitted_by")),
    Rule(sample_attributes, tag_is("center_name")),
)

BIOSAMPLE_RULES = (Rule(sample_external_ids, namespace_is("BioSample")),)


def sample_attribute(package: Package, tag: str) -> str:
    return Rule(sample_attributes, tag_is(tag)).apply(package) or ""


def resolve_experiment(package: Package) -> None:
    """Set ``experiment.bioproject`` from the study reference identifiers."""
    value = Rule(study_external_ids, namespace_is("BioProject")).apply(package)
    package.experiment.bioproject = (value or "").strip()


def resolve_package_set(package_set: PackageSet) -> PackageSet:
    for package in package_set.packages:
        resolve_experiment(package)
    return package_set
