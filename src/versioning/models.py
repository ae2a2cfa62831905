"""Data models for versions and version constraints."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import semantic_version


class Operator(Enum):
    """Comparison operators a constraint term may carry."""
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    EQ = "="
    NE = "!="


@dataclass(frozen=True)
class ParsedVersion:
    """A candidate version reduced to its numeric ordering key.

    ``raw`` is the string exactly as the caller supplied it; ``key`` holds the
    numeric MAJOR.MINOR.PATCH only, so suffixes never affect ordering.
    """
    raw: str
    key: semantic_version.Version
    suffix: str = ""


@dataclass(frozen=True)
class Comparator:
    """A single ``<op> <version>`` term."""
    operator: Operator
    version: semantic_version.Version

    def matches(self, version: semantic_version.Version) -> bool:
        if self.operator == Operator.GT:
            return version > self.version
        if self.operator == Operator.GTE:
            return version >= self.version
        if self.operator == Operator.LT:
            return version < self.version
        if self.operator == Operator.LTE:
            return version <= self.version
        if self.operator == Operator.NE:
            return version != self.version
        return version == self.version

    def __str__(self) -> str:
        return f"{self.operator.value}{self.version}"


@dataclass(frozen=True)
class Wildcard:
    """Matches every version whose leading components equal ``prefix``.

    An empty prefix matches everything, or nothing when negated.
    """
    prefix: Tuple[int, ...]
    negated: bool = False

    def matches(self, version: semantic_version.Version) -> bool:
        parts = (version.major, version.minor, version.patch)
        hit = parts[:len(self.prefix)] == self.prefix
        return not hit if self.negated else hit

    def __str__(self) -> str:
        text = ".".join(str(p) for p in self.prefix + ("*",)) if self.prefix else "*"
        return f"!={text}" if self.negated else text


Term = Union[Comparator, Wildcard]


@dataclass(frozen=True)
class ConstraintGroup:
    """Conjunction of terms; an empty group matches everything."""
    terms: Tuple[Term, ...]

    def matches(self, version: semantic_version.Version) -> bool:
        return all(term.matches(version) for term in self.terms)


@dataclass(frozen=True)
class Constraint:
    """Disjunction of groups parsed from ``raw``."""
    raw: str
    groups: Tuple[ConstraintGroup, ...]

    def matches(self, version: semantic_version.Version) -> bool:
        return any(group.matches(version) for group in self.groups)
