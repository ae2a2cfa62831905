"""Version matching: pick the best candidate for a constraint."""

import logging
from typing import Iterable, List, Optional, Union

from common.logging_utils import extra_context, is_debug_enabled
from .models import Constraint, ParsedVersion
from .parser import parse_constraint, parse_version

logger = logging.getLogger(__name__)

ConstraintLike = Union[str, Constraint]


def _as_constraint(constraint: ConstraintLike) -> Constraint:
    if isinstance(constraint, Constraint):
        return constraint
    return parse_constraint(constraint)


def compare_versions(left: str, right: str) -> int:
    """Compare two versions numerically, returning -1, 0 or 1.

    Raises:
        ValueError: if either version is malformed.
    """
    a, b = parse_version(left), parse_version(right)
    if a is None or b is None:
        raise ValueError(f"Cannot compare malformed versions '{left}' and '{right}'")
    if a.key < b.key:
        return -1
    if a.key > b.key:
        return 1
    return 0


def is_version_matching(version: Optional[str], constraint: ConstraintLike) -> bool:
    """Return True when ``version`` satisfies ``constraint``.

    A missing or malformed version never matches.
    """
    if not version:
        return False
    parsed = parse_version(version)
    if parsed is None:
        return False
    return _as_constraint(constraint).matches(parsed.key)


def best_match(constraint: ConstraintLike, candidates: Iterable[str]) -> Optional[str]:
    """Return the highest candidate satisfying ``constraint``, or None.

    Malformed candidates are skipped. Among numerically equal candidates the
    one without a pre-release/build suffix wins, then the earliest given. The
    returned string is always one of ``candidates``, unchanged.

    Raises:
        InvalidConstraintError: if ``constraint`` cannot be parsed.
    """
    spec = _as_constraint(constraint)

    matching: List[ParsedVersion] = []
    skipped = 0
    total = 0
    for candidate in candidates:
        total += 1
        parsed = parse_version(candidate)
        if parsed is None:
            skipped += 1
            continue  # Skip invalid versions
        if spec.matches(parsed.key):
            matching.append(parsed)

    if is_debug_enabled(logger):
        logger.debug(
            "Matched candidates",
            extra=extra_context(
                event="decision",
                component="matcher",
                action="best_match",
                outcome="match" if matching else "no_match",
                constraint=spec.raw,
                candidate_count=total,
                matching_count=len(matching),
                skipped_count=skipped
            )
        )

    if not matching:
        return None

    # max() keeps the first of equal keys, so earlier candidates win ties
    best = max(matching, key=lambda p: (p.key, not p.suffix))
    return best.raw


def merge_constraints(fragments: Iterable[Optional[str]]) -> str:
    """Fold declared constraint fragments into one OR expression.

    Blank fragments are dropped; with nothing left the result is ``*``.
    """
    kept = [f.strip() for f in fragments if f and f.strip()]
    if not kept:
        return "*"
    return ", ".join(kept)
