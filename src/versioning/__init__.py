"""Version parsing and constraint matching.

- parser.py: version normalization and the constraint grammar
- matcher.py: best-match selection, comparison and constraint merging
"""

from .matcher import best_match, compare_versions, is_version_matching, merge_constraints
from .parser import normalize_version, parse_constraint, parse_version

__all__ = [
    "best_match",
    "compare_versions",
    "is_version_matching",
    "merge_constraints",
    "normalize_version",
    "parse_constraint",
    "parse_version",
]
