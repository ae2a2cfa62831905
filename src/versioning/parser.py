"""Parsing utilities for version strings and version constraints.

Constraint grammar::

    constraint := group ( ("," | "||") group )*
    group      := ( range | term )+              # AND of its terms
    range      := version "-" version            # inclusive both ends
    term       := [ op ] version
    op         := ">=" | "<=" | ">" | "<" | "=" | "!=" | "~" | "^"
    version    := [v] part ( "." part ){0,2} [ "-" pre ] [ "+" build ]
    part       := digits | "*" | "x" | "X"

An empty constraint, or ``*`` alone, matches every version.
"""

import re
from typing import List, Optional, Tuple

import semantic_version

from installer.errors import InvalidConstraintError
from .models import Comparator, Constraint, ConstraintGroup, Operator, ParsedVersion, Term, Wildcard

_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<or>\|\||,)
      | (?P<op>>=|<=|!=|>|<|=|~|\^)
      | (?P<version>[vV]?(?:\d+|[xX*])(?:\.(?:\d+|[xX*]))*(?:-[0-9A-Za-z.\-]+)?(?:\+[0-9A-Za-z.\-]+)?)
      | (?P<hyphen>-)
    )
    """,
    re.VERBOSE,
)

_CANDIDATE_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?([-+][0-9A-Za-z.+\-]*)?$")

_WILDCARDS = ("*", "x", "X")


def normalize_version(version: str) -> str:
    """Strip surrounding whitespace and a single leading ``v``."""
    s = version.strip()
    if s[:1] in ("v", "V"):
        return s[1:]
    return s


def parse_version(version: str) -> Optional[ParsedVersion]:
    """Parse a candidate version; return None when its numeric part is malformed.

    Missing minor/patch components count as zero. Pre-release and build
    suffixes are kept aside and never take part in ordering.
    """
    m = _CANDIDATE_RE.match(normalize_version(version))
    if not m:
        return None
    major, minor, patch, suffix = m.groups()
    key = semantic_version.Version(
        major=int(major),
        minor=int(minor or 0),
        patch=int(patch or 0),
    )
    return ParsedVersion(raw=version, key=key, suffix=suffix or "")


def _tokenize(text: str) -> List[Tuple[str, str]]:
    tokens: List[Tuple[str, str]] = []
    pos = 0
    end = len(text.rstrip())
    while pos < end:
        m = _TOKEN_RE.match(text, pos)
        if not m or m.end() == pos:
            raise InvalidConstraintError(
                f"Invalid version constraint '{text}': unexpected input at position {pos}"
            )
        kind = m.lastgroup
        tokens.append((kind, m.group(kind)))
        pos = m.end()
    return tokens


def _split_version(text: str) -> List[int]:
    """Return the numeric components preceding the first wildcard."""
    core = re.split(r"[-+]", normalize_version(text), maxsplit=1)[0]
    pieces = core.split(".")
    if len(pieces) > 3:
        raise InvalidConstraintError(f"Invalid version '{text}': too many components")
    parts: List[int] = []
    for piece in pieces:
        if piece in _WILDCARDS:
            break
        parts.append(int(piece))
    return parts


def _pad(parts: List[int]) -> semantic_version.Version:
    padded = list(parts) + [0] * (3 - len(parts))
    return semantic_version.Version(major=padded[0], minor=padded[1], patch=padded[2])


def _bump(parts: List[int]) -> semantic_version.Version:
    """Smallest version above every version sharing the prefix ``parts``."""
    if len(parts) == 1:
        return _pad([parts[0] + 1])
    return _pad([parts[0], parts[1] + 1])


def _expand_term(op: Optional[str], text: str) -> List[Term]:
    parts = _split_version(text)
    if not parts:
        # No version lies outside, above or below "every version"
        return [Wildcard((), negated=op in ("!=", "<", ">"))]
    exact = len(parts) == 3

    if op in (None, "="):
        return [Comparator(Operator.EQ, _pad(parts))] if exact else [Wildcard(tuple(parts))]
    if op == "!=":
        return [Comparator(Operator.NE, _pad(parts))] if exact else [Wildcard(tuple(parts), negated=True)]
    if op == "~":
        upper = _bump(parts[:2])
        return [Comparator(Operator.GTE, _pad(parts)), Comparator(Operator.LT, upper)]
    if op == "^":
        if parts[0] == 0 and len(parts) >= 2:
            upper = _bump(parts[:2])
        else:
            upper = _bump(parts[:1])
        return [Comparator(Operator.GTE, _pad(parts)), Comparator(Operator.LT, upper)]
    return [Comparator(Operator(op), _pad(parts))]


def _expand_range(lower_text: str, upper_text: str) -> List[Term]:
    terms: List[Term] = []
    lower = _split_version(lower_text)
    upper = _split_version(upper_text)
    if lower:
        terms.append(Comparator(Operator.GTE, _pad(lower)))
    if len(upper) == 3:
        terms.append(Comparator(Operator.LTE, _pad(upper)))
    elif upper:
        terms.append(Comparator(Operator.LT, _bump(upper)))
    return terms or [Wildcard(())]


class _ConstraintParser:
    """Recursive-descent parser over the token stream of one constraint."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.index = 0

    def _peek(self, offset: int = 0) -> Optional[Tuple[str, str]]:
        i = self.index + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def _next(self) -> Tuple[str, str]:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _error(self, message: str) -> InvalidConstraintError:
        return InvalidConstraintError(f"Invalid version constraint '{self.text}': {message}")

    def parse(self) -> Constraint:
        if not self.tokens:
            return Constraint(raw=self.text, groups=(ConstraintGroup(()),))
        groups = [self._parse_group()]
        while self._peek() is not None:
            kind, _ = self._next()
            if kind != "or":
                raise self._error("expected ',' or '||'")
            groups.append(self._parse_group())
        return Constraint(raw=self.text, groups=tuple(groups))

    def _parse_group(self) -> ConstraintGroup:
        terms: List[Term] = []
        while self._peek() is not None and self._peek()[0] != "or":
            following = self._peek(1)
            if self._peek()[0] == "version" and following is not None and following[0] == "hyphen":
                terms.extend(self._parse_range())
            else:
                terms.extend(self._parse_term())
        if not terms:
            raise self._error("empty alternative")
        return ConstraintGroup(tuple(terms))

    def _parse_range(self) -> List[Term]:
        _, lower = self._next()
        self._next()
        token = self._peek()
        if token is None or token[0] != "version":
            raise self._error("hyphen range needs an upper version")
        _, upper = self._next()
        return _expand_range(lower, upper)

    def _parse_term(self) -> List[Term]:
        op = None
        kind, value = self._next()
        if kind == "op":
            op = value
            token = self._peek()
            if token is None or token[0] != "version":
                raise self._error(f"operator '{op}' must be followed by a version")
            kind, value = self._next()
        if kind != "version":
            raise self._error(f"unexpected '{value}'")
        return _expand_term(op, value)


def parse_constraint(text: str) -> Constraint:
    """Parse constraint text into an OR-of-ANDs ``Constraint``.

    Raises:
        InvalidConstraintError: when ``text`` does not follow the grammar.
    """
    return _ConstraintParser(text or "").parse()
