"""Strict ``MAJOR.MINOR.PATCH`` version parsing and ordering.

Only bare three-component dotted integer triples are accepted, optionally
prefixed with a single ``v``.  Pre-release tags, build metadata, missing
components and surrounding whitespace are all rejected.
"""

from __future__ import annotations

import re
from enum import IntEnum
from typing import NamedTuple

from entwine.core.errors import InvalidVersionError

_VERSION_RE = re.compile(r"v?(?P<major>[0-9]+)\.(?P<minor>[0-9]+)\.(?P<patch>[0-9]+)")


class Ordering(IntEnum):
    """Result of :func:`compare`."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


class Version(NamedTuple):
    """A parsed version.  Tuple ordering is numeric ``(major, minor, patch)``."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(raw: str) -> Version:
    """Parse *raw* into a :class:`Version`.

    Raises
    ------
    InvalidVersionError
        If *raw* is not a string of the form ``[v]MAJOR.MINOR.PATCH``.
    """
    if not isinstance(raw, str):
        raise InvalidVersionError(
            f"Version must be a string, got {type(raw).__name__}"
        )
    match = _VERSION_RE.fullmatch(raw)
    if match is None:
        raise InvalidVersionError(f"Invalid version {raw!r}: expected MAJOR.MINOR.PATCH")
    return Version(
        int(match.group("major")),
        int(match.group("minor")),
        int(match.group("patch")),
    )


def compare(a: str, b: str) -> Ordering:
    """Compare two version strings.

    >>> compare("2.0.0", "1.9.9")
    <Ordering.GREATER: 1>
    >>> compare("v1.2.3", "1.2.3")
    <Ordering.EQUAL: 0>
    """
    left = parse_version(a)
    right = parse_version(b)
    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL


def is_newer(candidate: str, current: str) -> bool:
    """Return ``True`` if *candidate* is strictly greater than *current*."""
    return compare(candidate, current) is Ordering.GREATER
