"""Dependency version ordering used for classpath conflict resolution."""

import re
from functools import cmp_to_key


_SEPARATORS = re.compile(r"[.\-_+]")


def _parts(version: str) -> list[int | str]:
    return [
        int(part) if part.isdecimal() else part.lower()
        for part in _SEPARATORS.split(version)
        if part
    ]


def compare_versions(left: str, right: str) -> int:
    """Compare two dependency versions the way Gradle orders them.

    Numeric parts compare numerically and rank above qualifiers, and a
    trailing qualifier marks a pre-release (``1.0-alpha01`` < ``1.0``).

    Returns:
        Negative if ``left`` is older, zero if equal, positive if newer
    """
    left_parts, right_parts = _parts(left), _parts(right)
    for a, b in zip(left_parts, right_parts, strict=False):
        if a == b:
            continue
        if isinstance(a, int) and isinstance(b, int):
            return a - b
        if isinstance(a, int):
            return 1
        if isinstance(b, int):
            return -1
        return -1 if a < b else 1

    if len(left_parts) == len(right_parts):
        return 0
    if len(left_parts) > len(right_parts):
        longer, sign = left_parts, 1
    else:
        longer, sign = right_parts, -1
    extra = longer[min(len(left_parts), len(right_parts))]
    return sign if isinstance(extra, int) else -sign


version_key = cmp_to_key(compare_versions)


def coordinate_version(coordinate: str) -> str:
    """Return the version part of ``group:artifact:version``, or an empty string."""
    parts = coordinate.split(":")
    return parts[2] if len(parts) > 2 else ""
