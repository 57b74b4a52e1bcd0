"""Maven version range matching against published candidate versions."""

from typing import Iterable, List, Optional

from packaging import version

from .models import VersionBound, VersionRange, VersionRequirement


def _parse(text: str) -> Optional[version.Version]:
    try:
        return version.Version(text)
    except version.InvalidVersion:
        return None


def _satisfies_lower(candidate: version.Version, bound: Optional[VersionBound]) -> bool:
    if bound is None:
        return True
    limit = _parse(bound.version)
    if limit is None:
        return False
    return candidate >= limit if bound.inclusive else candidate > limit


def _satisfies_upper(candidate: version.Version, bound: Optional[VersionBound]) -> bool:
    if bound is None:
        return True
    limit = _parse(bound.version)
    if limit is None:
        return False
    return candidate <= limit if bound.inclusive else candidate < limit


def in_range(candidate: str, interval: VersionRange) -> bool:
    """Return True when ``candidate`` falls inside ``interval``."""
    parsed = _parse(candidate)
    if parsed is None:
        return False
    return _satisfies_lower(parsed, interval.lower) and _satisfies_upper(parsed, interval.upper)


def matching_versions(requirement: VersionRequirement, candidates: Iterable[str]) -> List[str]:
    """Filter candidates by the union of the requirement's intervals.

    Candidates that ``packaging`` cannot parse (e.g. ``-SNAPSHOT``) are skipped.
    """
    return [
        candidate
        for candidate in candidates
        if any(in_range(candidate, interval) for interval in requirement.ranges)
    ]


def pick_highest(requirement: VersionRequirement, candidates: Iterable[str]) -> Optional[str]:
    """Return the highest candidate satisfying the requirement, or None."""
    matching = matching_versions(requirement, candidates)
    if not matching:
        return None
    return max(matching, key=version.Version)
