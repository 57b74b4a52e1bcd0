"""Classification of Maven version expressions into soft, hard and range requirements."""

from typing import List, Optional, Tuple

from .models import RequirementKind, VersionBound, VersionRange, VersionRequirement

_OPENERS = "[("
_CLOSERS = "])"


def is_bracketed(spec: str) -> bool:
    """Return True when the expression uses Maven bracket/range syntax."""
    spec = spec.strip()
    return len(spec) >= 2 and spec[0] in _OPENERS and spec[-1] in _CLOSERS


def split_ranges(spec: str) -> List[str]:
    """Split a union like ``[1.0,2.0),[3.0,4.0]`` into its bracketed parts."""
    parts: List[str] = []
    current = ""
    depth = 0
    for char in spec.strip():
        if char in _OPENERS:
            if depth == 0:
                current = ""
            depth += 1
            current += char
        elif char in _CLOSERS:
            depth -= 1
            current += char
            if depth == 0:
                parts.append(current)
                current = ""
        elif depth > 0:
            current += char
        # separators between intervals are dropped
    if depth != 0:
        raise ValueError(f"Unbalanced version range '{spec}'")
    return parts


def parse_range(part: str) -> VersionRange:
    """Parse a single bracketed interval.

    ``[1.2]`` is an exact pin and yields equal inclusive bounds.
    """
    part = part.strip()
    if not is_bracketed(part):
        raise ValueError(f"Not a version range: '{part}'")
    inner = part[1:-1]
    lower_inclusive = part[0] == "["
    upper_inclusive = part[-1] == "]"
    if "," not in inner:
        pin = inner.strip()
        if not pin:
            raise ValueError(f"Empty version range '{part}'")
        bound = VersionBound(pin, True)
        return VersionRange(bound, bound)
    lower_text, upper_text = (text.strip() for text in inner.split(",", 1))
    lower = VersionBound(lower_text, lower_inclusive) if lower_text else None
    upper = VersionBound(upper_text, upper_inclusive) if upper_text else None
    return VersionRange(lower, upper)


def _representative(raw: str, ranges: Tuple[VersionRange, ...]) -> str:
    """Pick a stand-in version when no published candidates are known.

    Takes the first inclusive lower bound, else the first inclusive upper
    bound; a range with only exclusive bounds keeps its raw text.
    """
    for interval in ranges:
        if interval.lower is not None and interval.lower.inclusive:
            return interval.lower.version
    for interval in ranges:
        if interval.upper is not None and interval.upper.inclusive:
            return interval.upper.version
    return raw


def classify(spec: Optional[str]) -> Optional[VersionRequirement]:
    """Classify a (property-interpolated) version expression.

    Returns None when no version is declared. A single-element bracket such
    as ``[1.2.4]`` is a HARD requirement pinned to ``1.2.4``; any other
    bracketed expression is a RANGE; everything else is SOFT.
    """
    if spec is None:
        return None
    raw = spec.strip()
    if not raw:
        return None
    if not is_bracketed(raw):
        return VersionRequirement(raw=raw, kind=RequirementKind.SOFT, version=raw)

    try:
        ranges = tuple(parse_range(part) for part in split_ranges(raw))
    except ValueError:
        # Malformed brackets: keep the stripped text authoritative
        return VersionRequirement(raw=raw, kind=RequirementKind.HARD, version=raw.strip("[]()"))

    if len(ranges) == 1 and ranges[0].lower is not None and ranges[0].lower == ranges[0].upper:
        return VersionRequirement(
            raw=raw, kind=RequirementKind.HARD, version=ranges[0].lower.version, ranges=ranges
        )
    return VersionRequirement(
        raw=raw, kind=RequirementKind.RANGE, version=_representative(raw, ranges), ranges=ranges
    )
