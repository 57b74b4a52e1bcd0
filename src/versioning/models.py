"""Data models for Maven version expressions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class RequirementKind(Enum):
    """How a declared version constrains resolution."""
    SOFT = "soft"
    HARD = "hard"
    RANGE = "range"


@dataclass(frozen=True)
class VersionBound:
    """One end of a Maven version range."""
    version: str
    inclusive: bool


@dataclass(frozen=True)
class VersionRange:
    """A single bracketed interval such as ``[1.0,2.0)``; a missing bound is open."""
    lower: Optional[VersionBound]
    upper: Optional[VersionBound]


@dataclass(frozen=True)
class VersionRequirement:
    """Classified version expression.

    ``version`` is the usable version text: the plain string for SOFT, the
    bracket-stripped pin for HARD, and a representative bound for RANGE.
    ``ranges`` holds the parsed intervals for RANGE requirements.
    """
    raw: str
    kind: RequirementKind
    version: str
    ranges: Tuple[VersionRange, ...] = ()

    @property
    def is_soft(self) -> bool:
        """True when a dependency-management entry may override this version."""
        return self.kind == RequirementKind.SOFT
