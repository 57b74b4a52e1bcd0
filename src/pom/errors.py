"""Error taxonomy for effective-POM resolution.

Missing module directories are deliberately not represented here: the native
``FileNotFoundError`` raised by the filesystem is propagated unchanged.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from .models import Coordinate


class ErrorKind(Enum):
    """Closed set of failure kinds surfaced by ``Parser.parse``."""
    COORDINATE_NOT_FOUND = "coordinate_not_found"
    PATH_NOT_FOUND = "path_not_found"
    MALFORMED = "malformed"
    UNRESOLVED_PROPERTY = "unresolved_property"


class PomError(Exception):
    """Base class for resolution failures."""

    kind: ErrorKind = ErrorKind.MALFORMED


class ArtifactNotFoundError(PomError, LookupError):
    """A coordinate is absent from every configured local/remote repository."""

    kind = ErrorKind.COORDINATE_NOT_FOUND

    def __init__(self, coordinate: Coordinate):
        super().__init__(coordinate)
        self.coordinate = coordinate

    def __str__(self) -> str:
        return f"{self.coordinate} was not found in local/remote repositories"


class MalformedManifestError(PomError, ValueError):
    """A manifest cannot be decoded into a usable model."""

    kind = ErrorKind.MALFORMED

    def __init__(self, source: Optional[str], reason: str):
        super().__init__(source, reason)
        self.source = source
        self.reason = reason

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.reason}"
        return self.reason


class CyclicManifestError(MalformedManifestError):
    """A manifest is reachable from itself through parents, imports or modules."""


class UnresolvedPropertyError(PomError, KeyError):
    """Raised in strict property mode when a placeholder has no value."""

    kind = ErrorKind.UNRESOLVED_PROPERTY

    def __init__(self, key: str, text: str):
        super().__init__(key, text)
        self.key = key
        self.text = text

    def __str__(self) -> str:
        return f"property '{self.key}' is not defined (in '{self.text}')"
