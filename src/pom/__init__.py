"""Effective Maven POM resolution.

This package turns a POM tree into a flat list of libraries:
- decoder.py: XML → Manifest
- properties.py: ${...} interpolation
- parent.py: parent chain lookup and inheritance assembly
- management.py: dependencyManagement merging and BOM imports
- resolver.py: soft/hard/range version precedence
- parser.py: Parser orchestrating the above and recursing into modules

``Parser`` lives in ``pom.parser``; it is not re-exported here because the
repository client imports this package's errors and models.
"""

from .errors import (  # noqa: F401
    ArtifactNotFoundError,
    CyclicManifestError,
    ErrorKind,
    MalformedManifestError,
    PomError,
    UnresolvedPropertyError,
)
from .models import (  # noqa: F401
    Coordinate,
    Dependency,
    EffectiveManifest,
    Library,
    Manifest,
    Parent,
)

__all__ = [
    "ArtifactNotFoundError",
    "CyclicManifestError",
    "ErrorKind",
    "MalformedManifestError",
    "PomError",
    "UnresolvedPropertyError",
    "Coordinate",
    "Dependency",
    "EffectiveManifest",
    "Library",
    "Manifest",
    "Parent",
]
