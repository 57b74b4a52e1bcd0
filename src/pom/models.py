"""Data model for manifests, effective manifests and output libraries."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from constants import Constants


@dataclass(frozen=True)
class Coordinate:
    """groupId:artifactId:version identifying one published artifact."""
    group_id: str
    artifact_id: str
    version: str

    @property
    def ga(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass(frozen=True)
class Parent:
    """A ``<parent>`` reference.

    ``relative_path`` is None when the filesystem lookup is disabled by an
    empty ``<relativePath/>``.
    """
    group_id: str
    artifact_id: str
    version: str
    relative_path: Optional[str] = Constants.DEFAULT_RELATIVE_PATH

    @property
    def ga(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def coordinate(self, version: Optional[str] = None) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id, version or self.version)


@dataclass(frozen=True)
class Dependency:
    """A ``<dependency>`` declaration from a dependency or management list."""
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    scope: Optional[str] = None
    type: str = Constants.DEFAULT_DEPENDENCY_TYPE
    classifier: Optional[str] = None
    optional: bool = False

    @property
    def ga(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def is_import(self) -> bool:
        """True for management entries that splice in another POM's management table."""
        return self.scope == "import" and self.type == "pom"

    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id, self.version or "")

    def __str__(self) -> str:
        return f"{self.ga}:{self.version or ''}"


@dataclass(frozen=True)
class Manifest:
    """One decoded POM document. Coordinate fields may be missing until inherited."""
    artifact_id: str
    group_id: Optional[str] = None
    version: Optional[str] = None
    packaging: str = "jar"
    parent: Optional[Parent] = None
    properties: Mapping[str, str] = field(default_factory=dict)
    dependencies: Tuple[Dependency, ...] = ()
    dependency_management: Tuple[Dependency, ...] = ()
    modules: Tuple[str, ...] = ()
    path: Optional[str] = None

    @property
    def directory(self) -> Optional[str]:
        """Directory holding the manifest on disk, or None for repository documents."""
        if self.path is None:
            return None
        return os.path.dirname(os.path.abspath(self.path))


@dataclass(frozen=True)
class EffectiveManifest:
    """A manifest after parent, import and property merging."""
    coordinate: Coordinate
    properties: Mapping[str, str]
    management: Mapping[str, Dependency]
    dependencies: Tuple[Dependency, ...]
    modules: Tuple[str, ...] = ()
    path: Optional[str] = None

    def libraries(self) -> Tuple["Library", ...]:
        """The manifest itself followed by each resolved dependency."""
        own = Library(self.coordinate.ga, self.coordinate.version)
        return (own,) + tuple(Library(dep.ga, dep.version or "") for dep in self.dependencies)


@dataclass(frozen=True)
class Library:
    """Output unit: ``name`` is ``groupId:artifactId``."""
    name: str
    version: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "version": self.version}
