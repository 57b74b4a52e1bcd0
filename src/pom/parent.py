"""Parent chain resolution and inheritance assembly."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from registry.maven.client import RepositoryLocator

from .decoder import decode, decode_file
from .errors import CyclicManifestError, MalformedManifestError
from .models import Coordinate, Dependency, Manifest, Parent
from .properties import PropertyResolver, layer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InheritedModel:
    """A manifest merged with its ancestors, before management and version resolution.

    ``management_layers`` holds each manifest's own management section,
    the manifest itself first and then its ancestors nearest first.
    """
    manifest: Manifest
    chain: Tuple[Manifest, ...]
    coordinate: Coordinate
    properties: Dict[str, str]
    management_layers: Tuple[Tuple[Dependency, ...], ...]
    dependencies: Tuple[Dependency, ...]

    def resolver(self, strict: bool = False) -> PropertyResolver:
        return PropertyResolver(self.properties, self.coordinate, self.manifest.parent, strict=strict)


def _raw_key(manifest: Manifest) -> str:
    parent = manifest.parent
    group = manifest.group_id or (parent.group_id if parent else "")
    version = manifest.version or (parent.version if parent else "")
    return f"{group}:{manifest.artifact_id}:{version}"


def _declared_group(manifest: Manifest) -> Optional[str]:
    if manifest.group_id:
        return manifest.group_id
    return manifest.parent.group_id if manifest.parent else None


def _declared_version(manifest: Manifest) -> Optional[str]:
    version = manifest.version or (manifest.parent.version if manifest.parent else None)
    return PropertyResolver(manifest.properties, parent=manifest.parent).resolve(version)


class ParentResolver:
    """Follow ``<parent>`` references through the filesystem and the repositories."""

    def __init__(self, locator: RepositoryLocator, strict: bool = False):
        self.locator = locator
        self.strict = strict

    def chain(self, manifest: Manifest) -> List[Manifest]:
        """Return the ancestors of ``manifest``, immediate parent first.

        Raises:
            ArtifactNotFoundError: a parent is neither on disk nor in a repository.
            CyclicManifestError: a manifest is its own ancestor or the chain is too deep.
        """
        ancestors: List[Manifest] = []
        seen = {_raw_key(manifest)}
        current = manifest
        while current.parent is not None:
            if len(ancestors) >= Constants.MAX_PARENT_DEPTH:
                raise CyclicManifestError(
                    manifest.path or _raw_key(manifest),
                    f"parent chain exceeds {Constants.MAX_PARENT_DEPTH} levels",
                )
            parent = self._load_parent(current)
            key = _raw_key(parent)
            if key in seen:
                raise CyclicManifestError(
                    manifest.path or _raw_key(manifest), f"cyclic parent reference to {key}"
                )
            seen.add(key)
            ancestors.append(parent)
            current = parent
        return ancestors

    def _load_parent(self, child: Manifest) -> Manifest:
        declared = child.parent
        assert declared is not None
        version = PropertyResolver(child.properties, parent=declared).resolve(declared.version) or ""
        from_disk = self._from_relative_path(child, declared, version)
        if from_disk is not None:
            return from_disk
        coordinate = declared.coordinate(version)
        data = self.locator.locate(coordinate)
        return decode(data, source=str(coordinate))

    def _from_relative_path(self, child: Manifest, declared: Parent, version: str) -> Optional[Manifest]:
        if not declared.relative_path or child.directory is None:
            return None
        candidate = os.path.normpath(os.path.join(child.directory, declared.relative_path))
        if os.path.isdir(candidate):
            candidate = os.path.join(candidate, Constants.POM_XML_FILE)
        if not os.path.isfile(candidate):
            return None
        try:
            parent = decode_file(candidate)
        except (OSError, MalformedManifestError) as exc:
            logger.warning("Ignoring unreadable parent at %s: %s", candidate, exc)
            return None
        if (
            _declared_group(parent) != declared.group_id
            or parent.artifact_id != declared.artifact_id
            or _declared_version(parent) != version
        ):
            if is_debug_enabled(logger):
                logger.debug(
                    "Relative parent does not match declared parent",
                    extra=extra_context(
                        event="decision", component="parent", action="relative_path",
                        outcome="mismatch", target=candidate, expected=f"{declared.ga}:{version}",
                    ),
                )
            return None
        return parent

    def inherit(self, manifest: Manifest, ancestors: Optional[List[Manifest]] = None) -> InheritedModel:
        """Merge ``manifest`` with its ancestors; nearer declarations win."""
        if ancestors is None:
            ancestors = self.chain(manifest)

        properties = layer(manifest.properties, [a.properties for a in ancestors])

        group = manifest.group_id or next((a.group_id for a in ancestors if a.group_id), None)
        version = manifest.version or next((a.version for a in ancestors if a.version), None)
        if manifest.parent is not None:
            group = group or manifest.parent.group_id
            version = version or manifest.parent.version
        interpolate = PropertyResolver(properties, parent=manifest.parent, strict=self.strict)
        coordinate = Coordinate(
            interpolate.resolve(group) or "",
            manifest.artifact_id,
            interpolate.resolve(version) or "",
        )

        dependencies: Dict[str, Dependency] = {}
        for source in list(reversed(ancestors)) + [manifest]:
            for dep in source.dependencies:
                dependencies[dep.ga] = dep

        if is_debug_enabled(logger):
            logger.debug(
                "Inheritance assembled",
                extra=extra_context(
                    event="function_exit", component="parent", action="inherit",
                    target=str(coordinate), count=len(ancestors),
                ),
            )
        return InheritedModel(
            manifest=manifest,
            chain=tuple(ancestors),
            coordinate=coordinate,
            properties=properties,
            management_layers=tuple(
                m.dependency_management for m in [manifest] + list(ancestors)
            ),
            dependencies=tuple(dependencies.values()),
        )
