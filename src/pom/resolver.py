"""Final version selection for dependency declarations."""
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Sequence

from common.logging_utils import extra_context, is_debug_enabled
from registry.maven.client import RepositoryLocator
from versioning import RequirementKind, VersionRequirement, classify, pick_highest

from .errors import ArtifactNotFoundError
from .management import interpolate_dependency
from .models import Coordinate, Dependency
from .properties import PropertyResolver

logger = logging.getLogger(__name__)

# Scopes whose artifacts are never published to a repository
_UNVERIFIABLE_SCOPES = {"system"}


class VersionResolver:
    """Apply soft/hard requirement precedence against a management table.

    Args:
        locator: Repository access for range metadata and verification.
        verify: Look up every resolved coordinate and fail when it is missing.
            Skipped when the locator has no repository configured.
        excluded_scopes: Scopes dropped from the result after resolution.
    """

    def __init__(
        self,
        locator: RepositoryLocator,
        verify: bool = True,
        excluded_scopes: Sequence[str] = (),
    ):
        self.locator = locator
        self.verify = verify
        self.excluded_scopes = set(excluded_scopes)

    def _requirement_version(self, dep: Dependency, requirement: VersionRequirement) -> str:
        if requirement.kind != RequirementKind.RANGE:
            return requirement.version
        candidates = self.locator.versions(dep.group_id, dep.artifact_id) if self.locator.has_sources else []
        picked = pick_highest(requirement, candidates)
        if is_debug_enabled(logger):
            logger.debug(
                "Range requirement resolved",
                extra=extra_context(
                    event="decision", component="resolver", action="pick_range",
                    target=dep.ga, spec=requirement.raw, outcome="matched" if picked else "fallback",
                    candidate_count=len(candidates),
                ),
            )
        return picked or requirement.version

    def resolve(
        self,
        dep: Dependency,
        management: Mapping[str, Dependency],
        resolver: PropertyResolver,
    ) -> Dependency:
        """Return ``dep`` with its final version (and inherited managed scope).

        Raises:
            ArtifactNotFoundError: no version can be determined, or the
                resolved coordinate is missing from the repositories.
        """
        dep = interpolate_dependency(dep, resolver)
        managed = management.get(dep.ga)
        requirement = classify(dep.version)

        if requirement is not None and not requirement.is_soft:
            final = self._requirement_version(dep, requirement)
        else:
            managed_requirement = classify(managed.version) if managed is not None else None
            if managed_requirement is not None:
                final = self._requirement_version(dep, managed_requirement)
            elif requirement is not None:
                final = requirement.version
            else:
                raise ArtifactNotFoundError(Coordinate(dep.group_id, dep.artifact_id, dep.version or ""))

        scope = dep.scope
        if scope is None and managed is not None:
            scope = managed.scope
        resolved = Dependency(
            group_id=dep.group_id,
            artifact_id=dep.artifact_id,
            version=final,
            scope=scope,
            type=dep.type,
            classifier=dep.classifier,
            optional=dep.optional,
        )
        if is_debug_enabled(logger):
            logger.debug(
                "Dependency resolved",
                extra=extra_context(
                    event="decision", component="resolver", action="resolve",
                    target=str(resolved), spec=dep.version,
                    outcome="managed" if managed is not None else "declared",
                ),
            )
        return resolved

    def _verify(self, dep: Dependency) -> None:
        if not self.verify or not self.locator.has_sources or dep.scope in _UNVERIFIABLE_SCOPES:
            return
        self.locator.locate(dep.coordinate())

    def resolve_all(
        self,
        dependencies: Iterable[Dependency],
        management: Mapping[str, Dependency],
        resolver: PropertyResolver,
    ) -> List[Dependency]:
        """Resolve, filter by scope, and verify declarations in order."""
        resolved: List[Dependency] = []
        for dep in dependencies:
            final = self.resolve(dep, management, resolver)
            if final.scope in self.excluded_scopes:
                logger.debug("Skipping %s (scope %s)", final, final.scope)
                continue
            self._verify(final)
            resolved.append(final)
        return resolved
