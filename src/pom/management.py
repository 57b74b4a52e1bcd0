"""Effective dependency-management tables, including ``import``-scoped BOMs."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from registry.maven.client import RepositoryLocator

from .decoder import decode
from .errors import CyclicManifestError
from .models import Coordinate, Dependency
from .parent import InheritedModel, ParentResolver
from .properties import PropertyResolver

logger = logging.getLogger(__name__)


def interpolate_dependency(dep: Dependency, resolver: PropertyResolver) -> Dependency:
    """Return ``dep`` with placeholders in its coordinate fields resolved."""
    return replace(
        dep,
        group_id=resolver.resolve(dep.group_id) or dep.group_id,
        artifact_id=resolver.resolve(dep.artifact_id) or dep.artifact_id,
        version=resolver.resolve(dep.version),
        scope=resolver.resolve(dep.scope),
        type=resolver.resolve(dep.type) or dep.type,
        classifier=resolver.resolve(dep.classifier),
    )


class ManagementMerger:
    """Build one GA-keyed management table for an inherited model.

    Precedence, highest first: the manifest's own direct entries, its
    imports in declaration order, then each ancestor's section (nearest
    first, expanded the same way). Imported entries are spliced in at the
    position of the import that brought them.
    """

    def __init__(self, locator: RepositoryLocator, parents: ParentResolver, strict: bool = False):
        self.locator = locator
        self.parents = parents
        self.strict = strict
        self._imports: Dict[Coordinate, Dict[str, Dependency]] = {}

    def merge(self, model: InheritedModel) -> Dict[str, Dependency]:
        return self._merge(model, model.resolver(self.strict), (model.coordinate,))

    def _merge(
        self,
        model: InheritedModel,
        resolver: PropertyResolver,
        stack: Tuple[Coordinate, ...],
    ) -> Dict[str, Dependency]:
        table: Dict[str, Dependency] = {}
        for section in model.management_layers:
            entries = [interpolate_dependency(dep, resolver) for dep in section]
            direct = {dep.ga for dep in entries if not dep.is_import}
            for dep in entries:
                if not dep.is_import:
                    table.setdefault(dep.ga, dep)
                    continue
                for ga, imported in self._imported(dep, stack).items():
                    if ga not in direct and ga not in table:
                        table[ga] = imported
        return table

    def _imported(self, entry: Dependency, stack: Tuple[Coordinate, ...]) -> Dict[str, Dependency]:
        coordinate = entry.coordinate()
        cached = self._imports.get(coordinate)
        if cached is not None:
            return cached
        if coordinate in stack:
            raise CyclicManifestError(str(stack[0]), f"cyclic dependencyManagement import of {coordinate}")
        if len(stack) > Constants.MAX_IMPORT_DEPTH:
            raise CyclicManifestError(
                str(stack[0]), f"dependencyManagement imports exceed {Constants.MAX_IMPORT_DEPTH} levels"
            )

        if is_debug_enabled(logger):
            logger.debug(
                "Expanding import",
                extra=extra_context(
                    event="function_entry", component="management", action="import",
                    target=str(coordinate), depth=len(stack),
                ),
            )
        # Imported BOMs are interpolated in their own context, not the importer's
        bom = decode(self.locator.locate(coordinate), source=str(coordinate))
        model = self.parents.inherit(bom)
        table = self._merge(model, model.resolver(self.strict), stack + (coordinate,))
        self._imports[coordinate] = table
        return table
