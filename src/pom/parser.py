"""Effective-POM orchestration: parse a manifest tree into a flat library list."""
from __future__ import annotations

import logging
import os
from typing import IO, List, Optional, Sequence, Tuple, Union

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from registry.maven.client import RepositoryLocator

from .decoder import decode, decode_file
from .errors import CyclicManifestError
from .management import ManagementMerger
from .models import EffectiveManifest, Library, Manifest
from .parent import ParentResolver
from .resolver import VersionResolver

logger = logging.getLogger(__name__)


class _Resolution:
    """Collaborators shared by every manifest resolved during one ``parse`` call."""

    def __init__(self, parser: "Parser"):
        self.locator = RepositoryLocator(
            parser.local_repository, parser.remote_repositories, session=parser.session
        )
        self.parents = ParentResolver(self.locator, strict=parser.strict_properties)
        self.management = ManagementMerger(self.locator, self.parents, strict=parser.strict_properties)
        self.versions = VersionResolver(
            self.locator, verify=parser.verify_dependencies, excluded_scopes=parser.excluded_scopes
        )
        self.strict = parser.strict_properties

    def effective(self, manifest: Manifest) -> EffectiveManifest:
        model = self.parents.inherit(manifest)
        management = self.management.merge(model)
        resolver = model.resolver(self.strict)
        dependencies = self.versions.resolve_all(model.dependencies, management, resolver)
        return EffectiveManifest(
            coordinate=model.coordinate,
            properties=dict(model.properties),
            management=management,
            dependencies=tuple(dependencies),
            modules=manifest.modules,
            path=manifest.path,
        )


class Parser:
    """Resolve a POM, its parents, imports and modules into ``Library`` entries.

    Args:
        path: Filesystem location of the root POM; parents given by relative
            path and modules are looked up next to it.
        local_repository: Root of a Maven-layout directory, or None to disable.
        remote_repositories: Base URLs tried in order after the local repository.
        verify_dependencies: Fail when a resolved dependency is not in any repository.
        excluded_scopes: Dependency scopes left out of the result.
        strict_properties: Raise on unresolved ``${...}`` placeholders.
        session: Optional ``requests.Session`` for remote lookups.
    """

    def __init__(
        self,
        path: str,
        local_repository: Optional[str] = None,
        remote_repositories: Sequence[str] = (),
        verify_dependencies: bool = True,
        excluded_scopes: Sequence[str] = (),
        strict_properties: bool = False,
        session: Optional[requests.Session] = None,
    ):
        self.path = path
        self.local_repository = local_repository
        self.remote_repositories = list(remote_repositories)
        self.verify_dependencies = verify_dependencies
        self.excluded_scopes = tuple(excluded_scopes)
        self.strict_properties = strict_properties
        self.session = session

    def parse(self, stream: IO[Union[bytes, str]]) -> List[Library]:
        """Parse the root POM read from ``stream``.

        Returns:
            The root's libraries followed by each module's, in declaration order.

        Raises:
            ArtifactNotFoundError: a parent, import or dependency is missing.
            FileNotFoundError: a declared module directory does not exist.
            MalformedManifestError: a document is not a usable POM.
        """
        data = stream.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        manifest = decode(data, source=self.path, path=self.path)
        resolution = _Resolution(self)
        with Timer() as timer:
            libraries = self._resolve_tree(manifest, resolution, ())
        logger.info(
            "Resolved %d libraries from %s",
            len(libraries),
            self.path,
            extra=extra_context(
                event="function_exit", component="parser", action="parse",
                duration_ms=timer.duration_ms(), count=resolution.locator.fetch_count,
            ),
        )
        return libraries

    def parse_file(self) -> List[Library]:
        """Parse the POM at ``self.path``."""
        with open(self.path, "rb") as fh:
            return self.parse(fh)

    def _resolve_tree(
        self,
        manifest: Manifest,
        resolution: _Resolution,
        open_paths: Tuple[str, ...],
    ) -> List[Library]:
        real = os.path.realpath(manifest.path) if manifest.path else None
        if real is not None and real in open_paths:
            raise CyclicManifestError(manifest.path, "module refers back to an enclosing project")
        stack = open_paths + ((real,) if real else ())

        effective = resolution.effective(manifest)
        libraries = list(effective.libraries())
        if is_debug_enabled(logger):
            logger.debug(
                "Manifest resolved",
                extra=extra_context(
                    event="function_exit", component="parser", action="effective",
                    target=str(effective.coordinate), count=len(effective.dependencies),
                ),
            )

        base = os.path.dirname(manifest.path) if manifest.path else ""
        for module in effective.modules:
            module_manifest = decode_file(self._module_pom(base, module))
            libraries.extend(self._resolve_tree(module_manifest, resolution, stack))
        return libraries

    @staticmethod
    def _module_pom(base: str, module: str) -> str:
        """Locate a module's POM; a missing module raises the native stat error."""
        module_path = os.path.join(base, module)
        if os.path.isdir(module_path):
            return os.path.join(module_path, Constants.POM_XML_FILE)
        os.stat(module_path)
        return module_path


def parse(
    path: str,
    local_repository: Optional[str] = None,
    remote_repositories: Sequence[str] = (),
    **options,
) -> List[Library]:
    """Convenience wrapper: parse the POM file at ``path``."""
    return Parser(path, local_repository, remote_repositories, **options).parse_file()
