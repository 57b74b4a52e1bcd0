"""Maven repository client: locate POM documents in local and remote repositories."""
from __future__ import annotations

import logging
import os
import threading
from typing import Dict, List, Optional, Sequence, Tuple

import requests

from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from pom.errors import ArtifactNotFoundError
from pom.models import Coordinate

import registry.maven as maven_pkg
from .discovery import (
    artifact_pom_path,
    artifact_pom_url,
    metadata_paths,
    metadata_url,
    parse_metadata_versions,
)

logger = logging.getLogger(__name__)

_MISSING = object()


class RepositoryLocator:
    """Fetch POM documents by coordinate.

    The local repository directory is tried first, then each remote base URL
    in declaration order. Lookups (hits and misses) are memoized for the
    lifetime of the locator, which ``Parser`` scopes to one ``parse`` call.
    Concurrent callers asking for the same coordinate share a single fetch.
    """

    def __init__(
        self,
        local_repository: Optional[str] = None,
        remote_repositories: Sequence[str] = (),
        session: Optional[requests.Session] = None,
    ):
        self.local_repository = local_repository
        self.remote_repositories = [url.rstrip("/") for url in remote_repositories]
        self._session = session
        self._cache: Dict[Coordinate, object] = {}
        self._versions_cache: Dict[Tuple[str, str], List[str]] = {}
        self._lock = threading.Lock()
        self._key_locks: Dict[object, threading.Lock] = {}
        self.fetch_count = 0

    @property
    def has_sources(self) -> bool:
        """True when at least one local or remote repository is configured."""
        return bool(self.local_repository) or bool(self.remote_repositories)

    def _key_lock(self, key: object) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def locate(self, coordinate: Coordinate) -> bytes:
        """Return the POM bytes for ``coordinate``.

        Raises:
            ArtifactNotFoundError: no configured repository has the document.
            OSError: the local file exists but cannot be read.
        """
        with self._key_lock(coordinate):
            cached = self._cache.get(coordinate, _MISSING)
            if cached is _MISSING:
                cached = self._fetch(coordinate)
                self._cache[coordinate] = cached
            elif is_debug_enabled(logger):
                logger.debug(
                    "POM cache hit",
                    extra=extra_context(
                        event="cache_hit", component="locator", action="locate",
                        target=str(coordinate), package_manager="maven",
                    ),
                )
        if cached is None:
            raise ArtifactNotFoundError(coordinate)
        return cached  # type: ignore[return-value]

    def exists(self, coordinate: Coordinate) -> bool:
        """Return True when ``coordinate`` can be located."""
        try:
            self.locate(coordinate)
        except ArtifactNotFoundError:
            return False
        return True

    def _fetch(self, coordinate: Coordinate) -> Optional[bytes]:
        with self._lock:
            self.fetch_count += 1
        data = self._read_local(coordinate)
        if data is not None:
            return data
        data = self._fetch_remote(coordinate)
        if data is None:
            logger.info("%s was not found in any configured repository", coordinate)
        return data

    def _read_local(self, coordinate: Coordinate) -> Optional[bytes]:
        if not self.local_repository:
            return None
        path = artifact_pom_path(
            self.local_repository, coordinate.group_id, coordinate.artifact_id, coordinate.version
        )
        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except (FileNotFoundError, NotADirectoryError):
            if is_debug_enabled(logger):
                logger.debug(
                    "POM not in local repository",
                    extra=extra_context(
                        event="decision", component="locator", action="read_local",
                        outcome="not_found", target=path, package_manager="maven",
                    ),
                )
            return None
        logger.debug("Loaded %s from local repository", coordinate)
        return data

    def _fetch_remote(self, coordinate: Coordinate) -> Optional[bytes]:
        for base_url in self.remote_repositories:
            url = artifact_pom_url(
                base_url, coordinate.group_id, coordinate.artifact_id, coordinate.version
            )
            with Timer() as timer:
                res = maven_pkg.safe_get(url, context="maven", session=self._session)
            if res is None:
                continue
            if 200 <= res.status_code < 300:
                logger.debug("Loaded %s from %s", coordinate, safe_url(base_url))
                return res.content
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP non-2xx handled",
                    extra=extra_context(
                        event="http_response", component="locator", action="fetch_remote",
                        outcome="handled_non_2xx", status_code=res.status_code,
                        duration_ms=timer.duration_ms(), target=safe_url(url),
                        package_manager="maven",
                    ),
                )
        return None

    def versions(self, group: str, artifact: str) -> List[str]:
        """Published versions of ``group:artifact`` from repository metadata.

        Versions are merged across every source in first-seen order. An
        artifact without metadata yields an empty list.
        """
        key = (group, artifact)
        with self._key_lock(key):
            cached = self._versions_cache.get(key)
            if cached is None:
                cached = self._collect_versions(group, artifact)
                self._versions_cache[key] = cached
        return list(cached)

    def _collect_versions(self, group: str, artifact: str) -> List[str]:
        seen: List[str] = []

        def _add(items: List[str]) -> None:
            for item in items:
                if item not in seen:
                    seen.append(item)

        if self.local_repository:
            for path in metadata_paths(self.local_repository, group, artifact):
                if os.path.isfile(path):
                    with open(path, "rb") as fh:
                        _add(parse_metadata_versions(fh.read()))
        for base_url in self.remote_repositories:
            res = maven_pkg.safe_get(
                metadata_url(base_url, group, artifact), context="maven", session=self._session
            )
            if res is not None and 200 <= res.status_code < 300:
                _add(parse_metadata_versions(res.content))
        return seen
