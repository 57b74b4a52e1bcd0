"""Maven repository package.

This package provides access to Maven-layout repositories:
- discovery.py: POM and maven-metadata.xml locations, metadata parsing
- client.py: RepositoryLocator fetching POMs from a local directory and remote URLs
"""

# Patch points exposed for tests (e.g., monkeypatch in tests)
from common.http_client import safe_get  # noqa: F401

from .discovery import (  # noqa: F401
    artifact_pom_path,
    artifact_pom_url,
    metadata_url,
    parse_metadata_versions,
)
from .client import RepositoryLocator  # noqa: F401

__all__ = [
    "RepositoryLocator",
    "artifact_pom_path",
    "artifact_pom_url",
    "metadata_url",
    "parse_metadata_versions",
    # Patch points for tests
    "safe_get",
]
