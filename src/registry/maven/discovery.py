"""Maven repository layout helpers: POM/metadata locations and metadata parsing."""
from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from typing import List

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)


def _group_path(group: str) -> str:
    return group.replace(".", "/")


def artifact_pom_relpath(group: str, artifact: str, version: str) -> str:
    """Repository-relative POM path: ``g/r/o/u/p/<a>/<v>/<a>-<v>.pom``."""
    return f"{_group_path(group)}/{artifact}/{version}/{artifact}-{version}{Constants.POM_EXTENSION}"


def artifact_pom_path(root: str, group: str, artifact: str, version: str) -> str:
    """POM location inside a local repository directory."""
    return os.path.join(root, *artifact_pom_relpath(group, artifact, version).split("/"))


def artifact_pom_url(base_url: str, group: str, artifact: str, version: str) -> str:
    """POM URL inside a remote repository.

    Args:
        base_url: Repository root, e.g. https://repo.maven.apache.org/maven2
        group: Maven group ID
        artifact: Maven artifact ID
        version: Version string

    Returns:
        Full POM URL string
    """
    return f"{base_url.rstrip('/')}/{artifact_pom_relpath(group, artifact, version)}"


def metadata_paths(root: str, group: str, artifact: str) -> List[str]:
    """Candidate ``maven-metadata*.xml`` files for an artifact in a local repository."""
    base = os.path.join(root, *_group_path(group).split("/"), artifact)
    return [os.path.join(base, name) for name in Constants.METADATA_FILES_LOCAL]


def metadata_url(base_url: str, group: str, artifact: str) -> str:
    """``maven-metadata.xml`` URL for an artifact in a remote repository."""
    return f"{base_url.rstrip('/')}/{_group_path(group)}/{artifact}/{Constants.METADATA_FILE_REMOTE}"


def parse_metadata_versions(data: bytes) -> List[str]:
    """Return the versions listed in a maven-metadata.xml document in source order.

    Unparseable documents yield an empty list; metadata only ever refines a
    range pick, so a broken file must not fail resolution.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError:
        if is_debug_enabled(logger):
            logger.debug("Maven metadata parse error", extra=extra_context(
                event="anomaly", component="discovery", action="parse_metadata",
                outcome="parse_error", package_manager="maven"
            ))
        return []
    versions_elem = root.find("versioning/versions")
    if versions_elem is None:
        return []
    versions = []
    for item in versions_elem.findall("version"):
        if isinstance(item.text, str) and item.text.strip():
            versions.append(item.text.strip())
    return versions
