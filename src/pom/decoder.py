"""Decode POM XML documents into ``Manifest`` values."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled

from .errors import MalformedManifestError
from .models import Dependency, Manifest, Parent

logger = logging.getLogger(__name__)


def _strip_ns(el: ET.Element) -> None:
    """Remove ``{namespace}`` prefixes from every tag in place."""
    for node in el.iter():
        if isinstance(node.tag, str) and node.tag.startswith("{"):
            node.tag = node.tag.split("}", 1)[1]


def _text(el: Optional[ET.Element], path: str) -> Optional[str]:
    if el is None:
        return None
    node = el.find(path)
    if node is None or node.text is None:
        return None
    value = node.text.strip()
    return value or None


def _dependency(el: ET.Element) -> Optional[Dependency]:
    group = _text(el, "groupId")
    artifact = _text(el, "artifactId")
    if group is None or artifact is None:
        return None
    return Dependency(
        group_id=group,
        artifact_id=artifact,
        version=_text(el, "version"),
        scope=_text(el, "scope"),
        type=_text(el, "type") or Constants.DEFAULT_DEPENDENCY_TYPE,
        classifier=_text(el, "classifier"),
        optional=(_text(el, "optional") or "").lower() == "true",
    )


def _dependencies(el: ET.Element, path: str) -> List[Dependency]:
    deps = []
    for node in el.findall(path):
        dep = _dependency(node)
        if dep is None:
            logger.warning("Skipping dependency without groupId/artifactId")
            continue
        deps.append(dep)
    return deps


def _properties(el: ET.Element) -> Dict[str, str]:
    props: Dict[str, str] = {}
    for block in el.findall("properties"):
        for node in block:
            if isinstance(node.tag, str):
                props[node.tag] = (node.text or "").strip()
    return props


def _parent(el: ET.Element) -> Optional[Parent]:
    node = el.find("parent")
    if node is None:
        return None
    relative = node.find("relativePath")
    if relative is None:
        relative_path: Optional[str] = Constants.DEFAULT_RELATIVE_PATH
    else:
        # An empty <relativePath/> disables the filesystem lookup
        relative_path = (relative.text or "").strip() or None
    return Parent(
        group_id=_text(node, "groupId") or "",
        artifact_id=_text(node, "artifactId") or "",
        version=_text(node, "version") or "",
        relative_path=relative_path,
    )


def _merge_by_ga(base: List[Dependency], overlay: List[Dependency]) -> List[Dependency]:
    """Overlay declarations replace same-GA base entries in place; new ones are appended."""
    merged = {dep.ga: dep for dep in base}
    for dep in overlay:
        merged[dep.ga] = dep
    return list(merged.values())


def _is_active_by_default(profile: ET.Element) -> bool:
    return (_text(profile, "activation/activeByDefault") or "").lower() == "true"


def decode(data: bytes, source: Optional[str] = None, path: Optional[str] = None) -> Manifest:
    """Decode POM bytes.

    Profiles marked ``activeByDefault`` are folded into the result, with
    their properties, dependencies and modules taking precedence over the
    document's own.

    Args:
        data: Raw XML document.
        source: Label used in error messages (path or coordinate).
        path: Filesystem location when the document was read from disk.

    Raises:
        MalformedManifestError: the bytes are not a POM.
    """
    label = source or path
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise MalformedManifestError(label, f"invalid XML: {exc}") from exc
    _strip_ns(root)
    if root.tag != "project":
        raise MalformedManifestError(label, f"unexpected root element <{root.tag}>")

    artifact = _text(root, "artifactId")
    if artifact is None:
        raise MalformedManifestError(label, "missing artifactId")

    properties = _properties(root)
    dependencies = _dependencies(root, "dependencies/dependency")
    management = _dependencies(root, "dependencyManagement/dependencies/dependency")
    modules: Tuple[str, ...] = tuple(
        node.text.strip() for node in root.findall("modules/module") if node.text and node.text.strip()
    )

    for profile in root.findall("profiles/profile"):
        if not _is_active_by_default(profile):
            continue
        if is_debug_enabled(logger):
            logger.debug(
                "Applying default profile",
                extra=extra_context(
                    event="decision", component="decoder", action="apply_profile",
                    target=_text(profile, "id"), source=label,
                ),
            )
        properties.update(_properties(profile))
        dependencies = _merge_by_ga(dependencies, _dependencies(profile, "dependencies/dependency"))
        management = _merge_by_ga(
            management, _dependencies(profile, "dependencyManagement/dependencies/dependency")
        )
        modules += tuple(
            node.text.strip()
            for node in profile.findall("modules/module")
            if node.text and node.text.strip() and node.text.strip() not in modules
        )

    return Manifest(
        artifact_id=artifact,
        group_id=_text(root, "groupId"),
        version=_text(root, "version"),
        packaging=_text(root, "packaging") or "jar",
        parent=_parent(root),
        properties=properties,
        dependencies=tuple(dependencies),
        dependency_management=tuple(management),
        modules=modules,
        path=path,
    )


def decode_file(path: str) -> Manifest:
    """Read and decode a POM from disk; filesystem errors propagate unchanged."""
    with open(path, "rb") as fh:
        data = fh.read()
    return decode(data, source=path, path=path)
