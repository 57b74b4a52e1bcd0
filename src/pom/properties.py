"""``${...}`` placeholder interpolation against a layered property set."""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Mapping, Optional

from common.logging_utils import extra_context, is_debug_enabled

from .errors import UnresolvedPropertyError
from .models import Coordinate, Parent

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def layer(own: Mapping[str, str], ancestors: Iterable[Mapping[str, str]]) -> Dict[str, str]:
    """Merge property tables; ``ancestors`` is nearest first and ``own`` wins over all."""
    merged: Dict[str, str] = {}
    for props in reversed(list(ancestors)):
        merged.update(props)
    merged.update(own)
    return merged


def builtin_properties(coordinate: Optional[Coordinate], parent: Optional[Parent] = None) -> Dict[str, str]:
    """Reserved keys derived from the manifest's own resolved coordinate."""
    builtins: Dict[str, str] = {}
    if coordinate is not None:
        for prefix in ("project.", "pom.", ""):
            builtins[f"{prefix}groupId"] = coordinate.group_id
            builtins[f"{prefix}artifactId"] = coordinate.artifact_id
            builtins[f"{prefix}version"] = coordinate.version
    if parent is not None:
        builtins["project.parent.groupId"] = parent.group_id
        builtins["project.parent.artifactId"] = parent.artifact_id
        builtins["project.parent.version"] = parent.version
    return builtins


class PropertyResolver:
    """Resolve placeholders against declared properties, then built-in project keys.

    Substitution is a single pass: replacement text is never re-scanned, so a
    self-referencing property is inert. Unknown keys are left verbatim unless
    ``strict`` is set.
    """

    def __init__(
        self,
        properties: Mapping[str, str],
        coordinate: Optional[Coordinate] = None,
        parent: Optional[Parent] = None,
        strict: bool = False,
    ):
        self._properties = dict(properties)
        self._builtins = builtin_properties(coordinate, parent)
        self.strict = strict

    @property
    def properties(self) -> Dict[str, str]:
        return dict(self._properties)

    def lookup(self, key: str) -> Optional[str]:
        if key in self._properties:
            return self._properties[key]
        return self._builtins.get(key)

    def resolve(self, text: Optional[str]) -> Optional[str]:
        """Return ``text`` with every resolvable ``${key}`` replaced."""
        if text is None or "${" not in text:
            return text

        def _substitute(match: "re.Match[str]") -> str:
            key = match.group(1).strip()
            value = self.lookup(key)
            if value is None:
                if self.strict:
                    raise UnresolvedPropertyError(key, text)
                if is_debug_enabled(logger):
                    logger.debug(
                        "Unresolved property left verbatim",
                        extra=extra_context(
                            event="decision", component="properties", action="resolve",
                            outcome="unresolved", target=key,
                        ),
                    )
                return match.group(0)
            return value

        return PLACEHOLDER.sub(_substitute, text)
