"""Maven version expression handling.

- models.py: requirement kinds and parsed range intervals
- parser.py: soft / hard / range classification
- ranges.py: matching ranges against published versions
"""

from .models import RequirementKind, VersionBound, VersionRange, VersionRequirement
from .parser import classify, is_bracketed
from .ranges import matching_versions, pick_highest

__all__ = [
    "RequirementKind",
    "VersionBound",
    "VersionRange",
    "VersionRequirement",
    "classify",
    "is_bracketed",
    "matching_versions",
    "pick_highest",
]
