"""Path resolution and tree mutation."""

from __future__ import annotations

from .hierarchy import HierarchyMutator, is_in_root
from .resolver import PathResolver
from .validators import validate_is_directory, validate_is_not_directory, validate_not_root

__all__ = [
    "HierarchyMutator",
    "PathResolver",
    "is_in_root",
    "validate_is_directory",
    "validate_is_not_directory",
    "validate_not_root",
]
