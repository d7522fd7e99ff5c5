"""
Conversion steps applied to a single project.

- reference_classifier: find and strip framework-only references
- assembly_metadata: strip ComVisible/Guid assembly attributes
- project_file: retarget the .csproj to a portable profile
"""

from .assembly_metadata import rewrite_assembly_info_items, rewrite_assembly_metadata
from .project_file import (
    ProjectFileState,
    RewriteResult,
    classify,
    retarget,
    rewrite_project_file,
    serialize,
)
from .reference_classifier import is_framework_reference, strip_framework_references

__all__ = [
    "ProjectFileState",
    "RewriteResult",
    "classify",
    "is_framework_reference",
    "retarget",
    "rewrite_assembly_info_items",
    "rewrite_assembly_metadata",
    "rewrite_project_file",
    "serialize",
    "strip_framework_references",
]
