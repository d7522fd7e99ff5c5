"""Domain entities and interfaces."""

from .entities import (
    AssemblyReference,
    FileItem,
    FrameworkDescriptor,
    PortableProfileDescriptor,
    ProjectNode,
    ProjectRecord,
    ResolvedAssembly,
)
from .interfaces import ProjectHost

__all__ = [
    "AssemblyReference",
    "FileItem",
    "FrameworkDescriptor",
    "PortableProfileDescriptor",
    "ProjectHost",
    "ProjectNode",
    "ProjectRecord",
    "ResolvedAssembly",
]
