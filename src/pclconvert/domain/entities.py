"""
Domain entities for project conversion.

Frozen dataclasses for the catalog descriptors and the host-facing value
types, plus the mutable ProjectRecord built on every reload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FrameworkDescriptor:
    """A classic .NET target framework (id as reported by the host, moniker name)."""
    id: int
    name: str

    @property
    def is_portable(self) -> bool:
        return "port" in self.name.lower()


@dataclass(frozen=True)
class PortableProfileDescriptor:
    """An installable portable-profile target, e.g. Profile136."""
    name: str
    description: str


@dataclass(frozen=True)
class AssemblyReference:
    """
    External reference of a project as reported by the host.

    has_source_project is True for project-to-project references.
    """
    name: str
    major_version: int = 0
    minor_version: int = 0
    build_number: int = 0
    revision_number: int = 0
    culture: str | None = None
    public_key_token: str | None = None
    has_source_project: bool = False

    @property
    def version(self) -> str:
        return (
            f"{self.major_version}.{self.minor_version}."
            f"{self.build_number}.{self.revision_number}"
        )

    @property
    def full_name(self) -> str:
        """Fully-qualified assembly identity string."""
        return (
            f"{self.name}, Version={self.version}, "
            f"Culture={self.culture or 'neutral'}, "
            f"PublicKeyToken={self.public_key_token or 'null'}"
        )


@dataclass(frozen=True)
class ResolvedAssembly:
    """Result of resolving an assembly identity: its name and product metadata."""
    name: str
    product: str | None = None


@dataclass
class ProjectNode:
    """
    Node of the host's project tree.

    Solution folders carry children; a child may be None when the host could
    not load the sub-project.
    """
    name: str
    file_path: str | None = None
    is_solution_folder: bool = False
    children: list[ProjectNode | None] = field(default_factory=list)
    handle: Any = None


@dataclass
class FileItem:
    """Project item as reported by the host, walked recursively."""
    path: str | None
    children: list[FileItem] = field(default_factory=list)


@dataclass
class ProjectRecord:
    """One candidate project, rebuilt from the host on every reload."""
    name: str
    file_path: str
    current_framework: FrameworkDescriptor | None = None
    selected: bool = False
    node: ProjectNode | None = field(default=None, repr=False, compare=False)

    @property
    def has_framework(self) -> bool:
        return self.current_framework is not None

    @property
    def is_eligible(self) -> bool:
        """Only .NET 4.5 projects are converted."""
        return self.current_framework is not None and "4.5" in self.current_framework.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "file_path": self.file_path,
            "framework_id": self.current_framework.id if self.current_framework else None,
            "framework": self.current_framework.name if self.current_framework else None,
            "selected": self.selected,
            "eligible": self.is_eligible,
        }
