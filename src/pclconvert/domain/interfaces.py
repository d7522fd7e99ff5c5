"""Domain interfaces for project hosts (IDE automation, filesystem, test doubles)."""

from abc import ABC, abstractmethod

from .entities import AssemblyReference, FileItem, FrameworkDescriptor, ProjectNode, ResolvedAssembly


class ProjectHost(ABC):
    """
    Interface for the environment that owns the projects being converted.

    The conversion core only talks to projects through this interface, so an
    IDE bridge, the filesystem adapter and in-memory test doubles are
    interchangeable.
    """

    @abstractmethod
    def list_projects(self) -> list[ProjectNode]:
        """
        List the top-level nodes of the project tree.

        Solution folders are returned as nodes with children; callers flatten them.
        """
        raise NotImplementedError

    @abstractmethod
    def current_framework_of(self, project: ProjectNode) -> FrameworkDescriptor:
        """
        Read the project's current target framework (id and moniker).

        Raises:
            MetadataReadError: properties are absent or have unexpected types
        """
        raise NotImplementedError

    @abstractmethod
    def save_project(self, project: ProjectNode) -> None:
        """
        Flush pending in-editor changes of the project to disk.

        Raises:
            ProjectUnavailableError: the project is transiently unavailable
        """
        raise NotImplementedError

    @abstractmethod
    def list_file_items(self, project: ProjectNode) -> list[FileItem]:
        """
        List the project's top-level file items.

        Raises:
            ProjectItemAccessError: the items could not be listed
        """
        raise NotImplementedError

    @abstractmethod
    def read_text(self, path: str) -> str:
        """
        Read the content of a text item.

        Raises:
            ProjectItemAccessError: the item could not be read or decoded
        """
        raise NotImplementedError

    @abstractmethod
    def write_text(self, path: str, text: str) -> None:
        """
        Replace the content of a text item and save it.

        Raises:
            ProjectItemAccessError: the item could not be written
        """
        raise NotImplementedError

    @abstractmethod
    def list_references(self, project: ProjectNode) -> list[AssemblyReference]:
        """List the project's external references."""
        raise NotImplementedError

    @abstractmethod
    def remove_reference(self, project: ProjectNode, reference: AssemblyReference) -> None:
        """
        Remove one external reference from the project.

        Raises:
            ReferenceRemovalError: the reference could not be removed
        """
        raise NotImplementedError

    @abstractmethod
    def resolve_assembly_identity(self, identity: str) -> ResolvedAssembly:
        """
        Resolve a fully-qualified assembly identity.

        Raises:
            AssemblyNotFoundError: the assembly is unknown to the host
        """
        raise NotImplementedError
