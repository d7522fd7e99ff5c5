"""
Custom exceptions for pclconvert operations.

This module provides custom exception classes for the different failures
that can occur while loading definitions and converting projects.
"""


class PclConvertError(Exception):
    """Base exception for all pclconvert errors."""

    pass


class CatalogLoadError(PclConvertError):
    """Raised when a framework or portable profile definition list is missing or malformed."""

    pass


class UnknownProfileError(PclConvertError):
    """Raised when a portable profile name is not in the catalog."""

    pass


class ProjectUnavailableError(PclConvertError):
    """Raised when the host reports a project as temporarily unavailable."""

    pass


class MetadataReadError(PclConvertError):
    """Raised when a project's framework properties are absent or of an unexpected type."""

    pass


class ProjectItemAccessError(PclConvertError):
    """Raised when a project item or project file cannot be read, decoded or written."""

    pass


class AssemblyNotFoundError(PclConvertError):
    """Raised when an assembly identity cannot be resolved."""

    pass


class ReferenceRemovalError(PclConvertError):
    """Raised when an external reference cannot be removed from a project."""

    pass


class ProjectFileWriteError(PclConvertError):
    """Raised when writing a rewritten project file fails after the backup was taken."""

    def __init__(self, path, backup_path, cause: BaseException):
        super().__init__(f"Failed to write {path} (original restored from {backup_path}): {cause}")
        self.path = path
        self.backup_path = backup_path
        self.cause = cause


class MigrationInProgressError(PclConvertError):
    """Raised when an update is triggered while another one is still running."""

    pass
