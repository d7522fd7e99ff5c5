"""
Project host adapters.
"""

from .filesystem_host import FilesystemProjectHost, framework_id, parse_assembly_identity

__all__ = [
    "FilesystemProjectHost",
    "framework_id",
    "parse_assembly_identity",
]
