"""
Framework catalog.

Static lookup of classic frameworks and portable profiles loaded from the
definition lists.
"""

from .framework_catalog import FrameworkCatalog, get_catalog, load_definition_list

__all__ = [
    "FrameworkCatalog",
    "get_catalog",
    "load_definition_list",
]
