"""Strip assembly attributes that portable targets do not support."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..domain.entities import FileItem, ProjectNode
from ..domain.interfaces import ProjectHost

_logger = logging.getLogger(__name__)

ASSEMBLY_INFO_MARKER = "AssemblyInfo.cs"
COM_VISIBLE_ATTRIBUTE = "[assembly: ComVisible(false)]"
GUID_ATTRIBUTE_START = "[assembly: Guid("
ATTRIBUTE_END = ")]"


def rewrite_assembly_metadata(text: str) -> tuple[str, bool]:
    """
    Remove the ComVisible(false) and Guid(...) assembly attributes.

    Returns:
        (new_text, changed)
    """
    new_text = text.replace(COM_VISIBLE_ATTRIBUTE, "")
    start = new_text.find(GUID_ATTRIBUTE_START)
    if start >= 0:
        end = new_text.find(ATTRIBUTE_END, start)
        if end >= 0:
            new_text = new_text[:start] + new_text[end + len(ATTRIBUTE_END):]
    return new_text, new_text != text


def iter_file_items(items: Iterable[FileItem]) -> Iterator[FileItem]:
    """Depth-first walk over a project's item tree."""
    for item in items:
        yield item
        yield from iter_file_items(item.children)


def rewrite_assembly_info_items(host: ProjectHost, project: ProjectNode) -> list[str]:
    """
    Rewrite every AssemblyInfo.cs item of a project.

    Only texts that actually change are written back.

    Returns:
        Paths of the rewritten items
    """
    rewritten: list[str] = []
    for item in iter_file_items(host.list_file_items(project)):
        if not item.path or ASSEMBLY_INFO_MARKER not in item.path:
            continue
        new_text, changed = rewrite_assembly_metadata(host.read_text(item.path))
        if not changed:
            continue
        host.write_text(item.path, new_text)
        rewritten.append(item.path)
        _logger.info("Stripped non-portable assembly attributes from %s", item.path)
    return rewritten
