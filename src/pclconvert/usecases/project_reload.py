"""
Build the list of candidate projects from a host.

Solution folders are flattened; projects whose framework properties cannot
be read (typically because they are still loading) are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..domain.entities import ProjectNode, ProjectRecord
from ..domain.interfaces import ProjectHost
from ..infra.exceptions import MetadataReadError

logger = logging.getLogger(__name__)


def flatten_projects(nodes: Iterable[ProjectNode | None]) -> list[ProjectNode]:
    """Replace solution folders by the projects they contain, recursively."""
    projects: list[ProjectNode] = []
    for node in nodes:
        if node is None:
            continue
        if node.is_solution_folder:
            projects.extend(flatten_projects(node.children))
        else:
            projects.append(node)
    return projects


def map_project(host: ProjectHost, node: ProjectNode) -> ProjectRecord:
    record = ProjectRecord(name=node.name, file_path=node.file_path or "", node=node)
    try:
        record.current_framework = host.current_framework_of(node)
    except MetadataReadError as e:
        logger.debug("No framework for %s: %s", node.name, e)
    return record


def load_projects(host: ProjectHost) -> list[ProjectRecord]:
    """
    Map every project of the host to a ProjectRecord.

    Returns:
        Records that have a resolved current framework, in tree order
    """
    nodes = host.list_projects()
    if not nodes:
        return []

    records = [map_project(host, node) for node in flatten_projects(nodes)]
    records = [r for r in records if r.has_framework]
    logger.info("Loaded %d projects with a target framework", len(records))
    return records
