"""
Per-project conversion pipeline.

This module sequences the conversion steps for each selected project:
save, strip assembly attributes, strip framework references, retarget the
project file. A project that fails with a recoverable error is logged and
skipped; the remaining projects still run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Callable

from ..domain.entities import ProjectRecord
from ..domain.interfaces import ProjectHost
from ..infra.exceptions import ProjectFileWriteError, ProjectItemAccessError, ProjectUnavailableError
from ..migration.assembly_metadata import rewrite_assembly_info_items
from ..migration.project_file import RewriteResult, rewrite_project_file
from ..migration.reference_classifier import strip_framework_references

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProjectRecord], None]


@dataclass
class MigrationSummary:
    """Names of the projects by outcome."""
    converted: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "converted": list(self.converted),
            "unchanged": list(self.unchanged),
            "failed": list(self.failed),
        }


def select_eligible(records: Iterable[ProjectRecord]) -> list[ProjectRecord]:
    """Selected projects currently targeting a 4.5 framework."""
    return [r for r in records if r.selected and r.is_eligible]


def migrate_project(
    host: ProjectHost,
    record: ProjectRecord,
    profile_name: str,
    *,
    newline: str | None = None,
) -> RewriteResult:
    """
    Convert one project.

    Assembly attributes and framework references are only stripped when the
    project is not portable yet.

    Raises:
        ProjectUnavailableError: the host could not reach the project
        ProjectItemAccessError: a project item or the project file could not be read or written
        ProjectFileWriteError: the project file could not be written
    """
    node = record.node
    if node is None:
        raise ProjectUnavailableError(f"Project {record.name} has no host node")

    host.save_project(node)

    framework = record.current_framework
    if framework is not None and not framework.is_portable:
        rewrite_assembly_info_items(host, node)
        strip_framework_references(host, node)
        host.save_project(node)

    return rewrite_project_file(
        record.file_path,
        profile_name,
        save=lambda: host.save_project(node),
        newline=newline,
    )


def migrate_projects(
    host: ProjectHost,
    records: Iterable[ProjectRecord],
    profile_name: str,
    *,
    progress: ProgressCallback | None = None,
    newline: str | None = None,
) -> MigrationSummary:
    """
    Convert every selected eligible project, one after the other.

    Args:
        host: Project host
        records: Candidate projects (only selected 4.5 projects are touched)
        profile_name: Target portable profile
        progress: Called after each converted project
        newline: Line terminator for rewritten project files

    Returns:
        MigrationSummary of the run
    """
    summary = MigrationSummary()

    for record in select_eligible(records):
        try:
            result = migrate_project(host, record, profile_name, newline=newline)
        except ProjectUnavailableError as e:
            # host reports the project as unavailable; nothing was written
            logger.warning("Skipping unavailable project %s: %s", record.name, e)
            summary.failed.append(record.name)
            continue
        except ProjectFileWriteError as e:
            logger.error("Failed to rewrite project file of %s: %s", record.name, e)
            summary.failed.append(record.name)
            continue
        except ProjectItemAccessError as e:
            logger.error("Failed to convert %s: %s", record.name, e)
            summary.failed.append(record.name)
            continue

        if result.changed:
            summary.converted.append(record.name)
        else:
            summary.unchanged.append(record.name)

        if progress is not None:
            progress(record)

    logger.info(
        "Migration finished: %d converted, %d unchanged, %d failed",
        len(summary.converted),
        len(summary.unchanged),
        len(summary.failed),
    )
    return summary
