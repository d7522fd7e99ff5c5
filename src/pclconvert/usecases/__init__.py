"""Use cases: project reload and the per-project conversion pipeline."""

from .project_migration import MigrationSummary, migrate_project, migrate_projects, select_eligible
from .project_reload import flatten_projects, load_projects, map_project

__all__ = [
    "MigrationSummary",
    "flatten_projects",
    "load_projects",
    "map_project",
    "migrate_project",
    "migrate_projects",
    "select_eligible",
]
