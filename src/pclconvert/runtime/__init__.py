"""
Runtime: the migration session and its worker events.
"""

from .session import (
    STATE_DONE,
    STATE_NO_PROJECTS,
    STATE_PROJECT_DONE,
    STATE_UPDATING,
    MigrationSession,
    ProjectsRefreshed,
    RunFinished,
    SessionEvent,
    StateChanged,
)

__all__ = [
    "STATE_DONE",
    "STATE_NO_PROJECTS",
    "STATE_PROJECT_DONE",
    "STATE_UPDATING",
    "MigrationSession",
    "ProjectsRefreshed",
    "RunFinished",
    "SessionEvent",
    "StateChanged",
]
