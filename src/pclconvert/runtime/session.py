"""Migration session: caller-facing state plus the background update run.

The session owns the state text and the project list. Only the thread that
owns the session mutates them, by applying events with pump() or drain().
The worker thread started by update() never touches that state; it posts
StateChanged / ProjectsRefreshed / RunFinished events to a queue.

Only one update runs at a time: a second update() while a run is in
progress raises MigrationInProgressError. A run stays in progress until
its RunFinished event has been applied, so the events of two runs never
interleave in the queue.

Lifecycle: reload() -> select() -> update(profile) -> drain() until RunFinished.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterable, Iterator
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Union

from ..domain.entities import PortableProfileDescriptor, ProjectRecord
from ..domain.interfaces import ProjectHost
from ..infra.exceptions import MigrationInProgressError
from ..usecases.project_migration import MigrationSummary, migrate_projects
from ..usecases.project_reload import load_projects

logger = logging.getLogger(__name__)

STATE_NO_PROJECTS = "No .Net projects"
STATE_UPDATING = "Updating..."
STATE_PROJECT_DONE = "Updating... {name} done"
STATE_DONE = "Done. Please reload the projects."


@dataclass(frozen=True)
class StateChanged:
    text: str


@dataclass(frozen=True)
class ProjectsRefreshed:
    projects: list[ProjectRecord]


@dataclass(frozen=True)
class RunFinished:
    summary: MigrationSummary | None
    error: BaseException | None = None


SessionEvent = Union[StateChanged, ProjectsRefreshed, RunFinished]


class MigrationSession:
    """
    Reload/update pipeline over one project host.

    Not thread-safe by itself: call reload(), select(), update(), pump() and
    drain() from the owning thread only.
    """

    def __init__(self, host: ProjectHost, *, newline: str | None = None) -> None:
        self._host = host
        self._newline = newline
        self._events: queue.Queue[SessionEvent] = queue.Queue()
        self._run_lock = threading.Lock()
        self._thread: threading.Thread | None = None

        self.state = ""
        self.projects: list[ProjectRecord] = []
        self.last_summary: MigrationSummary | None = None
        self.last_error: BaseException | None = None

    # ------------------------------------------------------------------
    # Owner-thread API
    # ------------------------------------------------------------------

    def reload(self) -> list[ProjectRecord]:
        """Rebuild the project list from the host."""
        self.projects = load_projects(self._host)
        self.state = STATE_NO_PROJECTS if not self.projects else ""
        return self.projects

    def select(self, names: Iterable[str] | None = None) -> list[ProjectRecord]:
        """
        Mark projects as selected.

        Args:
            names: Project names to select; all projects when None

        Returns:
            The selected records
        """
        wanted = None if names is None else set(names)
        for record in self.projects:
            record.selected = wanted is None or record.name in wanted
        return [r for r in self.projects if r.selected]

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def update(self, profile: PortableProfileDescriptor | str) -> Future:
        """
        Start converting the selected projects on a background thread.

        Returns:
            Future resolved with the MigrationSummary when the run ends

        Raises:
            MigrationInProgressError: another update is still running or its
                RunFinished event has not been applied yet
        """
        if not self._run_lock.acquire(blocking=False):
            raise MigrationInProgressError("An update is already running")

        profile_name = profile.name if isinstance(profile, PortableProfileDescriptor) else profile
        records = list(self.projects)
        future: Future = Future()
        self.state = STATE_UPDATING

        self._thread = threading.Thread(
            target=self._run,
            args=(records, profile_name, future),
            name="pclconvert-update",
            daemon=True,
        )
        try:
            self._thread.start()
        except RuntimeError:
            self._run_lock.release()
            raise
        logger.info("Update started (profile=%s, projects=%d)", profile_name, len(records))
        return future

    def apply(self, event: SessionEvent) -> None:
        if isinstance(event, StateChanged):
            self.state = event.text
        elif isinstance(event, ProjectsRefreshed):
            self.projects = event.projects
        elif isinstance(event, RunFinished):
            self.last_summary = event.summary
            self.last_error = event.error
            # the run ends for the owner only once its last event is applied
            if self._run_lock.locked():
                self._run_lock.release()

    def pump(self) -> list[SessionEvent]:
        """Apply every pending event without blocking."""
        applied = []
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return applied
            self.apply(event)
            applied.append(event)

    def drain(self, timeout: float | None = None) -> Iterator[SessionEvent]:
        """
        Apply and yield events until the current run finishes.

        Raises:
            queue.Empty: no event arrived within timeout seconds
        """
        while True:
            event = self._events.get(timeout=timeout)
            self.apply(event)
            yield event
            if isinstance(event, RunFinished):
                return

    # ------------------------------------------------------------------
    # Worker thread
    # ------------------------------------------------------------------

    def _post(self, event: SessionEvent) -> None:
        self._events.put(event)

    def _report_progress(self, record: ProjectRecord) -> None:
        self._post(StateChanged(STATE_PROJECT_DONE.format(name=record.name)))

    def _run(self, records: list[ProjectRecord], profile_name: str, future: Future) -> None:
        summary: MigrationSummary | None = None
        error: BaseException | None = None
        try:
            summary = migrate_projects(
                self._host,
                records,
                profile_name,
                progress=self._report_progress,
                newline=self._newline,
            )
            self._post(ProjectsRefreshed(load_projects(self._host)))
            self._post(StateChanged(STATE_DONE))
        except Exception as e:
            logger.exception("Update run failed")
            error = e

        if error is None:
            future.set_result(summary)
        else:
            future.set_exception(error)
        self._post(RunFinished(summary=summary, error=error))
