"""In-memory view of projects and work logs kept in step with the active backend."""

from __future__ import annotations

import logging
import unicodedata
from typing import Optional, Tuple

from .backends import DataBackend
from .errors import ProjectNotFoundError
from .models import Project, ProjectCreate, WorkLog, WorkLogCreate

logger = logging.getLogger(__name__)


class DataContext:
    """Session-wide cache of ``projects`` and ``logs``.

    The cached collections are exposed as tuples of frozen models; the only
    way to change them is through the mutation methods below, each of which
    writes to the backend and then re-reads everything. Nothing serializes
    overlapping mutations: when two run at once, whichever refresh finishes
    last decides the cache.
    """

    def __init__(self, backend: DataBackend):
        self.backend = backend
        self._projects: Tuple[Project, ...] = ()
        self._logs: Tuple[WorkLog, ...] = ()
        self._loading = False
        self._started = False

    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._projects

    @property
    def logs(self) -> Tuple[WorkLog, ...]:
        return self._logs

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Initial load; later calls do nothing."""
        if self._started:
            return
        self._started = True
        await self.refresh_data()

    async def refresh_data(self) -> None:
        """Replace both cached collections with the backend's current contents.

        If either listing fails the error propagates and the previous cache is
        left as it was.
        """
        self._loading = True
        try:
            projects = await self.backend.list_projects()
            logs = await self.backend.list_work_logs()
        finally:
            self._loading = False
        self._projects = tuple(projects)
        self._logs = tuple(logs)
        logger.debug(
            "Refreshed from %s backend: %d projects, %d logs",
            self.backend.name,
            len(self._projects),
            len(self._logs),
        )

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    async def add_project(self, payload: ProjectCreate) -> None:
        await self.backend.insert_project(payload)
        await self.refresh_data()

    async def update_project(self, project: Project) -> None:
        """Store ``project`` as given; callers merge unchanged fields beforehand."""
        await self.backend.update_project(project)
        await self.refresh_data()

    async def delete_project(self, project_id: str) -> None:
        # Work logs of the project are left in place.
        await self.backend.delete_project(project_id)
        await self.refresh_data()

    async def toggle_archive(self, project_id: str) -> Project:
        project = self.project_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        updated = project.model_copy(update={"is_archived": not project.is_archived})
        await self.update_project(updated)
        return updated

    # ------------------------------------------------------------------
    # Work logs
    # ------------------------------------------------------------------
    async def add_log(self, payload: WorkLogCreate) -> None:
        await self.backend.insert_work_log(payload)
        await self.refresh_data()

    async def update_log(self, log: WorkLog) -> None:
        await self.backend.update_work_log(log)
        await self.refresh_data()

    async def delete_log(self, log_id: str) -> None:
        """Delete a log without raising.

        Unlike the other mutations, failures are logged and swallowed, and the
        refresh is still attempted.
        """
        try:
            await self.backend.delete_work_log(log_id)
        except Exception:
            logger.exception("Failed to delete log %s", log_id)
        try:
            await self.refresh_data()
        except Exception:
            logger.exception("Failed to refresh after deleting log %s", log_id)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def project_by_id(self, project_id: str) -> Optional[Project]:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def log_by_id(self, log_id: str) -> Optional[WorkLog]:
        for log in self._logs:
            if log.id == log_id:
                return log
        return None

    def active_projects(self) -> Tuple[Project, ...]:
        """Projects that can still receive new work logs."""
        return tuple(p for p in self._projects if not p.is_archived)

    def sorted_projects(self) -> Tuple[Project, ...]:
        """Unarchived projects first, each group by name."""
        return tuple(sorted(self._projects, key=lambda p: (p.is_archived, _name_sort_key(p.name))))


def _name_sort_key(name: str) -> str:
    # Accent- and case-insensitive, close to a locale compare for Latin names.
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


__all__ = ["DataContext"]
