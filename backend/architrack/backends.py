from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional, Protocol, runtime_checkable

from .config import Settings, settings
from .local_store import LocalStore
from .models import Project, ProjectCreate, WorkLog, WorkLogCreate
from .remote_store import RemoteStore

logger = logging.getLogger(__name__)


@runtime_checkable
class DataBackend(Protocol):
    """Operations every storage backend offers to the data context."""

    name: str

    async def list_projects(self) -> List[Project]: ...

    async def list_work_logs(self) -> List[WorkLog]: ...

    async def insert_project(self, payload: ProjectCreate) -> Optional[Project]: ...

    async def update_project(self, project: Project) -> Project: ...

    async def delete_project(self, project_id: str) -> None: ...

    async def insert_work_log(self, payload: WorkLogCreate) -> Optional[WorkLog]: ...

    async def update_work_log(self, log: WorkLog) -> WorkLog: ...

    async def delete_work_log(self, log_id: str) -> None: ...


def select_backend(config: Settings) -> DataBackend:
    """Remote store when an http(s) endpoint is configured, local fallback store otherwise."""
    if config.remote_configured:
        logger.info("Using remote store at %s", config.supabase_url)
        return RemoteStore(config.supabase_url, api_key=config.supabase_key, timeout=config.request_timeout)
    if config.supabase_url:
        logger.warning("Ignoring malformed remote endpoint %r", config.supabase_url)
    logger.info("Using local fallback store at %s", config.local_store_path)
    return LocalStore.from_path(config.local_store_path)


@lru_cache(maxsize=1)
def get_backend() -> DataBackend:
    # Chosen once per process and never re-evaluated.
    return select_backend(settings)


__all__ = ["DataBackend", "get_backend", "select_backend"]
