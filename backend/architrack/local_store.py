"""Local fallback store used when no remote endpoint is configured."""

from __future__ import annotations

import asyncio
import json
import uuid
from pathlib import Path
from typing import Any, Dict, List

from .models import Project, ProjectCreate, WorkLog, WorkLogCreate
from .seed import LOGS_KEY, PROJECTS_KEY, seed_collection
from .storage import KeyValueStorage


class LocalStore:
    """Keeps both collections as JSON arrays in two key-value slots.

    Every write re-serializes the whole collection; nothing is appended.
    Each read-modify-write runs as one call on a worker thread so SQLite I/O
    stays off the event loop.
    """

    name = "local"

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    @classmethod
    def from_path(cls, path: Path) -> "LocalStore":
        return cls(KeyValueStorage(path))

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------
    def _read(self, key: str) -> List[Dict[str, Any]]:
        return seed_collection(self.storage, key)

    def _write(self, key: str, records: List[Dict[str, Any]]) -> None:
        self.storage.set_item(key, json.dumps(records, ensure_ascii=False))

    def _append(self, key: str, record: Dict[str, Any]) -> None:
        records = self._read(key)
        records.append(record)
        self._write(key, records)

    def _replace(self, key: str, record: Dict[str, Any]) -> None:
        records = [record if str(item.get("id")) == record["id"] else item for item in self._read(key)]
        self._write(key, records)

    def _remove(self, key: str, identifier: str) -> None:
        records = [item for item in self._read(key) if str(item.get("id")) != identifier]
        self._write(key, records)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    async def list_projects(self) -> List[Project]:
        records = await asyncio.to_thread(self._read, PROJECTS_KEY)
        return [Project.model_validate(record) for record in records]

    async def insert_project(self, payload: ProjectCreate) -> Project:
        project = Project(id=str(uuid.uuid4()), name=payload.name, code=payload.code, is_archived=False)
        await asyncio.to_thread(self._append, PROJECTS_KEY, project.to_record())
        return project

    async def update_project(self, project: Project) -> Project:
        await asyncio.to_thread(self._replace, PROJECTS_KEY, project.to_record())
        return project

    async def delete_project(self, project_id: str) -> None:
        await asyncio.to_thread(self._remove, PROJECTS_KEY, project_id)

    # ------------------------------------------------------------------
    # Work logs
    # ------------------------------------------------------------------
    async def list_work_logs(self) -> List[WorkLog]:
        records = await asyncio.to_thread(self._read, LOGS_KEY)
        return [WorkLog.model_validate(record) for record in records]

    async def insert_work_log(self, payload: WorkLogCreate) -> WorkLog:
        log = WorkLog(id=str(uuid.uuid4()), **payload.model_dump())
        await asyncio.to_thread(self._append, LOGS_KEY, log.to_record())
        return log

    async def update_work_log(self, log: WorkLog) -> WorkLog:
        await asyncio.to_thread(self._replace, LOGS_KEY, log.to_record())
        return log

    async def delete_work_log(self, log_id: str) -> None:
        await asyncio.to_thread(self._remove, LOGS_KEY, log_id)


__all__ = ["LocalStore"]
