from __future__ import annotations

import asyncio
import datetime as dt
from pathlib import Path
from typing import Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from architrack.context import DataContext
from architrack.local_store import LocalStore
from architrack.main import create_app
from architrack.models import Project, ProjectCreate, WorkLog, WorkLogCreate
from architrack.storage import KeyValueStorage


@pytest.fixture()
def storage(tmp_path: Path) -> Generator[KeyValueStorage, None, None]:
    kv = KeyValueStorage(tmp_path / "architrack.db")
    yield kv
    kv.dispose()


@pytest.fixture()
def local_store(storage: KeyValueStorage) -> LocalStore:
    return LocalStore(storage)


@pytest.fixture()
def context(local_store: LocalStore) -> DataContext:
    ctx = DataContext(local_store)
    asyncio.run(ctx.start())
    return ctx


@pytest.fixture()
def client(local_store: LocalStore) -> Generator[TestClient, None, None]:
    app = create_app(lambda: local_store)
    with TestClient(app) as c:
        yield c


class FakeBackend:
    """In-memory backend with hooks for failures and slow listings."""

    name = "fake"

    def __init__(self, projects: Optional[List[Project]] = None, logs: Optional[List[WorkLog]] = None):
        self.projects: List[Project] = list(projects or [])
        self.logs: List[WorkLog] = list(logs or [])
        self.fail_on: set[str] = set()
        self.list_delays: List[float] = []
        self.calls: List[str] = []
        self._next_id = 1000

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} failed")

    def _new_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    async def list_projects(self) -> List[Project]:
        self._check("list_projects")
        snapshot = list(self.projects)
        if self.list_delays:
            await asyncio.sleep(self.list_delays.pop(0))
        return snapshot

    async def list_work_logs(self) -> List[WorkLog]:
        self._check("list_work_logs")
        return list(self.logs)

    async def insert_project(self, payload: ProjectCreate) -> Project:
        self._check("insert_project")
        project = Project(id=self._new_id(), name=payload.name, code=payload.code)
        self.projects.append(project)
        return project

    async def update_project(self, project: Project) -> Project:
        self._check("update_project")
        self.projects = [project if p.id == project.id else p for p in self.projects]
        return project

    async def delete_project(self, project_id: str) -> None:
        self._check("delete_project")
        self.projects = [p for p in self.projects if p.id != project_id]

    async def insert_work_log(self, payload: WorkLogCreate) -> WorkLog:
        self._check("insert_work_log")
        log = WorkLog(id=self._new_id(), **payload.model_dump())
        self.logs.append(log)
        return log

    async def update_work_log(self, log: WorkLog) -> WorkLog:
        self._check("update_work_log")
        self.logs = [log if item.id == log.id else item for item in self.logs]
        return log

    async def delete_work_log(self, log_id: str) -> None:
        self._check("delete_work_log")
        self.logs = [item for item in self.logs if item.id != log_id]


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend(
        projects=[Project(id="1", name="Milagro", code="1")],
        logs=[WorkLog(id="101", project_id="1", date=dt.date(2025, 11, 1), hours=6, description="Reunión")],
    )
