"""HTTP client for the hosted relational backend (PostgREST dialect)."""

from __future__ import annotations

import asyncio
from typing import Any, Optional
from urllib.parse import urljoin

import requests

from .errors import RemoteStoreError
from .models import Project, ProjectCreate, WorkLog, WorkLogCreate, sanitize_project

PROJECTS_TABLE = "projects"
WORK_LOGS_TABLE = "work_logs"


class RemoteStore:
    """Wraps the REST calls against the ``projects`` and ``work_logs`` tables.

    Requests are blocking ``requests`` calls pushed onto a worker thread, so
    every public operation can be awaited. Ordering of list results is decided
    by the server and passed through untouched.
    """

    name = "remote"

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 15) -> None:
        self.base_url = base_url.rstrip("/") + "/rest/v1/"
        self.api_key = api_key
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        url = urljoin(self.base_url, path.lstrip("/"))
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.pop("headers", {})
        kwargs["headers"] = {**self._headers(), **headers}
        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise RemoteStoreError(str(exc)) from exc

        if response.status_code >= 400:
            raise RemoteStoreError(f"Remote error {response.status_code}: {response.text}", response=response)

        if response.status_code == 204 or not response.content:
            return None
        if response.headers.get("Content-Type", "").startswith("application/json"):
            return response.json()
        return response.content

    async def _call(self, method: str, path: str, **kwargs):
        return await asyncio.to_thread(self._request, method, path, **kwargs)

    async def _insert(self, table: str, record: dict[str, Any]) -> Optional[dict[str, Any]]:
        data = await self._call(
            "POST",
            table,
            json=[record],
            headers={"Prefer": "return=representation"},
        )
        if isinstance(data, list) and data:
            return data[0]
        return None

    async def _update(self, table: str, identifier: str, changes: dict[str, Any]) -> None:
        await self._call("PATCH", table, params={"id": f"eq.{identifier}"}, json=changes)

    async def _delete(self, table: str, identifier: str) -> None:
        await self._call("DELETE", table, params={"id": f"eq.{identifier}"})

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    async def list_projects(self) -> list[Project]:
        data = await self._call("GET", PROJECTS_TABLE, params={"select": "*", "order": "created_at.asc"}) or []
        return [sanitize_project(item) for item in data]

    async def insert_project(self, payload: ProjectCreate) -> Optional[Project]:
        row = await self._insert(PROJECTS_TABLE, {**payload.model_dump(), "is_archived": False})
        return sanitize_project(row) if row else None

    async def update_project(self, project: Project) -> Project:
        changes = project.model_dump(mode="json", exclude={"id"}, exclude_none=True)
        await self._update(PROJECTS_TABLE, project.id, changes)
        return project

    async def delete_project(self, project_id: str) -> None:
        await self._delete(PROJECTS_TABLE, project_id)

    # ------------------------------------------------------------------
    # Work logs
    # ------------------------------------------------------------------
    async def list_work_logs(self) -> list[WorkLog]:
        data = await self._call("GET", WORK_LOGS_TABLE, params={"select": "*", "order": "date.desc"}) or []
        return [WorkLog.model_validate(item) for item in data]

    async def insert_work_log(self, payload: WorkLogCreate) -> Optional[WorkLog]:
        row = await self._insert(WORK_LOGS_TABLE, payload.model_dump(mode="json"))
        return WorkLog.model_validate(row) if row else None

    async def update_work_log(self, log: WorkLog) -> WorkLog:
        changes = log.model_dump(mode="json", exclude={"id"}, exclude_none=True)
        await self._update(WORK_LOGS_TABLE, log.id, changes)
        return log

    async def delete_work_log(self, log_id: str) -> None:
        await self._delete(WORK_LOGS_TABLE, log_id)


__all__ = ["RemoteStore"]
