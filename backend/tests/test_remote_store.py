from __future__ import annotations

import asyncio
import datetime as dt
import json
from typing import Any, List, Optional

import pytest
import requests

from architrack import remote_store
from architrack.errors import RemoteStoreError
from architrack.models import Project, ProjectCreate, WorkLog, WorkLogCreate
from architrack.remote_store import RemoteStore


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None):
        self.status_code = status_code
        self._payload = payload
        self.content = b"" if payload is None else json.dumps(payload).encode()
        self.text = self.content.decode()
        self.headers = {"Content-Type": "application/json; charset=utf-8"} if payload is not None else {}

    def json(self) -> Any:
        return self._payload


class FakeRequests:
    def __init__(self, responses: Optional[List[FakeResponse]] = None):
        self.responses = list(responses or [])
        self.calls: List[dict[str, Any]] = []

    def __call__(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.responses:
            return self.responses.pop(0)
        return FakeResponse(204)


@pytest.fixture()
def store() -> RemoteStore:
    return RemoteStore("https://demo.supabase.co/", api_key="anon-key", timeout=5)


def _install(monkeypatch, fake: FakeRequests) -> FakeRequests:
    monkeypatch.setattr(remote_store.requests, "request", fake)
    return fake


def test_list_projects_orders_by_creation_and_sanitizes(monkeypatch, store: RemoteStore):
    fake = _install(
        monkeypatch,
        FakeRequests(
            [
                FakeResponse(
                    payload=[
                        {"id": 7, "name": "Milagro", "code": "1", "is_archived": None, "created_at": "2025-01-01T10:00:00+00:00"},
                        {"id": 8, "name": "Ansoain", "code": "25047CAN", "is_archived": True},
                    ]
                )
            ]
        ),
    )

    projects = asyncio.run(store.list_projects())

    call = fake.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://demo.supabase.co/rest/v1/projects"
    assert call["params"] == {"select": "*", "order": "created_at.asc"}
    assert call["headers"]["apikey"] == "anon-key"
    assert call["headers"]["Authorization"] == "Bearer anon-key"
    assert call["timeout"] == 5
    assert [p.id for p in projects] == ["7", "8"]
    assert projects[0].is_archived is False
    assert projects[1].is_archived is True


def test_list_work_logs_keeps_server_order(monkeypatch, store: RemoteStore):
    fake = _install(
        monkeypatch,
        FakeRequests(
            [
                FakeResponse(
                    payload=[
                        {"id": "b", "project_id": "1", "date": "2025-11-02", "hours": 1, "description": None},
                        {"id": "a", "project_id": "1", "date": "2025-11-05", "hours": 2.5, "description": "Planos"},
                    ]
                )
            ]
        ),
    )

    logs = asyncio.run(store.list_work_logs())

    assert fake.calls[0]["params"] == {"select": "*", "order": "date.desc"}
    assert [log.id for log in logs] == ["b", "a"]
    assert logs[0].description == ""
    assert logs[1].date == dt.date(2025, 11, 5)


def test_insert_project_sends_unarchived_record(monkeypatch, store: RemoteStore):
    fake = _install(
        monkeypatch,
        FakeRequests([FakeResponse(201, [{"id": 9, "name": "Txantrea", "code": "T1", "is_archived": False}])]),
    )

    created = asyncio.run(store.insert_project(ProjectCreate(name="Txantrea", code="T1")))

    call = fake.calls[0]
    assert call["method"] == "POST"
    assert call["json"] == [{"name": "Txantrea", "code": "T1", "is_archived": False}]
    assert call["headers"]["Prefer"] == "return=representation"
    assert created is not None and created.id == "9"


def test_insert_work_log_serializes_date(monkeypatch, store: RemoteStore):
    fake = _install(monkeypatch, FakeRequests([FakeResponse(201)]))

    created = asyncio.run(
        store.insert_work_log(WorkLogCreate(project_id="3", date=dt.date(2025, 11, 6), hours=4, description="Obra"))
    )

    assert fake.calls[0]["url"].endswith("/rest/v1/work_logs")
    assert fake.calls[0]["json"] == [{"project_id": "3", "date": "2025-11-06", "hours": 4.0, "description": "Obra"}]
    assert created is None


def test_update_targets_record_by_id(monkeypatch, store: RemoteStore):
    fake = _install(monkeypatch, FakeRequests())

    asyncio.run(store.update_project(Project(id="3", name="Ansoain", code="25047CAN", is_archived=True)))
    asyncio.run(store.update_work_log(WorkLog(id="101", project_id="3", date=dt.date(2025, 11, 6), hours=5)))

    project_call, log_call = fake.calls
    assert project_call["method"] == "PATCH"
    assert project_call["params"] == {"id": "eq.3"}
    assert project_call["json"] == {"name": "Ansoain", "code": "25047CAN", "is_archived": True}
    assert log_call["params"] == {"id": "eq.101"}
    assert log_call["json"] == {"project_id": "3", "date": "2025-11-06", "hours": 5.0, "description": ""}


def test_delete_targets_record_by_id(monkeypatch, store: RemoteStore):
    fake = _install(monkeypatch, FakeRequests())

    asyncio.run(store.delete_project("2"))
    asyncio.run(store.delete_work_log("105"))

    assert [(c["method"], c["url"].rsplit("/", 1)[-1], c["params"]) for c in fake.calls] == [
        ("DELETE", "projects", {"id": "eq.2"}),
        ("DELETE", "work_logs", {"id": "eq.105"}),
    ]


def test_http_error_raises_remote_store_error(monkeypatch, store: RemoteStore):
    _install(monkeypatch, FakeRequests([FakeResponse(500, {"message": "boom"})]))

    with pytest.raises(RemoteStoreError) as excinfo:
        asyncio.run(store.list_projects())

    assert excinfo.value.response is not None
    assert excinfo.value.response.status_code == 500


def test_transport_error_raises_remote_store_error(monkeypatch, store: RemoteStore):
    def broken(method: str, url: str, **kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(remote_store.requests, "request", broken)

    with pytest.raises(RemoteStoreError, match="unreachable"):
        asyncio.run(store.delete_work_log("101"))
