from __future__ import annotations

from pathlib import Path

import pytest

from architrack import backends
from architrack.backends import DataBackend, select_backend
from architrack.config import Settings
from architrack.local_store import LocalStore
from architrack.remote_store import RemoteStore


def _settings(tmp_path: Path, url: str | None) -> Settings:
    return Settings(supabase_url=url, supabase_key="anon", local_store_path=tmp_path / "local.db")


def test_remote_store_selected_when_endpoint_configured(tmp_path: Path):
    backend = select_backend(_settings(tmp_path, "https://demo.supabase.co"))

    assert isinstance(backend, RemoteStore)
    assert backend.base_url == "https://demo.supabase.co/rest/v1/"
    assert backend.api_key == "anon"
    assert isinstance(backend, DataBackend)


@pytest.mark.parametrize("url", [None, "", "   ", "demo.supabase.co", "ftp://demo.supabase.co"])
def test_local_store_selected_without_usable_endpoint(tmp_path: Path, url):
    backend = select_backend(_settings(tmp_path, url))

    assert isinstance(backend, LocalStore)
    assert backend.storage.path == tmp_path / "local.db"
    assert isinstance(backend, DataBackend)
    backend.storage.dispose()


def test_backend_is_chosen_once_per_process(monkeypatch, tmp_path: Path):
    backends.get_backend.cache_clear()
    monkeypatch.setattr(backends, "settings", _settings(tmp_path, "https://demo.supabase.co"))
    try:
        first = backends.get_backend()
        monkeypatch.setattr(backends, "settings", _settings(tmp_path, None))
        second = backends.get_backend()
    finally:
        backends.get_backend.cache_clear()

    assert first is second
    assert isinstance(second, RemoteStore)
