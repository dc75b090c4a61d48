from __future__ import annotations

from typing import Optional

import requests


class DataLayerError(RuntimeError):
    """Base error for failures inside the data layer."""


class RemoteStoreError(DataLayerError):
    """A request against the remote backend failed."""

    def __init__(self, message: str, *, response: Optional[requests.Response] = None) -> None:
        super().__init__(message)
        self.response = response


class ProjectNotFoundError(DataLayerError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id


__all__ = ["DataLayerError", "ProjectNotFoundError", "RemoteStoreError"]
