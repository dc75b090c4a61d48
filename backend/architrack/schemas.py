from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Project, WorkLog


class ProjectUpdateRequest(BaseModel):
    """Project edit; fields left out keep the values of the cached project."""

    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    is_archived: Optional[bool] = None
    created_at: Optional[str] = None

    def to_project(self, project_id: str, current: Optional[Project] = None) -> Project:
        changes = self.model_dump(exclude_unset=True, exclude_none=True)
        base = current.model_dump() if current is not None else {}
        return Project.model_validate({**base, **changes, "id": project_id})


class WorkLogUpdateRequest(BaseModel):
    project_id: str = Field(min_length=1)
    date: dt.date
    hours: float = Field(ge=0, allow_inf_nan=False)
    description: str = ""
    created_at: Optional[str] = None

    def to_log(self, log_id: str, current: Optional[WorkLog] = None) -> WorkLog:
        changes = self.model_dump(exclude_unset=True, exclude_none=True)
        base = current.model_dump() if current is not None else {}
        return WorkLog.model_validate({**base, **changes, "id": log_id})


class ChartDataPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    name: str
    hours: float
    fill: str


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    total_hours: float
    total_records: int
    chart_data: List[ChartDataPointResponse]
    filtered_logs: List[WorkLog]


class StatusResponse(BaseModel):
    backend: str
    loading: bool
    projects: int
    logs: int
