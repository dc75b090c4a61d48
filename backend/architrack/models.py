from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_identifier(value: Any) -> Any:
    # Remote tables may hand back integer keys; ids are opaque strings here.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value)) if float(value).is_integer() else str(value)
    return value


class Project(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    code: str
    is_archived: bool = False
    created_at: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return _as_identifier(value)

    @field_validator("is_archived", mode="before")
    @classmethod
    def _coerce_archived(cls, value: Any) -> bool:
        return bool(value)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class WorkLog(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    project_id: str
    date: dt.date
    hours: float = Field(ge=0, allow_inf_nan=False)
    description: str = ""
    created_at: Optional[str] = None

    @field_validator("id", "project_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return _as_identifier(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ProjectCreate(BaseModel):
    """Payload for a new project; the backend assigns the id."""

    name: str = Field(min_length=1)
    code: str = Field(min_length=1)

    @field_validator("name", "code", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class WorkLogCreate(BaseModel):
    """Payload for a new work log entry."""

    project_id: str = Field(min_length=1)
    date: dt.date
    hours: float = Field(ge=0, allow_inf_nan=False)
    description: str = ""

    @field_validator("project_id", mode="before")
    @classmethod
    def _coerce_project_id(cls, value: Any) -> Any:
        return _as_identifier(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> Any:
        return "" if value is None else value


def sanitize_project(record: dict[str, Any]) -> Project:
    """Build a Project from a raw backend row, forcing ``is_archived`` to a strict boolean."""
    return Project.model_validate({**record, "is_archived": bool(record.get("is_archived"))})


__all__ = ["Project", "ProjectCreate", "WorkLog", "WorkLogCreate", "sanitize_project"]
