from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .models import Project, WorkLog

ALL_PROJECTS = "all"
UNKNOWN_PROJECT = "Unknown"
DEFAULT_FROM_DATE = dt.date(2000, 1, 1)
END_OF_DAY = dt.time(23, 59, 59, 999000)

# Red, teal, indigo, amber, violet
CHART_COLORS = ("#ef4444", "#14b8a6", "#6366f1", "#f59e0b", "#8b5cf6")

DateInput = Union[dt.date, str, None]


def _parse_date(value: DateInput) -> Optional[dt.date]:
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = value.strip()
    if not text:
        return None
    return dt.date.fromisoformat(text)


@dataclass(slots=True)
class ReportFilters:
    """Project and inclusive date range applied to the work logs."""

    project_id: str = ALL_PROJECTS
    from_date: DateInput = None
    to_date: DateInput = None

    def bounds(self, today: Optional[dt.date] = None) -> tuple[dt.datetime, dt.datetime]:
        start = _parse_date(self.from_date) or DEFAULT_FROM_DATE
        end = _parse_date(self.to_date) or today or dt.date.today()
        return dt.datetime.combine(start, dt.time.min), dt.datetime.combine(end, END_OF_DAY)

    def matches(self, log: WorkLog, start: dt.datetime, end: dt.datetime) -> bool:
        if self.project_id != ALL_PROJECTS and log.project_id != self.project_id:
            return False
        logged_at = dt.datetime.combine(log.date, dt.time.min)
        return start <= logged_at <= end


@dataclass(slots=True)
class ChartDataPoint:
    name: str
    hours: float
    fill: str

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "hours": self.hours, "fill": self.fill}


@dataclass(slots=True)
class ReportSummary:
    total_hours: float
    total_records: int
    chart_data: List[ChartDataPoint] = field(default_factory=list)
    filtered_logs: List[WorkLog] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_hours": self.total_hours,
            "total_records": self.total_records,
            "chart_data": [point.as_dict() for point in self.chart_data],
        }


def filter_logs(
    logs: Iterable[WorkLog],
    filters: ReportFilters,
    *,
    today: Optional[dt.date] = None,
) -> List[WorkLog]:
    start, end = filters.bounds(today)
    return [log for log in logs if filters.matches(log, start, end)]


def hours_by_project(projects: Iterable[Project], logs: Iterable[WorkLog]) -> List[ChartDataPoint]:
    """Sum hours per project name in first-seen order; unresolved ids count as ``Unknown``."""
    names = {project.id: project.name for project in projects}
    totals: Dict[str, float] = {}
    for log in logs:
        name = names.get(log.project_id, UNKNOWN_PROJECT)
        totals[name] = totals.get(name, 0) + log.hours
    return [
        ChartDataPoint(name=name, hours=hours, fill=CHART_COLORS[index % len(CHART_COLORS)])
        for index, (name, hours) in enumerate(totals.items())
    ]


def build_report(
    projects: Iterable[Project],
    logs: Iterable[WorkLog],
    filters: Optional[ReportFilters] = None,
    *,
    today: Optional[dt.date] = None,
) -> ReportSummary:
    filters = filters or ReportFilters()
    selected = filter_logs(logs, filters, today=today)
    return ReportSummary(
        total_hours=sum(log.hours for log in selected),
        total_records=len(selected),
        chart_data=hours_by_project(projects, selected),
        filtered_logs=selected,
    )


__all__ = [
    "ALL_PROJECTS",
    "CHART_COLORS",
    "ChartDataPoint",
    "ReportFilters",
    "ReportSummary",
    "UNKNOWN_PROJECT",
    "build_report",
    "filter_logs",
    "hours_by_project",
]
