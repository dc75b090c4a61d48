from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .backends import DataBackend, get_backend
from .config import settings
from .context import DataContext
from .errors import ProjectNotFoundError, RemoteStoreError
from .models import Project, ProjectCreate, WorkLog, WorkLogCreate
from .reports import ALL_PROJECTS, ReportFilters, build_report
from .schemas import (
    ProjectUpdateRequest,
    ReportResponse,
    StatusResponse,
    WorkLogUpdateRequest,
)


def get_data_context(request: Request) -> DataContext:
    return request.app.state.data_context


def create_app(backend_factory: Callable[[], DataBackend] = get_backend) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context = DataContext(backend_factory())
        app.state.data_context = context
        await context.start()
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://127.0.0.1:5173", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RemoteStoreError)
    async def remote_store_error(request: Request, exc: RemoteStoreError) -> JSONResponse:
        return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_502_BAD_GATEWAY)

    @app.exception_handler(ProjectNotFoundError)
    async def project_not_found(request: Request, exc: ProjectNotFoundError) -> JSONResponse:
        return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_404_NOT_FOUND)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/status", response_model=StatusResponse)
    def data_status(context: DataContext = Depends(get_data_context)) -> StatusResponse:
        return StatusResponse(
            backend=context.backend.name,
            loading=context.loading,
            projects=len(context.projects),
            logs=len(context.logs),
        )

    @app.post("/refresh", response_model=StatusResponse)
    async def refresh(context: DataContext = Depends(get_data_context)) -> StatusResponse:
        await context.refresh_data()
        return data_status(context)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    @app.get("/projects", response_model=list[Project])
    def list_projects(sort: bool = False, active: bool = False, context: DataContext = Depends(get_data_context)):
        if active:
            return list(context.active_projects())
        if sort:
            return list(context.sorted_projects())
        return list(context.projects)

    @app.post("/projects", response_model=list[Project], status_code=status.HTTP_201_CREATED)
    async def create_project(payload: ProjectCreate, context: DataContext = Depends(get_data_context)):
        await context.add_project(payload)
        return list(context.projects)

    @app.put("/projects/{project_id}", response_model=list[Project])
    async def update_project(
        project_id: str,
        payload: ProjectUpdateRequest,
        context: DataContext = Depends(get_data_context),
    ):
        await context.update_project(payload.to_project(project_id, context.project_by_id(project_id)))
        return list(context.projects)

    @app.post("/projects/{project_id}/archive", response_model=Project)
    async def toggle_project_archive(project_id: str, context: DataContext = Depends(get_data_context)):
        return await context.toggle_archive(project_id)

    @app.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_project(project_id: str, context: DataContext = Depends(get_data_context)) -> Response:
        await context.delete_project(project_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Work logs
    # ------------------------------------------------------------------
    @app.get("/logs", response_model=list[WorkLog])
    def list_logs(context: DataContext = Depends(get_data_context)):
        return list(context.logs)

    @app.post("/logs", response_model=list[WorkLog], status_code=status.HTTP_201_CREATED)
    async def create_log(payload: WorkLogCreate, context: DataContext = Depends(get_data_context)):
        await context.add_log(payload)
        return list(context.logs)

    @app.put("/logs/{log_id}", response_model=list[WorkLog])
    async def update_log(
        log_id: str,
        payload: WorkLogUpdateRequest,
        context: DataContext = Depends(get_data_context),
    ):
        await context.update_log(payload.to_log(log_id, context.log_by_id(log_id)))
        return list(context.logs)

    @app.delete("/logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_log(log_id: str, context: DataContext = Depends(get_data_context)) -> Response:
        await context.delete_log(log_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    @app.get("/reports", response_model=ReportResponse)
    def report(
        project_id: str = ALL_PROJECTS,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        context: DataContext = Depends(get_data_context),
    ):
        filters = ReportFilters(project_id=project_id, from_date=from_date, to_date=to_date)
        try:
            summary = build_report(context.projects, context.logs, filters)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return ReportResponse.model_validate(summary, from_attributes=True)

    return app


app = create_app()
