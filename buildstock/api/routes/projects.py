"""Project reference data endpoints."""

from fastapi import APIRouter, Depends, status

from buildstock.api.dependencies import get_page_request, get_references
from buildstock.api.security import get_current_caller
from buildstock.application.dto.requests import CreateProjectRequest
from buildstock.application.dto.responses import (
    ErrorResponse,
    PaginationResponse,
    ProjectListResponse,
    ProjectResponse,
)
from buildstock.core.entities.queries import PageRequest
from buildstock.core.entities.reference import Project
from buildstock.core.exceptions import ProjectNotFoundError
from buildstock.infrastructure.storage.sqlite import SQLiteReferenceStore

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    dependencies=[Depends(get_current_caller)],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_project(
    request: CreateProjectRequest,
    store: SQLiteReferenceStore = Depends(get_references),
) -> ProjectResponse:
    project = await store.create_project(Project(**request.model_dump()))
    return ProjectResponse.model_validate(project)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    search: str | None = None,
    paging: PageRequest = Depends(get_page_request),
    store: SQLiteReferenceStore = Depends(get_references),
) -> ProjectListResponse:
    projects, total = await store.list_projects(
        search=search, limit=paging.limit, offset=paging.offset
    )
    return ProjectListResponse(
        items=[ProjectResponse.model_validate(p) for p in projects],
        pagination=PaginationResponse.for_page(paging, total),
    )


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_project(
    project_id: str,
    store: SQLiteReferenceStore = Depends(get_references),
) -> ProjectResponse:
    project = await store.get_project(project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    return ProjectResponse.model_validate(project)
