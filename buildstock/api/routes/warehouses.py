"""Warehouse reference data endpoints."""

from fastapi import APIRouter, Depends, Response, status

from buildstock.api.dependencies import get_page_request, get_references
from buildstock.api.security import get_current_caller
from buildstock.application.dto.requests import (
    CreateWarehouseRequest,
    UpdateWarehouseRequest,
)
from buildstock.application.dto.responses import (
    ErrorResponse,
    PaginationResponse,
    WarehouseListResponse,
    WarehouseResponse,
)
from buildstock.core.entities.queries import PageRequest
from buildstock.core.entities.reference import Warehouse
from buildstock.core.exceptions import ValidationError, WarehouseNotFoundError
from buildstock.infrastructure.storage.sqlite import SQLiteReferenceStore

router = APIRouter(
    prefix="/api/warehouses",
    tags=["warehouses"],
    dependencies=[Depends(get_current_caller)],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=WarehouseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_warehouse(
    request: CreateWarehouseRequest,
    store: SQLiteReferenceStore = Depends(get_references),
) -> WarehouseResponse:
    """Create a warehouse with a unique code."""
    warehouse = await store.create_warehouse(Warehouse(**request.model_dump()))
    return WarehouseResponse.model_validate(warehouse)


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(
    search: str | None = None,
    purpose: str | None = None,
    is_active: bool | None = None,
    paging: PageRequest = Depends(get_page_request),
    store: SQLiteReferenceStore = Depends(get_references),
) -> WarehouseListResponse:
    """List warehouses ordered by code."""
    warehouses, total = await store.list_warehouses(
        search=search,
        purpose=purpose,
        is_active=is_active,
        limit=paging.limit,
        offset=paging.offset,
    )
    return WarehouseListResponse(
        items=[WarehouseResponse.model_validate(w) for w in warehouses],
        pagination=PaginationResponse.for_page(paging, total),
    )


@router.get(
    "/{warehouse_id}",
    response_model=WarehouseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_warehouse(
    warehouse_id: str,
    store: SQLiteReferenceStore = Depends(get_references),
) -> WarehouseResponse:
    """Get a warehouse by ID."""
    warehouse = await store.get_warehouse(warehouse_id)
    if warehouse is None:
        raise WarehouseNotFoundError(warehouse_id)
    return WarehouseResponse.model_validate(warehouse)


@router.put(
    "/{warehouse_id}",
    response_model=WarehouseResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_warehouse(
    warehouse_id: str,
    request: UpdateWarehouseRequest,
    store: SQLiteReferenceStore = Depends(get_references),
) -> WarehouseResponse:
    """Update warehouse fields; unset fields are kept."""
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("body", "nothing to change")
    warehouse = await store.update_warehouse(warehouse_id, changes)
    return WarehouseResponse.model_validate(warehouse)


@router.delete(
    "/{warehouse_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_warehouse(
    warehouse_id: str,
    store: SQLiteReferenceStore = Depends(get_references),
) -> Response:
    """Delete a warehouse that holds no stock and has no transactions."""
    await store.delete_warehouse(warehouse_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
