"""Material reference data endpoints."""

from fastapi import APIRouter, Depends, Response, status

from buildstock.api.dependencies import get_page_request, get_references
from buildstock.api.security import get_current_caller
from buildstock.application.dto.requests import CreateMaterialRequest, UpdateMaterialRequest
from buildstock.application.dto.responses import (
    ErrorResponse,
    MaterialListResponse,
    MaterialResponse,
    PaginationResponse,
)
from buildstock.core.entities.queries import PageRequest
from buildstock.core.entities.reference import Material
from buildstock.core.exceptions import MaterialNotFoundError, ValidationError
from buildstock.infrastructure.storage.sqlite import SQLiteReferenceStore

router = APIRouter(
    prefix="/api/materials",
    tags=["materials"],
    dependencies=[Depends(get_current_caller)],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_material(
    request: CreateMaterialRequest,
    store: SQLiteReferenceStore = Depends(get_references),
) -> MaterialResponse:
    """Create a material variant with a unique code."""
    material = await store.create_material(Material(**request.model_dump()))
    return MaterialResponse.model_validate(material)


@router.get("", response_model=MaterialListResponse)
async def list_materials(
    search: str | None = None,
    material_base_id: str | None = None,
    paging: PageRequest = Depends(get_page_request),
    store: SQLiteReferenceStore = Depends(get_references),
) -> MaterialListResponse:
    """List materials ordered by code."""
    materials, total = await store.list_materials(
        search=search,
        material_base_id=material_base_id,
        limit=paging.limit,
        offset=paging.offset,
    )
    return MaterialListResponse(
        items=[MaterialResponse.model_validate(m) for m in materials],
        pagination=PaginationResponse.for_page(paging, total),
    )


@router.get(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(
    material_id: str,
    store: SQLiteReferenceStore = Depends(get_references),
) -> MaterialResponse:
    """Get a material by ID."""
    material = await store.get_material(material_id)
    if material is None:
        raise MaterialNotFoundError(material_id)
    return MaterialResponse.model_validate(material)


@router.put(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_material(
    material_id: str,
    request: UpdateMaterialRequest,
    store: SQLiteReferenceStore = Depends(get_references),
) -> MaterialResponse:
    """Update descriptive material fields; the variant identity is fixed."""
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("body", "nothing to change")
    material = await store.update_material(material_id, changes)
    return MaterialResponse.model_validate(material)


@router.delete(
    "/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_material(
    material_id: str,
    store: SQLiteReferenceStore = Depends(get_references),
) -> Response:
    """Delete a material that is not stocked and has no transactions."""
    await store.delete_material(material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
