"""Supplier reference data endpoints."""

from fastapi import APIRouter, Depends, Response, status

from buildstock.api.dependencies import get_page_request, get_references
from buildstock.api.security import get_current_caller
from buildstock.application.dto.requests import CreateSupplierRequest, UpdateSupplierRequest
from buildstock.application.dto.responses import (
    ErrorResponse,
    PaginationResponse,
    SupplierListResponse,
    SupplierResponse,
)
from buildstock.core.entities.queries import PageRequest
from buildstock.core.entities.reference import Supplier
from buildstock.core.exceptions import SupplierNotFoundError, ValidationError
from buildstock.infrastructure.storage.sqlite import SQLiteReferenceStore

router = APIRouter(
    prefix="/api/suppliers",
    tags=["suppliers"],
    dependencies=[Depends(get_current_caller)],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_supplier(
    request: CreateSupplierRequest,
    store: SQLiteReferenceStore = Depends(get_references),
) -> SupplierResponse:
    supplier = await store.create_supplier(Supplier(**request.model_dump()))
    return SupplierResponse.model_validate(supplier)


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    search: str | None = None,
    paging: PageRequest = Depends(get_page_request),
    store: SQLiteReferenceStore = Depends(get_references),
) -> SupplierListResponse:
    suppliers, total = await store.list_suppliers(
        search=search, limit=paging.limit, offset=paging.offset
    )
    return SupplierListResponse(
        items=[SupplierResponse.model_validate(s) for s in suppliers],
        pagination=PaginationResponse.for_page(paging, total),
    )


@router.get(
    "/{supplier_id}",
    response_model=SupplierResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_supplier(
    supplier_id: str,
    store: SQLiteReferenceStore = Depends(get_references),
) -> SupplierResponse:
    supplier = await store.get_supplier(supplier_id)
    if supplier is None:
        raise SupplierNotFoundError(supplier_id)
    return SupplierResponse.model_validate(supplier)


@router.put(
    "/{supplier_id}",
    response_model=SupplierResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_supplier(
    supplier_id: str,
    request: UpdateSupplierRequest,
    store: SQLiteReferenceStore = Depends(get_references),
) -> SupplierResponse:
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("body", "nothing to change")
    supplier = await store.update_supplier(supplier_id, changes)
    return SupplierResponse.model_validate(supplier)


@router.delete(
    "/{supplier_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_supplier(
    supplier_id: str,
    store: SQLiteReferenceStore = Depends(get_references),
) -> Response:
    """Delete a supplier that no transaction was received from."""
    await store.delete_supplier(supplier_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
