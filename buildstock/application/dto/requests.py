"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

from buildstock.core.entities.inventory import TransactionType
from buildstock.core.entities.reference import ProjectStatus


# --- Ledger ---


class RecordMovementRequest(BaseModel):
    """Request to record an IN or OUT movement."""

    type: TransactionType = Field(..., description="Movement direction", examples=["IN"])
    material_id: str = Field(..., min_length=1, description="Material ID")
    warehouse_id: str = Field(..., min_length=1, description="Warehouse ID")
    quantity: StrictInt = Field(..., gt=0, description="Units moved, always positive")
    unit_price: float | None = Field(default=None, ge=0, description="Price per unit")
    total_price: float | None = Field(
        default=None,
        ge=0,
        description="Total price (defaults to unit_price * quantity)",
    )
    supplier_id: str | None = Field(
        default=None,
        description="Supplier of an IN movement (ignored for OUT)",
    )
    project_id: str | None = Field(default=None, description="Consuming project")
    notes: str | None = Field(default=None, description="Free-text notes")


class RegisterStockRequest(BaseModel):
    """Request to register initial stock for a (material, warehouse) pair."""

    material_id: str = Field(..., min_length=1, description="Material ID")
    warehouse_id: str = Field(..., min_length=1, description="Warehouse ID")
    current_stock: StrictInt = Field(default=0, ge=0, description="Stock on hand at registration")
    safety_stock: StrictInt = Field(default=0, ge=0, description="Low-stock threshold")
    unit_price: float | None = Field(default=None, ge=0, description="Price per unit")


class AdjustStockRequest(BaseModel):
    """Request for a manual stock correction.

    Only the fields present in the body are overwritten. An explicit null
    unit_price clears the price; current_stock and safety_stock cannot be
    cleared.
    """

    current_stock: StrictInt | None = Field(default=None, ge=0)
    safety_stock: StrictInt | None = Field(default=None, ge=0)
    unit_price: float | None = Field(default=None, ge=0)
    reason: str | None = Field(
        default=None,
        max_length=500,
        description="Why the stock was corrected",
        examples=["Physical count after audit"],
    )


# --- Reference data ---


class PartialUpdateRequest(BaseModel):
    """Base for update bodies where unset fields are kept.

    Fields listed in `not_nullable` may be omitted but not sent as null.
    """

    not_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class CreateWarehouseRequest(BaseModel):
    """Request to create a warehouse."""

    code: str = Field(..., min_length=1, max_length=50, examples=["WH-01"])
    name: str = Field(..., min_length=1, max_length=200)
    location: str | None = None
    purpose: str | None = Field(default=None, examples=["STORAGE", "SITE"])
    is_active: bool = True


class UpdateWarehouseRequest(PartialUpdateRequest):
    """Request to update a warehouse. Unset fields are kept."""

    not_nullable: ClassVar[tuple[str, ...]] = ("code", "name", "is_active")

    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = None
    purpose: str | None = None
    is_active: bool | None = None


class CreateMaterialRequest(BaseModel):
    """Request to create a material variant."""

    material_base_id: str = Field(..., min_length=1, description="Base material ID")
    code: str = Field(..., min_length=1, max_length=50, examples=["TILE-60-WHT"])
    name: str = Field(..., min_length=1, max_length=200)
    category: str | None = None
    unit: str | None = Field(default=None, examples=["pcs", "m2", "kg"])
    color_id: str | None = None
    size: str | None = Field(default=None, examples=["60x60"])
    finish_type: str | None = Field(default=None, examples=["matte", "polished"])
    unit_price: float | None = Field(default=None, ge=0)
    description: str | None = None


class UpdateMaterialRequest(PartialUpdateRequest):
    """Request to update a material. Base material, color and code are fixed."""

    model_config = ConfigDict(extra="forbid")

    not_nullable: ClassVar[tuple[str, ...]] = ("name", "is_active")

    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = None
    unit: str | None = None
    size: str | None = None
    finish_type: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    description: str | None = None
    is_active: bool | None = None


class CreateSupplierRequest(BaseModel):
    """Request to create a supplier."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    supplier_type: str = "GENERAL"
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None


class UpdateSupplierRequest(PartialUpdateRequest):
    """Request to update a supplier. Unset fields are kept."""

    not_nullable: ClassVar[tuple[str, ...]] = ("code", "name", "supplier_type", "is_active")

    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    supplier_type: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    is_active: bool | None = None


class CreateProjectRequest(BaseModel):
    """Request to create a project."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    status: ProjectStatus = ProjectStatus.PLANNING
