"""
Reference data the ledger validates against.

Materials, warehouses, suppliers and projects are looked up by id only; the
ledger never owns them.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ProjectStatus(str, Enum):
    """Lifecycle status of a construction project."""

    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Material(BaseModel):
    """
    A concrete stockable variant of a base material.

    material_base_id and color_id identify the variant and never change once
    the material exists.
    """

    id: str | None = None
    material_base_id: str
    code: str
    name: str
    category: str | None = None
    unit: str | None = None
    color_id: str | None = None
    size: str | None = None
    finish_type: str | None = None
    unit_price: float | None = None
    description: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Warehouse(BaseModel):
    """A storage location with a unique human code."""

    id: str | None = None
    code: str
    name: str
    location: str | None = None
    purpose: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Supplier(BaseModel):
    """A vendor that delivers materials (IN movements)."""

    id: str | None = None
    code: str
    name: str
    supplier_type: str = "GENERAL"
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Project(BaseModel):
    """A construction project that consumes materials (OUT movements)."""

    id: str | None = None
    code: str
    name: str
    status: ProjectStatus = ProjectStatus.PLANNING
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
