"""Inventory ledger domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class TransactionType(str, Enum):
    """Direction of an inventory movement."""

    IN = "IN"
    OUT = "OUT"

    @property
    def sign(self) -> int:
        return 1 if self is TransactionType.IN else -1


class StockLevel(BaseModel):
    """Current quantity of one material held in one warehouse."""

    id: str | None = None
    material_id: str
    warehouse_id: str
    current_stock: int = 0
    safety_stock: int = 0
    unit_price: float | None = None
    initial_stock: int = 0  # value at creation, reconciliation baseline
    version: int = 0
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.safety_stock

    @property
    def is_out_of_stock(self) -> bool:
        return self.current_stock == 0

    @property
    def stock_value(self) -> float:
        """Stock value = current_stock * unit_price (unpriced counts as 0)."""
        return self.current_stock * (self.unit_price or 0.0)

    @property
    def shortage(self) -> int:
        """Units missing to reach the safety stock."""
        return max(0, self.safety_stock - self.current_stock)


class MaterialTransaction(BaseModel):
    """
    Immutable record of one IN or OUT movement.

    total_price is derived from unit_price * quantity unless given explicitly.
    """

    id: int | None = None
    type: TransactionType
    material_id: str
    warehouse_id: str
    stock_level_id: str | None = None
    quantity: int = Field(..., gt=0)
    unit_price: float | None = None
    total_price: float | None = None
    supplier_id: str | None = None  # IN only
    project_id: str | None = None
    user_id: str
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def compute_total_price(self) -> "MaterialTransaction":
        if self.total_price is None and self.unit_price is not None:
            self.total_price = self.unit_price * self.quantity
        return self

    @property
    def signed_quantity(self) -> int:
        return self.type.sign * self.quantity


class StockAdjustment(BaseModel):
    """Audit entry for a manual stock correction made outside the ledger."""

    id: int | None = None
    stock_level_id: str
    user_id: str
    previous_current_stock: int
    new_current_stock: int
    previous_safety_stock: int
    new_safety_stock: int
    previous_unit_price: float | None = None
    new_unit_price: float | None = None
    reason: str | None = None
    after_transaction_id: int = 0  # last transaction covered by the old baseline
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def stock_delta(self) -> int:
        return self.new_current_stock - self.previous_current_stock


class MovementOutcome(BaseModel):
    """Transaction written by a movement plus the resulting stock snapshot."""

    transaction: MaterialTransaction
    stock_level: StockLevel
    created: bool = False  # True when the movement created the stock level
