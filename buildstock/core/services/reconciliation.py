"""
Stock reconciliation.

Checks that a stock level equals its baseline plus the signed sum of the
transactions recorded after that baseline. The baseline is the value at
registration, or the value written by the most recent manual adjustment;
transactions before an adjustment are not counted.
"""

from collections.abc import Sequence

from pydantic import BaseModel

from buildstock.core.entities.inventory import (
    MaterialTransaction,
    StockAdjustment,
    StockLevel,
)


class ReconciliationResult(BaseModel):
    stock_level_id: str
    baseline: int
    baseline_source: str  # "initial" | "adjustment"
    after_transaction_id: int
    transaction_count: int
    net_movement: int
    expected_stock: int
    actual_stock: int

    @property
    def consistent(self) -> bool:
        return self.expected_stock == self.actual_stock

    @property
    def discrepancy(self) -> int:
        return self.actual_stock - self.expected_stock


def reconcile(
    stock_level: StockLevel,
    transactions: Sequence[MaterialTransaction],
    latest_adjustment: StockAdjustment | None = None,
) -> ReconciliationResult:
    """
    Compare a stock snapshot with what its transaction history implies.

    `transactions` must already be limited to ids after the baseline.
    """
    if latest_adjustment is not None:
        baseline = latest_adjustment.new_current_stock
        source = "adjustment"
        after_id = latest_adjustment.after_transaction_id
    else:
        baseline = stock_level.initial_stock
        source = "initial"
        after_id = 0

    counted = [tx for tx in transactions if (tx.id or 0) > after_id]
    net = sum(tx.signed_quantity for tx in counted)

    return ReconciliationResult(
        stock_level_id=stock_level.id or "",
        baseline=baseline,
        baseline_source=source,
        after_transaction_id=after_id,
        transaction_count=len(counted),
        net_movement=net,
        expected_stock=baseline + net,
        actual_stock=stock_level.current_stock,
    )
