"""
Ledger report aggregation.

Pure read-side rollups over committed transactions: nothing here touches
storage, so the same rows always produce the same report.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from pydantic import BaseModel

from buildstock.config import get_logger
from buildstock.core.entities.inventory import MaterialTransaction, TransactionType
from buildstock.core.entities.queries import ReportGroupBy, ReportPeriod

logger = get_logger(__name__)


class MovementTotals(BaseModel):
    """IN/OUT sums for one group of transactions."""

    in_quantity: int = 0
    out_quantity: int = 0
    in_value: float = 0.0
    out_value: float = 0.0
    in_count: int = 0
    out_count: int = 0

    @property
    def net_quantity(self) -> int:
        return self.in_quantity - self.out_quantity

    @property
    def net_value(self) -> float:
        return self.in_value - self.out_value

    @property
    def total_transactions(self) -> int:
        return self.in_count + self.out_count

    def add(self, tx: MaterialTransaction) -> None:
        value = tx.total_price or 0.0
        if tx.type is TransactionType.IN:
            self.in_quantity += tx.quantity
            self.in_value += value
            self.in_count += 1
        else:
            self.out_quantity += tx.quantity
            self.out_value += value
            self.out_count += 1


class ReportGroup(MovementTotals):
    """One row of a grouped report, keyed by date bucket or entity id."""

    key: str
    average_unit_price: float | None = None  # material grouping only


class ReportSummary(BaseModel):
    """Totals across every transaction that passed the filters."""

    total: MovementTotals
    total_quantity: int
    total_value: float


class LedgerReport(BaseModel):
    group_by: ReportGroupBy
    period: ReportPeriod
    groups: list[ReportGroup]
    summary: ReportSummary


def bucket_key(created_at: datetime, period: ReportPeriod) -> str:
    """
    Date bucket of a transaction timestamp.

    Weekly buckets start on Sunday.
    """
    day = created_at.date()
    if period is ReportPeriod.MONTHLY:
        return day.strftime("%Y-%m")
    if period is ReportPeriod.WEEKLY:
        days_since_sunday = (day.weekday() + 1) % 7
        return (day - timedelta(days=days_since_sunday)).isoformat()
    return day.isoformat()


def _group_key(
    tx: MaterialTransaction, group_by: ReportGroupBy, period: ReportPeriod
) -> str | None:
    if group_by is ReportGroupBy.DATE:
        return bucket_key(tx.created_at, period)
    if group_by is ReportGroupBy.MATERIAL:
        return tx.material_id
    if group_by is ReportGroupBy.WAREHOUSE:
        return tx.warehouse_id
    if group_by is ReportGroupBy.SUPPLIER:
        return tx.supplier_id
    return tx.project_id


def build_report(
    transactions: Iterable[MaterialTransaction],
    group_by: ReportGroupBy = ReportGroupBy.DATE,
    period: ReportPeriod = ReportPeriod.DAILY,
) -> LedgerReport:
    """
    Group transactions and sum IN/OUT quantities and values.

    Supplier and project groupings skip transactions without that reference.
    Date groups are sorted ascending by bucket; entity groups keep first-seen
    order and carry no ordering guarantee.
    """
    groups: dict[str, ReportGroup] = {}
    prices: dict[str, list[float]] = {}
    overall = MovementTotals()

    for tx in transactions:
        overall.add(tx)

        key = _group_key(tx, group_by, period)
        if key is None:
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = ReportGroup(key=key)
        group.add(tx)
        if tx.unit_price is not None:
            prices.setdefault(key, []).append(tx.unit_price)

    if group_by is ReportGroupBy.MATERIAL:
        for key, group in groups.items():
            unit_prices = prices.get(key)
            if unit_prices:
                group.average_unit_price = sum(unit_prices) / len(unit_prices)

    rows = list(groups.values())
    if group_by is ReportGroupBy.DATE:
        rows.sort(key=lambda g: g.key)

    logger.debug(
        "ledger_report_built",
        group_by=group_by.value,
        period=period.value,
        groups=len(rows),
        transactions=overall.total_transactions,
    )

    return LedgerReport(
        group_by=group_by,
        period=period,
        groups=rows,
        summary=ReportSummary(
            total=overall,
            total_quantity=overall.in_quantity + overall.out_quantity,
            total_value=overall.in_value + overall.out_value,
        ),
    )
