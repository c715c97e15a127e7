"""Integration tests: use cases against a migrated SQLite database."""

import pytest

from buildstock.application.dto.requests import (
    AdjustStockRequest,
    RecordMovementRequest,
    RegisterStockRequest,
)
from buildstock.application.use_cases import (
    AdjustStockUseCase,
    GenerateReportUseCase,
    ReconcileStockUseCase,
    RecordMovementUseCase,
    RegisterStockUseCase,
    StockSummaryUseCase,
)
from buildstock.core.entities.queries import ReportGroupBy, StockLevelQuery
from buildstock.core.exceptions import InsufficientStockError


@pytest.fixture
def record(ledger_store, reference_store):
    return RecordMovementUseCase(ledger_store=ledger_store, reference_store=reference_store)


@pytest.fixture
def reconcile(ledger_store):
    return ReconcileStockUseCase(ledger_store=ledger_store)


class TestLedgerFlow:
    """Receive, issue, report and reconcile through the real stores."""

    async def test_receive_issue_report(self, record, ledger_store, seeded, caller, mock_settings):
        mock_settings.ledger.report_default_days = 30

        received = await record.execute(
            RecordMovementRequest(
                type="IN",
                material_id=seeded["tile"],
                warehouse_id=seeded["main"],
                quantity=10,
                unit_price=5.0,
                supplier_id=seeded["supplier"],
            ),
            caller,
        )
        assert received.created is True

        issued = await record.execute(
            RecordMovementRequest(
                type="OUT",
                material_id=seeded["tile"],
                warehouse_id=seeded["main"],
                quantity=4,
                project_id=seeded["project"],
            ),
            caller,
        )
        assert issued.stock_level.current_stock == 6
        assert issued.stock_level.id == received.stock_level.id

        report_uc = GenerateReportUseCase(ledger_store=ledger_store, settings=mock_settings)
        report = report_uc.to_response(await report_uc.execute(group_by=ReportGroupBy.MATERIAL))
        assert len(report.groups) == 1
        group = report.groups[0]
        assert group.key == seeded["tile"]
        assert (group.in_quantity, group.out_quantity, group.net_quantity) == (10, 4, 6)
        assert group.in_value == 50.0

    async def test_overdraw_leaves_ledger_untouched(self, record, ledger_store, seeded, caller):
        first = await record.execute(
            RecordMovementRequest(
                type="IN", material_id=seeded["tile"], warehouse_id=seeded["main"], quantity=3
            ),
            caller,
        )
        with pytest.raises(InsufficientStockError):
            await record.execute(
                RecordMovementRequest(
                    type="OUT", material_id=seeded["tile"], warehouse_id=seeded["main"], quantity=4
                ),
                caller,
            )

        stock = await ledger_store.get_stock_level(first.stock_level.id)
        assert stock.current_stock == 3
        assert len(await ledger_store.list_stock_transactions(stock.id)) == 1

    async def test_low_stock_listing(self, ledger_store, reference_store, seeded):
        register = RegisterStockUseCase(ledger_store=ledger_store, reference_store=reference_store)
        await register.execute(
            RegisterStockRequest(
                material_id=seeded["tile"], warehouse_id=seeded["main"],
                current_stock=2, safety_stock=5,
            )
        )
        await register.execute(
            RegisterStockRequest(
                material_id=seeded["cement"], warehouse_id=seeded["main"],
                current_stock=20, safety_stock=5,
            )
        )

        low, total = await ledger_store.list_stock_levels(StockLevelQuery(low_stock_only=True))
        assert total == 1
        assert low[0].material_id == seeded["tile"]
        assert low[0].shortage == 3

    async def test_adjustment_becomes_baseline(
        self, record, reconcile, ledger_store, seeded, caller
    ):
        """After a manual correction, reconciliation counts from the adjustment."""
        request = RecordMovementRequest(
            type="IN", material_id=seeded["tile"], warehouse_id=seeded["main"], quantity=10
        )
        outcome = await record.execute(request, caller)
        stock_id = outcome.stock_level.id
        assert (await reconcile.execute(stock_id)).consistent is True

        adjust = AdjustStockUseCase(ledger_store=ledger_store)
        await adjust.execute(
            stock_id, AdjustStockRequest(current_stock=7, reason="breakage"), caller
        )
        await record.execute(
            RecordMovementRequest(
                type="OUT", material_id=seeded["tile"], warehouse_id=seeded["main"], quantity=2
            ),
            caller,
        )

        result = await reconcile.execute(stock_id)
        assert result.baseline_source == "adjustment"
        assert result.baseline == 7
        assert result.transaction_count == 1
        assert result.actual_stock == 5
        assert result.consistent is True

    async def test_summary(self, record, ledger_store, reference_store, seeded, caller, mock_settings):
        mock_settings.ledger.summary_period_days = 30
        await record.execute(
            RecordMovementRequest(
                type="IN", material_id=seeded["tile"], warehouse_id=seeded["site"],
                quantity=4, unit_price=2.5,
            ),
            caller,
        )
        summary_uc = StockSummaryUseCase(
            ledger_store=ledger_store, reference_store=reference_store, settings=mock_settings
        )

        summary = await summary_uc.execute(warehouse_id=seeded["site"])
        assert summary.stock_levels == 1
        assert summary.total_units == 4
        assert summary.total_value == 10.0
        assert summary.in_count == 1
        assert summary.in_value == 10.0

        other = await summary_uc.execute(warehouse_id=seeded["main"])
        assert other.stock_levels == 0
        assert other.in_count == 0
