"""Tests for GenerateReportUseCase."""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from buildstock.application.use_cases.generate_report import GenerateReportUseCase
from buildstock.core.entities.inventory import MaterialTransaction, TransactionType
from buildstock.core.entities.queries import ReportFilters, ReportGroupBy, ReportPeriod


@pytest.fixture
def settings():
    mock = MagicMock()
    mock.ledger.report_default_days = 30
    return mock


@pytest.fixture
def mock_ledger_store():
    store = AsyncMock()
    when = datetime.now(UTC)
    store.list_transactions_for_report.return_value = [
        MaterialTransaction(
            id=1, type=TransactionType.IN, material_id="M1", warehouse_id="W1",
            quantity=10, unit_price=5.0, user_id="u", created_at=when,
        ),
        MaterialTransaction(
            id=2, type=TransactionType.OUT, material_id="M1", warehouse_id="W1",
            quantity=4, unit_price=5.0, user_id="u", created_at=when,
        ),
    ]
    return store


@pytest.fixture
def use_case(mock_ledger_store, settings):
    return GenerateReportUseCase(ledger_store=mock_ledger_store, settings=settings)


class TestGenerateReportUseCase:
    async def test_default_window(self, use_case, mock_ledger_store):
        """Without dates the report covers the last 30 days."""
        result = await use_case.execute()

        filters = mock_ledger_store.list_transactions_for_report.call_args[0][0]
        today = datetime.now(UTC).date()
        assert filters.end_date == today
        assert filters.start_date == today - timedelta(days=30)
        assert result.filters == filters

    async def test_explicit_start_kept(self, use_case, mock_ledger_store):
        """A start date alone closes the window at today."""
        await use_case.execute(ReportFilters(start_date=date(2024, 1, 1)))
        filters = mock_ledger_store.list_transactions_for_report.call_args[0][0]
        assert filters.start_date == date(2024, 1, 1)
        assert filters.end_date == datetime.now(UTC).date()

    async def test_end_date_only(self, use_case, mock_ledger_store):
        """An end date alone opens the window 30 days before it."""
        result = await use_case.execute(ReportFilters(end_date=date(2026, 1, 31)))
        filters = mock_ledger_store.list_transactions_for_report.call_args[0][0]
        assert filters.start_date == date(2026, 1, 1)
        assert filters.end_date == date(2026, 1, 31)
        assert result.filters.start_date == date(2026, 1, 1)

    async def test_both_dates_kept(self, use_case, mock_ledger_store):
        await use_case.execute(
            ReportFilters(start_date=date(2020, 1, 1), end_date=date(2020, 6, 30))
        )
        filters = mock_ledger_store.list_transactions_for_report.call_args[0][0]
        assert (filters.start_date, filters.end_date) == (date(2020, 1, 1), date(2020, 6, 30))

    async def test_filters_forwarded(self, use_case, mock_ledger_store):
        await use_case.execute(
            ReportFilters(start_date=date(2024, 1, 1), warehouse_id="W1", type=TransactionType.OUT)
        )
        filters = mock_ledger_store.list_transactions_for_report.call_args[0][0]
        assert filters.warehouse_id == "W1"
        assert filters.type is TransactionType.OUT

    async def test_group_by_material(self, use_case):
        result = await use_case.execute(group_by=ReportGroupBy.MATERIAL)
        response = use_case.to_response(result)

        assert response.group_by is ReportGroupBy.MATERIAL
        assert response.period is ReportPeriod.DAILY
        group = response.groups[0]
        assert group.key == "M1"
        assert (group.in_quantity, group.out_quantity, group.net_quantity) == (10, 4, 6)
        assert group.average_unit_price == 5.0
        assert response.summary.net_quantity == 6
        assert response.summary.total_quantity == 14
        assert response.summary.total_value == 70.0
        assert response.filters.start_date is not None
