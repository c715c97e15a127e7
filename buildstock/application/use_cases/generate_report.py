"""Generate Report Use Case: grouped IN/OUT totals over a date window."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from buildstock.application.dto.responses import (
    ReportFiltersResponse,
    ReportGroupResponse,
    ReportResponse,
    ReportSummaryResponse,
)
from buildstock.config import Settings, get_logger, get_settings
from buildstock.core.entities.queries import ReportFilters, ReportGroupBy, ReportPeriod
from buildstock.core.interfaces.ledger_store import ILedgerStore
from buildstock.core.services.ledger_report import LedgerReport, build_report

logger = get_logger(__name__)


@dataclass
class GenerateReportResult:
    """Report plus the filters it was computed with."""

    report: LedgerReport
    filters: ReportFilters


class GenerateReportUseCase:
    """
    Aggregate committed transactions by date bucket or reference entity.

    A missing end date defaults to today and a missing start date to
    `ledger.report_default_days` days before the end date.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        settings: Settings | None = None,
    ):
        self._ledger_store = ledger_store
        self._settings = settings

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from buildstock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    def _default_window(self, filters: ReportFilters) -> ReportFilters:
        if filters.start_date and filters.end_date:
            return filters
        days = (self._settings or get_settings()).ledger.report_default_days
        end_date = filters.end_date or datetime.now(UTC).date()
        start_date = filters.start_date or end_date - timedelta(days=days)
        return filters.model_copy(update={"start_date": start_date, "end_date": end_date})

    async def execute(
        self,
        filters: ReportFilters | None = None,
        group_by: ReportGroupBy = ReportGroupBy.DATE,
        period: ReportPeriod = ReportPeriod.DAILY,
    ) -> GenerateReportResult:
        """Execute generate report use case."""
        effective = self._default_window(filters or ReportFilters())

        ledger = await self._get_ledger_store()
        transactions = await ledger.list_transactions_for_report(effective)
        report = build_report(transactions, group_by=group_by, period=period)

        logger.info(
            "report_generated",
            group_by=group_by.value,
            period=period.value,
            start_date=str(effective.start_date),
            end_date=str(effective.end_date),
            groups=len(report.groups),
            transactions=report.summary.total.total_transactions,
        )
        return GenerateReportResult(report=report, filters=effective)

    def to_response(self, result: GenerateReportResult) -> ReportResponse:
        """Convert result to API response."""
        report = result.report
        total = report.summary.total
        return ReportResponse(
            group_by=report.group_by,
            period=report.period,
            filters=ReportFiltersResponse(**result.filters.model_dump()),
            groups=[ReportGroupResponse.model_validate(g) for g in report.groups],
            summary=ReportSummaryResponse(
                total_transactions=total.total_transactions,
                in_count=total.in_count,
                out_count=total.out_count,
                in_quantity=total.in_quantity,
                out_quantity=total.out_quantity,
                net_quantity=total.net_quantity,
                total_quantity=report.summary.total_quantity,
                in_value=total.in_value,
                out_value=total.out_value,
                net_value=total.net_value,
                total_value=report.summary.total_value,
            ),
        )
