"""Tests for ledger query objects."""

from datetime import date

import pytest
from pydantic import ValidationError

from buildstock.core.entities.identity import Caller, UserRole
from buildstock.core.entities.queries import (
    Page,
    PageRequest,
    ReportFilters,
    StockLevelQuery,
    StockSort,
    TransactionQuery,
)


class TestPaging:
    def test_offset(self):
        assert PageRequest().offset == 0
        assert PageRequest(page=3, limit=20).offset == 40

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            PageRequest(page=0)

    @pytest.mark.parametrize(
        ("total", "limit", "pages"),
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2)],
    )
    def test_total_pages(self, total, limit, pages):
        assert Page(page=1, limit=limit, total=total).total_pages == pages


class TestDateRanges:
    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError, match="start_date"):
            TransactionQuery(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

    def test_single_day_allowed(self):
        filters = ReportFilters(start_date=date(2024, 1, 1), end_date=date(2024, 1, 1))
        assert filters.start_date == filters.end_date

    def test_open_ended(self):
        assert TransactionQuery(end_date=date(2024, 1, 1)).start_date is None


class TestStockLevelQuery:
    def test_defaults(self):
        query = StockLevelQuery()
        assert query.sort is StockSort.LAST_UPDATED
        assert query.descending is True
        assert query.paging.limit == 10


class TestCaller:
    def test_default_role(self):
        caller = Caller(user_id="u1")
        assert caller.role is UserRole.USER
        assert caller.is_admin is False

    def test_admin(self):
        assert Caller(user_id="u1", role=UserRole.ADMIN).is_admin is True
