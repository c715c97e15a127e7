"""Tests for AdjustStockUseCase."""

from unittest.mock import AsyncMock

import pytest

from buildstock.application.dto.requests import AdjustStockRequest
from buildstock.application.use_cases.adjust_stock import AdjustStockUseCase
from buildstock.core.entities.identity import Caller
from buildstock.core.entities.inventory import StockAdjustment, StockLevel
from buildstock.core.exceptions import (
    StockLevelNotFoundError,
    UnauthenticatedError,
    ValidationError,
)


@pytest.fixture
def stock() -> StockLevel:
    return StockLevel(id="SL-1", material_id="MAT-1", warehouse_id="WH-1", current_stock=8)


@pytest.fixture
def mock_ledger_store(stock):
    store = AsyncMock()
    store.get_stock_level.return_value = stock

    async def adjust(stock_level_id, changes, user_id, reason=None):
        adjustment = StockAdjustment(
            id=1,
            stock_level_id=stock_level_id,
            user_id=user_id,
            previous_current_stock=stock.current_stock,
            new_current_stock=changes.get("current_stock", stock.current_stock),
            previous_safety_stock=stock.safety_stock,
            new_safety_stock=changes.get("safety_stock", stock.safety_stock),
            reason=reason,
            after_transaction_id=4,
        )
        updated = stock.model_copy(
            update={
                "current_stock": adjustment.new_current_stock,
                "safety_stock": adjustment.new_safety_stock,
            }
        )
        return updated, adjustment

    store.adjust_stock_level.side_effect = adjust
    return store


@pytest.fixture
def use_case(mock_ledger_store):
    return AdjustStockUseCase(ledger_store=mock_ledger_store)


class TestAdjustStockUseCase:
    async def test_adjust_passes_only_set_fields(self, use_case, mock_ledger_store, caller):
        result = await use_case.execute(
            "SL-1", AdjustStockRequest(current_stock=5, reason="count"), caller
        )

        args, kwargs = mock_ledger_store.adjust_stock_level.call_args
        assert args == ("SL-1", {"current_stock": 5})
        assert kwargs == {"user_id": caller.user_id, "reason": "count"}
        assert result.stock_level.current_stock == 5
        assert result.adjustment.stock_delta == -3

    async def test_empty_body(self, use_case, mock_ledger_store, caller):
        with pytest.raises(ValidationError):
            await use_case.execute("SL-1", AdjustStockRequest(reason="nothing"), caller)
        mock_ledger_store.adjust_stock_level.assert_not_called()

    async def test_negative_value(self, use_case, caller):
        request = AdjustStockRequest.model_construct(current_stock=-2)
        with pytest.raises(ValidationError):
            await use_case.execute("SL-1", request, caller)

    async def test_missing_stock_level(self, use_case, mock_ledger_store, caller):
        mock_ledger_store.get_stock_level.return_value = None
        with pytest.raises(StockLevelNotFoundError):
            await use_case.execute("nope", AdjustStockRequest(safety_stock=1), caller)

    async def test_requires_caller(self, use_case):
        with pytest.raises(UnauthenticatedError):
            await use_case.execute("SL-1", AdjustStockRequest(safety_stock=1), Caller(user_id=""))

    async def test_to_response(self, use_case, caller):
        result = await use_case.execute("SL-1", AdjustStockRequest(safety_stock=10), caller)
        response = use_case.to_response(result)
        assert response.stock_level.is_low_stock is True
        assert response.adjustment.new_safety_stock == 10
        assert response.adjustment.after_transaction_id == 4

    async def test_null_unit_price_clears_price(self, use_case, mock_ledger_store, caller):
        request = AdjustStockRequest.model_validate({"unit_price": None, "reason": "repriced"})
        await use_case.execute("SL-1", request, caller)

        args, _ = mock_ledger_store.adjust_stock_level.call_args
        assert args == ("SL-1", {"unit_price": None})

    @pytest.mark.parametrize("field", ["current_stock", "safety_stock"])
    async def test_null_stock_field_rejected(self, use_case, mock_ledger_store, caller, field):
        request = AdjustStockRequest.model_validate({field: None})
        with pytest.raises(ValidationError):
            await use_case.execute("SL-1", request, caller)
        mock_ledger_store.adjust_stock_level.assert_not_called()
