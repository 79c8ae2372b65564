"""Tests for the best-effort side effect runner."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from stagecms.core.side_effects import best_effort


@pytest.mark.asyncio
async def test_returns_operation_result():
    operation = AsyncMock(return_value=42)

    result = await best_effort("answer lookup", operation)

    assert result == 42
    operation.assert_awaited_once()


@pytest.mark.asyncio
async def test_failure_is_swallowed_and_compensated():
    operation = AsyncMock(side_effect=RuntimeError("disk full"))
    rollback = AsyncMock()

    result = await best_effort("audit write", operation, on_failure=rollback, item_id="i-1")

    assert result is None
    rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_failing_compensation_is_swallowed_too():
    operation = AsyncMock(side_effect=RuntimeError("boom"))
    rollback = AsyncMock(side_effect=RuntimeError("connection lost"))

    assert await best_effort("audit write", operation, on_failure=rollback) is None


@pytest.mark.asyncio
async def test_cancellation_propagates():
    operation = AsyncMock(side_effect=asyncio.CancelledError())
    rollback = AsyncMock()

    with pytest.raises(asyncio.CancelledError):
        await best_effort("audit write", operation, on_failure=rollback)
    rollback.assert_not_awaited()
