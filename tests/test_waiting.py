"""Tests for waiting module."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from playwright.async_api import Error as PlaywrightError

from webmcp.waiting import (
    WaitTimeout,
    poll,
    soft_wait_for_selector,
    wait_for_clickable,
    wait_for_selector,
)
from tests.conftest import make_mock_page


class TestPoll:
    @pytest.mark.asyncio
    async def test_returns_first_truthy(self):
        results = iter([None, False, "ready"])
        check = AsyncMock(side_effect=lambda: next(results))
        assert await poll(check, timeout=1000, interval=0) == "ready"
        assert check.await_count == 3

    @pytest.mark.asyncio
    async def test_checks_immediately(self):
        check = AsyncMock(return_value=True)
        assert await poll(check, timeout=0) is True
        assert check.await_count == 1

    @pytest.mark.asyncio
    async def test_raises_on_timeout(self):
        check = AsyncMock(return_value=False)
        with pytest.raises(WaitTimeout, match="Timeout waiting for #slow"):
            await poll(check, timeout=20, interval=0.005, what="#slow")
        assert check.await_count >= 2


class TestWaitForSelector:
    @pytest.mark.asyncio
    async def test_resolves_when_state_holds(self):
        page = make_mock_page(states={"#results": True})
        await wait_for_selector(page, "#results", "visible", timeout=50)

    @pytest.mark.asyncio
    async def test_hard_timeout(self):
        page = make_mock_page(states={"#results": False})
        with pytest.raises(WaitTimeout):
            await wait_for_selector(page, "#results", timeout=30)

    @pytest.mark.asyncio
    async def test_soft_timeout_swallowed(self):
        page = make_mock_page(states={"#results": False})
        assert await soft_wait_for_selector(page, "#results", timeout=30) is False

    @pytest.mark.asyncio
    async def test_soft_success(self):
        page = make_mock_page(states={"#results": True})
        assert await soft_wait_for_selector(page, "#results", timeout=30) is True


class TestWaitForClickable:
    @pytest.mark.asyncio
    async def test_returns_element(self):
        page = make_mock_page(clickable=True)
        assert await wait_for_clickable(page, "#go", timeout=50) is page.element

    @pytest.mark.asyncio
    async def test_none_when_never_clickable(self):
        page = make_mock_page(clickable=False)
        assert await wait_for_clickable(page, "#go", timeout=30) is None
        page.evaluate_handle.assert_not_called()


class TestNavigationDuringWait:
    @pytest.mark.asyncio
    async def test_destroyed_context_counts_as_not_yet(self):
        results = iter([PlaywrightError("Execution context was destroyed"), "ready"])

        async def check():
            value = next(results)
            if isinstance(value, Exception):
                raise value
            return value

        assert await poll(check, timeout=1000, interval=0) == "ready"

    @pytest.mark.asyncio
    async def test_soft_wait_survives_repeated_errors(self):
        page = make_mock_page()
        page.evaluate = AsyncMock(side_effect=PlaywrightError("Target closed"))
        assert await soft_wait_for_selector(page, "#results", timeout=20) is False

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        check = AsyncMock(side_effect=RuntimeError("bug"))
        with pytest.raises(RuntimeError):
            await poll(check, timeout=1000, interval=0)

    @pytest.mark.asyncio
    async def test_clickable_target_gone_after_poll(self):
        page = make_mock_page(clickable=True)
        page.evaluate_handle = AsyncMock(side_effect=PlaywrightError("Execution context was destroyed"))
        assert await wait_for_clickable(page, "#go", timeout=50) is None
