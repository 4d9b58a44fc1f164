"""Tests for browser module."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from webmcp.browser import OPEN_SHADOW_ROOTS_JS, BrowserController


class TestBrowserControllerInit:
    def test_defaults(self):
        bc = BrowserController()
        assert bc.headless is True
        assert bc.accept_dialogs is False

    def test_headed_mode(self):
        bc = BrowserController(headless=False)
        assert bc.headless is False


class TestContextProperty:
    def test_raises_when_not_started(self):
        bc = BrowserController()
        with pytest.raises(RuntimeError, match="Browser not started"):
            _ = bc.context

    def test_returns_context_when_set(self):
        bc = BrowserController()
        ctx = MagicMock()
        bc._context = ctx
        assert bc.context is ctx


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_enter_installs_shadow_script(self):
        context = MagicMock()
        context.add_init_script = AsyncMock()
        browser = MagicMock()
        browser.new_context = AsyncMock(return_value=context)
        browser.close = AsyncMock()
        pw = MagicMock()
        pw.chromium.launch = AsyncMock(return_value=browser)
        pw.stop = AsyncMock()
        starter = MagicMock()
        starter.start = AsyncMock(return_value=pw)

        with patch("webmcp.browser.async_playwright", return_value=starter):
            async with BrowserController(headless=False) as bc:
                assert bc.context is context

        pw.chromium.launch.assert_awaited_once_with(headless=False)
        browser.new_context.assert_awaited_once_with(viewport={"width": 1280, "height": 720})
        context.add_init_script.assert_awaited_once_with(OPEN_SHADOW_ROOTS_JS)
        browser.close.assert_awaited_once()
        pw.stop.assert_awaited_once()


class TestPages:
    def _make_controller(self, **kwargs) -> tuple[BrowserController, MagicMock]:
        bc = BrowserController(**kwargs)
        page = MagicMock()
        page.goto = AsyncMock()
        bc._context = MagicMock()
        bc._context.new_page = AsyncMock(return_value=page)
        return bc, page

    @pytest.mark.asyncio
    async def test_new_page_handles_dialogs(self):
        bc, page = self._make_controller()
        assert await bc.new_page() is page
        page.on.assert_called_once_with("dialog", bc._handle_dialog)

    @pytest.mark.asyncio
    async def test_goto(self):
        bc, page = self._make_controller()
        await bc.goto(page, "https://example.com")
        page.goto.assert_called_with(
            "https://example.com", wait_until="domcontentloaded", timeout=10_000
        )

    @pytest.mark.asyncio
    async def test_dialog_dismissed_by_default(self):
        bc, _ = self._make_controller()
        dialog = MagicMock(type="confirm", message="Allow?")
        dialog.accept = AsyncMock()
        dialog.dismiss = AsyncMock()
        await bc._handle_dialog(dialog)
        dialog.dismiss.assert_awaited_once()
        dialog.accept.assert_not_called()

    @pytest.mark.asyncio
    async def test_dialog_accepted(self):
        bc, _ = self._make_controller(accept_dialogs=True)
        dialog = MagicMock(type="confirm", message="Allow?")
        dialog.accept = AsyncMock()
        dialog.dismiss = AsyncMock()
        await bc._handle_dialog(dialog)
        dialog.accept.assert_awaited_once()
