"""Async Playwright browser controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import (
    Browser,
    BrowserContext,
    Dialog,
    Page,
    async_playwright,
)


# Injected before any page script runs. Forces shadow roots open so the
# resolver's shadowRoot traversal can reach into closed components too.
OPEN_SHADOW_ROOTS_JS = """
(() => {
    const _origAttachShadow = Element.prototype.attachShadow;
    Element.prototype.attachShadow = function(init) {
        return _origAttachShadow.call(this, { ...init, mode: 'open' });
    };
})();
"""


@dataclass
class BrowserController:
    """Manages a Chromium browser and its tabs via Playwright."""

    headless: bool = True
    accept_dialogs: bool = False  # answer confirm() dialogs with OK
    _playwright: Any = field(default=None, repr=False)
    _browser: Browser | None = field(default=None, repr=False)
    _context: BrowserContext | None = field(default=None, repr=False)

    async def __aenter__(self) -> "BrowserController":
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless)
        self._context = await self._browser.new_context(
            viewport={"width": 1280, "height": 720},
        )
        await self._context.add_init_script(OPEN_SHADOW_ROOTS_JS)
        return self

    async def __aexit__(self, *exc: object) -> None:
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

    async def _handle_dialog(self, dialog: Dialog) -> None:
        print(f"[browser] {dialog.type} dialog: {dialog.message}")
        if self.accept_dialogs:
            await dialog.accept()
        else:
            await dialog.dismiss()

    @property
    def context(self) -> BrowserContext:
        if self._context is None:
            raise RuntimeError("Browser not started; use async with")
        return self._context

    async def new_page(self) -> Page:
        page = await self.context.new_page()
        page.on("dialog", self._handle_dialog)
        return page

    async def goto(self, page: Page, url: str, timeout: float = 10_000) -> None:
        await page.goto(url, wait_until="domcontentloaded", timeout=timeout)
