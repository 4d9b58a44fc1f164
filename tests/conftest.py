"""Shared test fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from webmcp import extractor, registrar, resolver


# ---------------------------------------------------------------------------
# Hub payloads (representative of real lookup responses)
# ---------------------------------------------------------------------------

SEARCH_CONFIG: dict[str, Any] = {
    "id": "cfg-search",
    "domain": "example.com",
    "urlPattern": "example.com/search",
    "title": "Example search",
    "description": "Search the example catalogue",
    "contributor": "someone",
    "version": 2,
    "createdAt": "2025-01-01T00:00:00Z",
    "updatedAt": "2025-02-01T00:00:00Z",
    "tools": [
        {
            "name": "search",
            "description": "Search for a term",
            "inputSchema": {
                "type": "object",
                "properties": {"term": {"type": "string"}},
                "required": ["term"],
            },
            "execution": {
                "selector": "#search-form",
                "autosubmit": False,
                "steps": [
                    {"action": "fill", "selector": "#q", "value": "{{term}}"},
                    {"action": "click", "selector": "#go"},
                    {"action": "wait", "selector": "#results", "state": "visible", "timeout": 2000},
                    {"action": "extract", "selector": "#results", "extract": "text"},
                ],
            },
        },
        {
            "name": "subscribe",
            "description": "Subscribe to the newsletter",
            "inputSchema": {"type": "object", "properties": {"email": {"type": "string"}}},
            "execution": {
                "selector": "#newsletter",
                "autosubmit": True,
                "submitAction": "click",
                "fields": [
                    {"type": "text", "selector": "#email", "name": "email", "description": "Email"},
                ],
            },
        },
        {
            "name": "about",
            "description": "Informational only, no execution",
            "inputSchema": {},
        },
    ],
}

DELETE_CONFIG: dict[str, Any] = {
    "id": "cfg-delete",
    "domain": "example.com",
    "urlPattern": "example.com/account",
    "title": "Account",
    "tools": [
        {
            "name": "delete_account",
            "description": "Delete the account",
            "inputSchema": {},
            "annotations": {"destructiveHint": "true"},
            "execution": {
                "selector": "#danger",
                "steps": [{"action": "click", "selector": "#delete"}],
            },
        },
        {
            "name": "search",
            "description": "Duplicate name, must lose to the first config",
            "inputSchema": {},
            "execution": {"selector": "#other", "steps": [{"action": "click", "selector": "#x"}]},
        },
    ],
}


def make_element() -> MagicMock:
    """Create a mock Playwright ElementHandle."""
    el = MagicMock()
    el.evaluate = AsyncMock(return_value=None)
    el.click = AsyncMock()
    el.dispose = AsyncMock()
    el.as_element = MagicMock(return_value=el)
    return el


def make_mock_page(
    url: str = "https://example.com/search",
    element: MagicMock | None | bool = True,
    states: dict[str, bool] | None = None,
    default_state: bool = True,
    clickable: bool = True,
    extracted: dict[str, Any] | None = None,
    declared: list[str] | None = None,
) -> MagicMock:
    """Create a mock Playwright Page.

    `element` is what every query resolves to (True builds a fresh mock,
    None means nothing matches). `states` maps a selector to the answer of
    element_state(); `extracted` maps a selector to extract_result()'s
    value; `declared` lists page-declared tool names.
    """
    page = MagicMock()
    page.url = url

    if element is True:
        element = make_element()
    page.element = element

    handle = MagicMock()
    handle.as_element = MagicMock(return_value=element)
    handle.dispose = AsyncMock()
    handle.get_properties = AsyncMock(
        return_value={"0": element, "length": MagicMock(as_element=MagicMock(return_value=None))}
        if element is not None else {"length": MagicMock(as_element=MagicMock(return_value=None))}
    )
    page.evaluate_handle = AsyncMock(return_value=handle)

    state_map = states or {}
    extract_map = extracted or {}

    async def evaluate(script: str, arg: Any = None) -> Any:
        if script == resolver._CLICKABLE_JS:
            return clickable
        if script == resolver._STATE_JS:
            return state_map.get(arg["q"]["base"], default_state)
        if script == extractor._EXTRACT_JS:
            return extract_map.get(arg["q"]["base"])
        if script == registrar._DECLARATIVE_NAMES_JS:
            return declared or []
        return None

    page.evaluate = AsyncMock(side_effect=evaluate)
    page.wait_for_timeout = AsyncMock()
    page.goto = AsyncMock()
    return page


def evaluated_scripts(page: MagicMock) -> list[str]:
    """Scripts passed to page.evaluate, in call order."""
    return [c.args[0] for c in page.evaluate.call_args_list]


# ---------------------------------------------------------------------------
# Real browser (integration tests). Skipped when Chromium is not installed.
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def browser_page():
    from playwright.async_api import async_playwright

    from webmcp.browser import OPEN_SHADOW_ROOTS_JS

    pw = await async_playwright().start()
    try:
        browser = await pw.chromium.launch(headless=True)
    except Exception as e:
        await pw.stop()
        pytest.skip(f"Chromium not available: {e}")
    context = await browser.new_context()
    await context.add_init_script(OPEN_SHADOW_ROOTS_JS)
    page = await context.new_page()
    try:
        yield page
    finally:
        await browser.close()
        await pw.stop()
