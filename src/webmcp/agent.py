"""Orchestrator: wires browser tabs, the navigation coordinator, the hub
client and each tab's page session together."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any, Coroutine

from playwright.async_api import Frame, Page

from webmcp.browser import BrowserController
from webmcp.config import HubConfig
from webmcp.coordinator import NavigationCoordinator
from webmcp.executor import AgentHandle, ToolResult, mcp_result
from webmcp.hub_client import HubClient
from webmcp.host import ToolRegistration
from webmcp.page_session import PageSession
from webmcp.storage import JsonFileStore, MemoryStore, Settings, session_key
from webmcp.waiting import WaitTimeout, poll


_WEB_SCHEMES = ("http://", "https://")


class Agent:
    """Looks up and registers hub tools for every tab it opens."""

    def __init__(self, config: HubConfig | None = None, accept_dialogs: bool = False) -> None:
        self.config = config or HubConfig()
        self.browser = BrowserController(
            headless=self.config.headless, accept_dialogs=accept_dialogs,
        )
        self.settings = Settings(JsonFileStore(self.config.settings_path), self.config)
        self.hub = HubClient(self.settings, timeout=self.config.lookup_timeout)
        self.session_store = MemoryStore()
        self.coordinator = NavigationCoordinator(
            self.hub.lookup_config, self.send_message, self.session_store,
        )
        self.sessions: dict[int, PageSession] = {}
        self._tab_ids = itertools.count(1)
        self._tasks: set[asyncio.Task[Any]] = set()

    async def __aenter__(self) -> "Agent":
        await self.browser.__aenter__()
        return self

    async def __aexit__(self, *exc: object) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self.browser.__aexit__(*exc)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _watch(self, tab_id: int, page: Page) -> None:
        def on_load(_page: Page) -> None:
            # The new document starts with no tools, whatever the lookup says.
            session = self.sessions.get(tab_id)
            if session is not None:
                session.reset()
            if page.url.startswith(_WEB_SCHEMES):
                self._spawn(self.coordinator.on_navigation_completed(tab_id, page.url))

        def on_frame_navigated(frame: Frame) -> None:
            # Fires for pushState/replaceState too; full loads are deduplicated.
            if frame is page.main_frame and frame.url.startswith(_WEB_SCHEMES):
                self._spawn(self.coordinator.on_history_state_updated(tab_id, frame.url))

        page.on("load", on_load)
        page.on("framenavigated", on_frame_navigated)
        page.on("close", lambda _page: self.close_tab(tab_id))

    async def open_tab(self, url: str) -> int:
        """Open `url` in a new tab and start tracking it. Returns the tab id."""
        page = await self.browser.new_page()
        tab_id = next(self._tab_ids)
        self.sessions[tab_id] = PageSession(page, config=self.config)
        self._watch(tab_id, page)
        await self.browser.goto(page, url)
        return tab_id

    def close_tab(self, tab_id: int) -> None:
        self.sessions.pop(tab_id, None)
        self.coordinator.on_tab_removed(tab_id)

    async def send_message(self, tab_id: int, message: dict[str, Any]) -> None:
        session = self.sessions.get(tab_id)
        if session is None:
            raise LookupError(f"No page listening in tab {tab_id}")
        await session.handle_message(message)

    def tools(self, tab_id: int) -> list[ToolRegistration]:
        session = self.sessions.get(tab_id)
        return session.host.list_tools() if session else []

    async def wait_for_tools(self, tab_id: int, timeout: float = 10_000) -> list[ToolRegistration]:
        """Wait until the tab has tools registered. Returns [] on timeout."""

        async def ready() -> list[ToolRegistration]:
            return self.tools(tab_id)

        try:
            return await poll(ready, timeout, interval=0.1, what=f"tools in tab {tab_id}")
        except WaitTimeout:
            return []

    async def call_tool(
        self,
        tab_id: int,
        name: str,
        params: dict[str, Any] | None = None,
        agent: AgentHandle | None = None,
    ) -> ToolResult:
        session = self.sessions.get(tab_id)
        if session is None:
            return mcp_result(f"Error: No such tab: {tab_id}")
        return await session.host.call_tool(name, params, agent)

    def tab_status(self, tab_id: int) -> str:
        """One-line summary of what the last lookup registered for a tab."""
        entry = self.session_store.get(session_key(tab_id))
        if not entry or not entry["configs"]:
            return "No configs found for this page"
        n_tools = sum(len(c.get("tools", [])) for c in entry["configs"])
        return (
            f"Config found for {entry['domain']}: "
            f"{len(entry['configs'])} config(s), {n_tools} tool(s)"
        )
