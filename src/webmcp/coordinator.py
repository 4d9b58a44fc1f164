"""Navigation coordinator: decides when to look up configs for a tab and
whether the result should replace, clear or leave alone the tab's tools.

Per tab:
  - full page load (top frame)  -> forget dedup key and live domain, look up
  - history-state update (SPA)  -> look up, deduplicated on domain + path
  - tab closed                  -> drop session entry and tracking state

A lookup whose tab has started a newer lookup in the meantime is discarded
when it returns; nothing cancels the request itself.
"""

from __future__ import annotations

import re
import time
from typing import Any, Awaitable, Callable, Protocol
from urllib.parse import urlsplit

from webmcp.models import Config
from webmcp.state import TabStateStore
from webmcp.storage import MemoryStore, session_key


CONFIGS_FOUND = "CONFIGS_FOUND"
TOP_FRAME = 0

_WWW_RE = re.compile(r"^www\.")

SendMessage = Callable[[int, dict[str, Any]], Awaitable[Any]]


class Lookup(Protocol):
    async def __call__(
        self, domain: str, url: str | None = None, executable: bool = False,
    ) -> list[Config]: ...


def normalize_url(raw_url: str) -> tuple[str, str]:
    """Return (domain, domain + pathname) for a page URL.

    `www.` is stripped from the host and the port kept only when it is
    not 80 or 443. Protocol, query and fragment are dropped. Raises
    ValueError for URLs without a scheme or host.
    """
    parts = urlsplit(raw_url)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"Malformed URL: {raw_url!r}")
    host = _WWW_RE.sub("", parts.hostname)
    port = parts.port  # ValueError on a non-numeric port
    domain = f"{host}:{port}" if port and port not in (80, 443) else host
    return domain, domain + (parts.path or "/")


class NavigationCoordinator:
    """Runs config lookups for tabs and notifies their page side."""

    def __init__(
        self,
        lookup: Lookup,
        send_message: SendMessage,
        session_store: MemoryStore | None = None,
        tabs: TabStateStore | None = None,
    ) -> None:
        self.lookup = lookup
        self.send_message = send_message
        self.session_store = session_store if session_store is not None else MemoryStore()
        self.tabs = tabs if tabs is not None else TabStateStore()

    async def on_navigation_completed(self, tab_id: int, url: str, frame_id: int = TOP_FRAME) -> None:
        """Full page load. Always ends in a fresh lookup for the top frame."""
        if frame_id != TOP_FRAME:
            return
        self.tabs.reset_navigation(tab_id)
        await self.handle_navigation(tab_id, url)

    async def on_history_state_updated(self, tab_id: int, url: str, frame_id: int = TOP_FRAME) -> None:
        """pushState/replaceState navigation inside a single-page app."""
        if frame_id != TOP_FRAME:
            return
        await self.handle_navigation(tab_id, url)

    def on_tab_removed(self, tab_id: int) -> None:
        self.session_store.remove(session_key(tab_id))
        self.tabs.remove(tab_id)

    async def handle_navigation(self, tab_id: int, url: str) -> None:
        try:
            await self._handle_navigation(tab_id, url)
        except Exception as e:
            print(f"[coordinator] Failed to look up configs for tab {tab_id}: {e}")

    async def _handle_navigation(self, tab_id: int, url: str) -> None:
        domain, normalized = normalize_url(url)

        state = self.tabs.get(tab_id)
        if state.last_url == normalized:
            return
        state.last_url = normalized

        seq = self.tabs.next_seq(tab_id)
        configs = await self.lookup(domain, normalized, executable=True)

        if not self.tabs.is_current(tab_id, seq):
            print(f"[coordinator] Discarding stale lookup for tab {tab_id}: {normalized}")
            return

        # An empty result on the same domain is a path-only SPA move (e.g. a
        # dialog rewriting /home to /status/123): keep the live tools. Tools
        # from a previous domain must always be cleared.
        state = self.tabs.get(tab_id)
        prev_domain = state.registered_domain
        domain_changed = prev_domain is not None and prev_domain != domain
        if not configs and not domain_changed:
            return

        state.registered_domain = domain
        self.session_store.set(session_key(tab_id), {
            "configs": [c.to_dict() for c in configs],
            "domain": domain,
            "timestamp": int(time.time() * 1000),
        })
        print(f"[coordinator] Tab {tab_id}: {len(configs)} config(s) for {normalized}")

        try:
            await self.send_message(tab_id, {"type": CONFIGS_FOUND, "configs": configs})
        except Exception as e:
            # The page side may not be listening yet during load.
            print(f"[coordinator] Tab {tab_id} not ready for configs: {e}")
