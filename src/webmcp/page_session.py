"""Page side of a tab: receives config notifications and owns the tab's tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import Page

from webmcp.config import HubConfig
from webmcp.coordinator import CONFIGS_FOUND
from webmcp.host import ToolHost
from webmcp.models import Config
from webmcp.registrar import ToolRegistrar


@dataclass
class PageSession:
    """One tab's page, its tool host and the registrar feeding it."""

    page: Page
    host: ToolHost = field(default_factory=ToolHost)
    config: HubConfig | None = None
    registrar: ToolRegistrar = field(init=False)

    def __post_init__(self) -> None:
        self.registrar = ToolRegistrar(self.host, self.config)

    async def handle_message(self, message: dict[str, Any]) -> None:
        """Handle a coordinator message. An empty config list clears the tools."""
        if message.get("type") != CONFIGS_FOUND or message.get("configs") is None:
            return
        configs = [
            c if isinstance(c, Config) else Config.from_dict(c)
            for c in message["configs"]
        ]
        await self.registrar.register_tools(self.page, configs)

    def reset(self) -> None:
        """Forget the previous document's tools (a full load replaced it)."""
        self.registrar.clear()
