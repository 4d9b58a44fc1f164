"""Tool registrar: turns configs into the page's live tool set."""

from __future__ import annotations

from typing import Any

from playwright.async_api import Page

from webmcp.config import HubConfig
from webmcp.executor import AgentHandle, ToolResult, execute_tool
from webmcp.host import ToolRegistration
from webmcp.models import Config, ExecutionDescriptor, ToolDescriptor


# Tools the page declares itself. They take precedence over hub tools.
_DECLARATIVE_NAMES_JS = """
() => Array.from(document.querySelectorAll('form[toolname]'))
  .map((form) => form.getAttribute('toolname'))
  .filter(Boolean)
"""


async def declarative_tool_names(page: Page) -> set[str]:
    return set(await page.evaluate(_DECLARATIVE_NAMES_JS) or [])


class ToolRegistrar:
    """Keeps a host's tools in sync with the latest configs for a page.

    The full replacement set is built before the host is touched. Hosts
    with provide_context() get it in one call; others get stale names
    unregistered and every current tool (re)registered.
    """

    def __init__(self, host: Any, config: HubConfig | None = None) -> None:
        self.host = host
        self.config = config
        self.registered: set[str] = set()

    def _wrap(
        self, page: Page, tool: ToolDescriptor, execution: ExecutionDescriptor,
    ) -> ToolRegistration:
        async def execute(params: dict[str, Any], agent: AgentHandle | None = None) -> ToolResult:
            return await execute_tool(
                page, tool.name, execution, params, agent, tool.annotations, self.config,
            )

        return ToolRegistration(
            name=tool.name,
            description=tool.description,
            input_schema=tool.input_schema,
            annotations=tool.annotations,
            execute=execute,
        )

    async def build_tools(self, page: Page, configs: list[Config]) -> list[ToolRegistration]:
        declared = await declarative_tool_names(page)
        tools: list[ToolRegistration] = []
        seen: set[str] = set()
        for config in configs:
            for tool in config.tools:
                if tool.execution is None or tool.name in seen:
                    continue
                if tool.name in declared:
                    print(f'[registrar] Skipping tool "{tool.name}": conflicts with declarative tool on page')
                    continue
                seen.add(tool.name)
                tools.append(self._wrap(page, tool, tool.execution))
        return tools

    async def register_tools(self, page: Page, configs: list[Config]) -> list[str]:
        """Replace the host's tools with those built from `configs`.

        Returns the names now registered.
        """
        if self.host is None:
            return []
        tools = await self.build_tools(page, configs)
        names = [t.name for t in tools]

        provide_context = getattr(self.host, "provide_context", None)
        if callable(provide_context):
            provide_context(tools)
        else:
            unregister = getattr(self.host, "unregister_tool", None)
            if callable(unregister):
                for name in self.registered - set(names):
                    unregister(name)
            for tool in tools:
                self.host.register_tool(tool)

        self.registered = set(names)
        print(f"[registrar] Registered {len(names)} tool(s): {', '.join(names) or '-'}")
        return names

    def clear(self) -> None:
        """Drop every tool this registrar delivered, without touching the page."""
        if self.host is None:
            return
        provide_context = getattr(self.host, "provide_context", None)
        if callable(provide_context):
            provide_context([])
        else:
            unregister = getattr(self.host, "unregister_tool", None)
            if callable(unregister):
                for name in self.registered:
                    unregister(name)
        self.registered = set()
