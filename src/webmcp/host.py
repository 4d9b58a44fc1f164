"""In-process tool host: the surface an external agent lists and calls
tools through, plus the confirmation gates that agent can hand in."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from webmcp.executor import AgentHandle, ToolResult, mcp_result, result_text
from webmcp.metrics import MetricsCollector


ExecuteFn = Callable[[dict[str, Any], "AgentHandle | None"], Awaitable[ToolResult]]


@dataclass
class ToolRegistration:
    """A tool as the host sees it."""

    name: str
    description: str
    input_schema: dict[str, Any]
    execute: ExecuteFn
    annotations: dict[str, Any] | None = None

    def describe(self) -> dict[str, Any]:
        info: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
        if self.annotations:
            info["annotations"] = self.annotations
        return info


@dataclass
class ToolHost:
    """Holds the live tool set of one page.

    Supports both delivery styles: provide_context() swaps the whole set
    at once; register_tool()/unregister_tool() work one name at a time and
    re-registering a name overwrites it.
    """

    metrics: MetricsCollector = field(default_factory=MetricsCollector)
    _tools: dict[str, ToolRegistration] = field(default_factory=dict)

    def provide_context(self, tools: list[ToolRegistration]) -> None:
        self._tools = {t.name: t for t in tools}

    def register_tool(self, tool: ToolRegistration) -> None:
        self._tools[tool.name] = tool

    def unregister_tool(self, name: str) -> None:
        self._tools.pop(name, None)

    def list_tools(self) -> list[ToolRegistration]:
        return list(self._tools.values())

    def get(self, name: str) -> ToolRegistration | None:
        return self._tools.get(name)

    async def call_tool(
        self, name: str, params: dict[str, Any] | None = None, agent: AgentHandle | None = None,
    ) -> ToolResult:
        tool = self._tools.get(name)
        if tool is None:
            return mcp_result(f'Error: Unknown tool "{name}"')
        metric = self.metrics.begin(name)
        result = await tool.execute(params or {}, agent)
        text = result_text(result)
        failed = text.startswith("Error")
        self.metrics.end(metric, success=not failed, error=text if failed else "")
        return result


class PageConfirmAgent:
    """Confirmation gate that asks through the page's own confirm() dialog."""

    async def request_user_interaction(self, callback: Callable[[], Awaitable[Any]]) -> Any:
        return await callback()


class AutoApproveAgent:
    """Confirmation gate that approves without asking (e.g. `--yes`)."""

    async def request_user_interaction(self, callback: Callable[[], Awaitable[Any]]) -> Any:
        return True
