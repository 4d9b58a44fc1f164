"""Step interpreter: runs a tool's execution descriptor against a page.

Two modes:
  - multi-step: an ordered program of ActionSteps, run strictly in order,
    with `condition` steps recursing into their then/else branches;
  - simple: fill the configured fields from the call parameters, then
    either submit or wait for and extract a result.

Whatever happens inside, the caller gets a well-formed text result.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Protocol

from playwright.async_api import Page

from webmcp.config import HubConfig
from webmcp.extractor import extract_result, format_result
from webmcp.fields import fill_field, fill_tool_field
from webmcp.interactions import native_click, pointer_click, scroll_into_view, submit_with_enter
from webmcp.models import (
    ActionStep,
    ClickStep,
    ConditionStep,
    EvaluateStep,
    ExecutionDescriptor,
    ExtractStep,
    FillStep,
    NavigateStep,
    ScrollStep,
    SelectStep,
    WaitStep,
)
from webmcp.resolver import element_state, interpolate, query
from webmcp.waiting import soft_wait_for_selector, wait_for_clickable, wait_for_selector


ToolResult = dict[str, list[dict[str, str]]]


class AgentHandle(Protocol):
    """The calling agent's side channel. Only user confirmation is used."""

    async def request_user_interaction(
        self, callback: Callable[[], Awaitable[Any]],
    ) -> Any: ...


_DEFAULTS = HubConfig()


def mcp_result(text: str) -> ToolResult:
    return {"content": [{"type": "text", "text": text}]}


def result_text(result: ToolResult) -> str:
    return "\n".join(part.get("text", "") for part in result.get("content", []))


def is_destructive(annotations: dict[str, Any] | None) -> bool:
    if not annotations:
        return False
    hint = annotations.get("destructiveHint")
    return hint is True or str(hint).lower() == "true"


async def execute_tool(
    page: Page,
    tool_name: str,
    execution: ExecutionDescriptor,
    params: dict[str, Any] | None = None,
    agent: AgentHandle | None = None,
    annotations: dict[str, Any] | None = None,
    config: HubConfig | None = None,
) -> ToolResult:
    """Run one tool invocation. Never raises."""
    try:
        return await _execute_tool(
            page, tool_name, execution, params or {}, agent, annotations, config or _DEFAULTS,
        )
    except Exception as e:
        print(f'[executor] Tool "{tool_name}" threw: {e}')
        return mcp_result(f'Error executing "{tool_name}": {e}')


async def _confirm(page: Page, tool_name: str, agent: AgentHandle | None) -> bool:
    if agent is None:
        print(f'[executor] No confirmation gate for destructive tool "{tool_name}"')
        return False
    message = f'Allow "{tool_name}" to make changes?'

    async def ask() -> bool:
        return bool(await page.evaluate("(message) => window.confirm(message)", message))

    return bool(await agent.request_user_interaction(ask))


async def _execute_tool(
    page: Page,
    tool_name: str,
    execution: ExecutionDescriptor,
    params: dict[str, Any],
    agent: AgentHandle | None,
    annotations: dict[str, Any] | None,
    config: HubConfig,
) -> ToolResult:
    if is_destructive(annotations) and not await _confirm(page, tool_name, agent):
        return mcp_result(f'Tool "{tool_name}" cancelled by user.')

    if execution.is_multi_step:
        last = await run_steps(page, execution.steps, params, config)
        text = format_result(last)
        return mcp_result(text if text is not None else f"Executed {tool_name}")

    return await _execute_simple(page, tool_name, execution, params, config)


async def run_steps(
    page: Page,
    steps: list[ActionStep],
    params: dict[str, Any],
    config: HubConfig | None = None,
) -> Any:
    """Run steps in order. Returns the last non-None step result.

    Condition branches go through here too, so a branch yields its last
    non-None result exactly as a top-level program does; a trailing pure
    action does not erase an earlier extract.
    """
    last: Any = None
    for step in steps:
        result = await execute_step(page, step, params, config)
        if result is not None:
            last = result
    return last


async def execute_step(
    page: Page,
    step: ActionStep,
    params: dict[str, Any],
    config: HubConfig | None = None,
) -> Any:
    """Execute a single step. Returns its result, or None for pure actions."""
    cfg = config or _DEFAULTS
    match step:
        case NavigateStep():
            url = interpolate(step.url, params)
            # Navigation tears down this context; nothing after it is awaited.
            await page.evaluate("(url) => { window.location.href = url; }", url)
            return f"Navigating to {url}"

        case ClickStep():
            el = await wait_for_clickable(page, step.selector, params, cfg.click_timeout)
            if el is None:
                return f"Error: Click target not found or not clickable: {step.selector}"
            if step.pointer_events:
                await pointer_click(el)
            else:
                await native_click(el)
            return None

        case FillStep() | SelectStep():
            err = await fill_field(
                page, interpolate(step.selector, params), interpolate(step.value, params),
            )
            return f"Error: {err}" if err else None

        case WaitStep():
            await soft_wait_for_selector(
                page,
                interpolate(step.selector, params),
                step.state,
                step.timeout if step.timeout is not None else cfg.wait_timeout,
            )
            return None

        case ExtractStep():
            selector = interpolate(step.selector, params)
            value = await extract_result(page, selector, step.extract, step.attribute)
            if value is None:
                return f"Error: Nothing to extract at {selector}"
            return value

        case ScrollStep():
            el = await query(page, step.selector, params)
            if el is None:
                return f"Error: Scroll target not found: {step.selector}"
            await scroll_into_view(el)
            return None

        case ConditionStep():
            matched = await element_state(page, step.selector, step.state, params)
            branch = step.then if matched else step.otherwise
            if not branch:
                return None
            return await run_steps(page, branch, params, cfg)

        case EvaluateStep():
            if step.value:
                body = interpolate(step.value, params)
                try:
                    await asyncio.wait_for(
                        page.evaluate(f"async () => {{ {body} }}"),
                        timeout=cfg.evaluate_timeout,
                    )
                except asyncio.TimeoutError:
                    print(f"[executor] evaluate step timed out after {cfg.evaluate_timeout}s")
                except Exception as e:
                    print(f"[executor] evaluate step error: {e}")
            return None

        case _:
            raise TypeError(f"Unhandled step type: {type(step).__name__}")


async def _execute_simple(
    page: Page,
    tool_name: str,
    execution: ExecutionDescriptor,
    params: dict[str, Any],
    config: HubConfig,
) -> ToolResult:
    errors: list[str] = []
    for tool_field in execution.fields:
        if tool_field.name not in params:
            continue
        err = await fill_tool_field(page, tool_field, params[tool_field.name])
        if err:
            errors.append(f'Field "{tool_field.name}": {err}')

    # Submission may navigate away, so it returns without waiting.
    if execution.autosubmit:
        suffix = "\nWarnings:\n" + "\n".join(errors) if errors else ""
        return await _submit(page, tool_name, execution, params, suffix)

    if errors:
        return mcp_result(f'Error filling fields for "{tool_name}":\n' + "\n".join(errors))

    if execution.result_wait_selector:
        if execution.result_required:
            await wait_for_selector(
                page, execution.result_wait_selector, timeout=config.wait_timeout,
            )
        else:
            await soft_wait_for_selector(
                page, execution.result_wait_selector, timeout=config.wait_timeout,
            )
    elif execution.result_delay:
        await asyncio.sleep(execution.result_delay / 1000)

    if execution.result_selector:
        value = await extract_result(
            page,
            execution.result_selector,
            execution.result_extract,
            execution.result_attribute,
        )
        text = format_result(value)
        return mcp_result(text if text is not None else "No result found")

    return mcp_result(f"Executed {tool_name}")


async def _submit(
    page: Page,
    tool_name: str,
    execution: ExecutionDescriptor,
    params: dict[str, Any],
    suffix: str,
) -> ToolResult:
    if execution.submit_action == "enter":
        if execution.fields:
            target = await query(page, execution.fields[-1].selector)
        else:
            target = await query(page, execution.selector, params)
        if target is None:
            return mcp_result(
                f'Error: Submit target not found for "{tool_name}". '
                f"Selector: {execution.selector}{suffix}"
            )
        how = await submit_with_enter(target)
        print(f'[executor] Submitted "{tool_name}" via {how}')
        return mcp_result(f"Submitted {tool_name}{suffix}")

    if execution.submit_selector:
        button = await query(page, execution.submit_selector, params)
    else:
        button = await query(
            page, interpolate(execution.selector, params) + ' [type="submit"]',
        )
    target = button or await query(page, execution.selector, params)
    if target is None:
        return mcp_result(
            f'Error: Submit button not found for "{tool_name}". '
            f"Selector: {execution.submit_selector or execution.selector}{suffix}"
        )
    await native_click(target)
    return mcp_result(f"Submitted {tool_name}{suffix}")
