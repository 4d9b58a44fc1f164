"""Frame-cadence polling with hard and soft timeouts."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from webmcp.resolver import element_state, is_clickable, query


FRAME_INTERVAL = 1 / 60  # one animation frame at 60 Hz
DEFAULT_TIMEOUT = 5000  # ms


class WaitTimeout(Exception):
    """A poll ran out of time before its predicate held."""


async def poll(
    check: Callable[[], Awaitable[Any]],
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = FRAME_INTERVAL,
    what: str = "condition",
) -> Any:
    """Await `check()` until it returns something truthy, then return it.

    The first check runs immediately. A Playwright error from the check
    (e.g. the execution context was destroyed by a navigation) counts as
    not yet. Raises WaitTimeout once `timeout` milliseconds have passed
    without a truthy result.
    """
    start = time.monotonic()
    while True:
        try:
            result = await check()
        except PlaywrightError as e:
            print(f"[waiting] Check for {what} failed, retrying: {e}")
            result = None
        if result:
            return result
        if (time.monotonic() - start) * 1000 > timeout:
            raise WaitTimeout(f"Timeout waiting for {what}")
        await asyncio.sleep(interval)


async def wait_for_selector(
    page: Page,
    selector: str,
    state: str = "visible",
    timeout: float | None = None,
) -> None:
    """Wait until the selector is visible/exists/hidden. Raises WaitTimeout."""
    await poll(
        lambda: element_state(page, selector, state),
        timeout if timeout is not None else DEFAULT_TIMEOUT,
        what=selector,
    )


async def soft_wait_for_selector(
    page: Page,
    selector: str,
    state: str = "visible",
    timeout: float | None = None,
) -> bool:
    """Like wait_for_selector, but a timeout just returns False."""
    try:
        await wait_for_selector(page, selector, state, timeout)
    except WaitTimeout:
        print(f"[waiting] Soft wait expired: {selector} ({state})")
        return False
    return True


async def wait_for_clickable(
    page: Page,
    selector: str,
    params: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ElementHandle | None:
    """Wait until the target is visible and not disabled. None on timeout."""
    try:
        await poll(lambda: is_clickable(page, selector, params), timeout, what=selector)
    except WaitTimeout:
        return None
    try:
        return await query(page, selector, params)
    except PlaywrightError as e:
        print(f"[waiting] Click target {selector} went away: {e}")
        return None
