"""Clicks, Enter submission and scrolling on resolved elements."""

from __future__ import annotations

from playwright.async_api import ElementHandle


# Full hover-aware click at the element centre. Boundary events
# (pointerenter/leave, mouseenter/leave) must not bubble: React's root-level
# delegation depends on them being non-bubbling.
POINTER_CLICK_JS = """
(el) => {
  const rect = el.getBoundingClientRect();
  const x = Math.round(rect.left + rect.width / 2);
  const y = Math.round(rect.top + rect.height / 2);
  const bubbling = {
    bubbles: true, cancelable: true, composed: true, view: window,
    clientX: x, clientY: y, screenX: x, screenY: y,
    pointerId: 1, isPrimary: true, pointerType: 'mouse',
  };
  const nonBubbling = {...bubbling, bubbles: false, cancelable: false};
  const sequence = [
    [PointerEvent, 'pointerover', bubbling],
    [PointerEvent, 'pointerenter', nonBubbling],
    [MouseEvent, 'mouseover', bubbling],
    [MouseEvent, 'mouseenter', nonBubbling],
    [PointerEvent, 'pointerdown', bubbling],
    [MouseEvent, 'mousedown', bubbling],
    [PointerEvent, 'pointerup', bubbling],
    [MouseEvent, 'mouseup', bubbling],
    [MouseEvent, 'click', bubbling],
    [PointerEvent, 'pointerout', bubbling],
    [PointerEvent, 'pointerleave', nonBubbling],
    [MouseEvent, 'mouseout', bubbling],
    [MouseEvent, 'mouseleave', nonBubbling],
  ];
  for (const [Ctor, type, init] of sequence) el.dispatchEvent(new Ctor(type, init));
  return sequence.map(([, type]) => type);
}
"""

_ENTER_SUBMIT_JS = """
(el) => {
  const form = el.closest('form');
  if (form) {
    form.requestSubmit();
    return 'form';
  }
  for (const type of ['keydown', 'keypress', 'keyup']) {
    el.dispatchEvent(new KeyboardEvent(type, {
      key: 'Enter', code: 'Enter', keyCode: 13, which: 13, bubbles: true, composed: true,
    }));
  }
  return 'keys';
}
"""

_SCROLL_INTO_VIEW_JS = "(el) => el.scrollIntoView({behavior: 'smooth'})"


async def native_click(el: ElementHandle, timeout: float = 2000) -> None:
    """Activate the element with a trusted click.

    Sites that check event.isTrusted ignore synthetic clicks, so the real
    input pipeline goes first, with Playwright's actionability and
    hit-target checks. The element's own click() is the fallback when
    Playwright refuses (detached, covered by an overlay, zero-size).
    """
    try:
        await el.click(timeout=timeout)
    except Exception as e:
        print(f"[interactions] Trusted click failed, using element.click(): {e}")
        await el.evaluate("(el) => el.click()")


async def pointer_click(el: ElementHandle) -> list[str]:
    """Dispatch the full pointer/mouse sequence. Returns the event types sent."""
    return await el.evaluate(POINTER_CLICK_JS)


async def submit_with_enter(el: ElementHandle) -> str:
    """Submit the enclosing form, or press Enter on the element.

    Returns "form" or "keys" depending on which path ran.
    """
    return await el.evaluate(_ENTER_SUBMIT_JS)


async def scroll_into_view(el: ElementHandle) -> None:
    await el.evaluate(_SCROLL_INTO_VIEW_JS)
