"""Selector resolution through shadow trees, with a :has-text() extension.

Modern component frameworks hide interactive elements behind open shadow
roots that a plain document.querySelector() never sees. Every lookup here
runs in the page and recurses into each shadow root it meets.

Selectors may use one non-standard form:

    base:has-text("Submit") suffix

which keeps the first (or, for query_all, every) element matching `base`
whose whitespace-collapsed text contains "Submit", then optionally descends
to `suffix` inside it.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from playwright.async_api import ElementHandle, Page


_TEMPLATE_RE = re.compile(r"\{\{(\w+)\}\}")

# base:has-text("text") suffix: either quote style, backslash escapes allowed
_HAS_TEXT_RE = re.compile(
    r"""^(.+?):has-text\((?:"((?:[^"\\]|\\.)*)"|'((?:[^'\\]|\\.)*)')\)\s*(.*)$""",
    re.DOTALL,
)
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


# Shared in-page helpers. Prepended to every resolver snippet so each
# evaluate() call is self-contained.
DOM_HELPERS_JS = """
  const deepQuery = (selector, root = document) => {
    const el = root.querySelector(selector);
    if (el) return el;
    for (const host of root.querySelectorAll('*')) {
      if (host.shadowRoot) {
        const found = deepQuery(selector, host.shadowRoot);
        if (found) return found;
      }
    }
    return null;
  };
  const deepQueryAll = (selector, root = document) => {
    const results = [...root.querySelectorAll(selector)];
    for (const host of root.querySelectorAll('*')) {
      if (host.shadowRoot) results.push(...deepQueryAll(selector, host.shadowRoot));
    }
    return results;
  };
  const normalizeText = (el) => (el.textContent || '').replace(/\\s+/g, ' ').trim();
  const resolveOne = (q) => {
    if (q.text === null) return deepQuery(q.base);
    for (const el of deepQueryAll(q.base)) {
      if (normalizeText(el).includes(q.text.trim())) {
        return q.suffix ? el.querySelector(q.suffix) : el;
      }
    }
    return null;
  };
  const resolveAll = (q) => {
    if (q.text === null) return deepQueryAll(q.base);
    const out = [];
    for (const el of deepQueryAll(q.base)) {
      if (!normalizeText(el).includes(q.text.trim())) continue;
      if (q.suffix) {
        const child = el.querySelector(q.suffix);
        if (child) out.push(child);
      } else {
        out.push(el);
      }
    }
    return out;
  };
  const isVisible = (el) => {
    if (!(el instanceof HTMLElement)) return false;
    const style = getComputedStyle(el);
    if (style.display === 'none') return false;
    if (style.visibility === 'hidden') return false;
    if (style.opacity === '0') return false;
    const rect = el.getBoundingClientRect();
    return !(rect.width === 0 && rect.height === 0);
  };
  const checkState = (el, state) => {
    if (state === 'hidden') return !el || !isVisible(el);
    if (state === 'exists') return !!el;
    return !!el && isVisible(el);
  };
"""

_QUERY_ONE_JS = "(q) => {" + DOM_HELPERS_JS + " return resolveOne(q); }"
_QUERY_ALL_JS = "(q) => {" + DOM_HELPERS_JS + " return resolveAll(q); }"
_STATE_JS = "({q, state}) => {" + DOM_HELPERS_JS + " return checkState(resolveOne(q), state); }"
_CLICKABLE_JS = """({q}) => {""" + DOM_HELPERS_JS + """
  const el = resolveOne(q);
  return !!el && isVisible(el) && !el.disabled;
}"""


@dataclass
class SelectorQuery:
    """A parsed selector: plain CSS when `text` is None."""

    base: str
    text: str | None = None
    suffix: str = ""

    def to_arg(self) -> dict[str, Any]:
        return {"base": self.base, "text": self.text, "suffix": self.suffix}


def to_js_string(value: Any) -> str:
    """Render a parameter the way String(value) would in the page."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_js_string(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def interpolate(template: str, params: dict[str, Any] | None) -> str:
    """Substitute {{name}} placeholders. Missing parameters become ''."""
    values = params or {}
    return _TEMPLATE_RE.sub(lambda m: to_js_string(values.get(m.group(1))), template)


def parse_selector(selector: str) -> SelectorQuery:
    m = _HAS_TEXT_RE.match(selector)
    if not m:
        return SelectorQuery(base=selector)
    base, dq, sq, suffix = m.groups()
    raw = dq if dq is not None else sq
    return SelectorQuery(
        base=base,
        text=_ESCAPE_RE.sub(r"\1", raw),
        suffix=suffix.strip(),
    )


def _prepare(selector: str, params: dict[str, Any] | None) -> SelectorQuery:
    resolved = interpolate(selector, params) if params is not None else selector
    return parse_selector(resolved)


async def query(
    page: Page, selector: str, params: dict[str, Any] | None = None,
) -> ElementHandle | None:
    """Resolve a selector to its first match anywhere in the document, or None."""
    q = _prepare(selector, params)
    handle = await page.evaluate_handle(_QUERY_ONE_JS, q.to_arg())
    element = handle.as_element()
    if element is None:
        await handle.dispose()
    return element


async def query_all(
    page: Page, selector: str, params: dict[str, Any] | None = None,
) -> list[ElementHandle]:
    """Resolve a selector to every match, document order first, then shadow roots."""
    q = _prepare(selector, params)
    handle = await page.evaluate_handle(_QUERY_ALL_JS, q.to_arg())
    props = await handle.get_properties()
    await handle.dispose()
    elements: list[ElementHandle] = []
    for key in sorted((k for k in props if k.isdigit()), key=int):
        el = props[key].as_element()
        if el is not None:
            elements.append(el)
    return elements


async def element_state(
    page: Page, selector: str, state: str = "visible", params: dict[str, Any] | None = None,
) -> bool:
    """True if the selector's first match is in `state` (visible, exists or hidden)."""
    q = _prepare(selector, params)
    return bool(await page.evaluate(_STATE_JS, {"q": q.to_arg(), "state": state}))


async def is_clickable(
    page: Page, selector: str, params: dict[str, Any] | None = None,
) -> bool:
    q = _prepare(selector, params)
    return bool(await page.evaluate(_CLICKABLE_JS, {"q": q.to_arg()}))
