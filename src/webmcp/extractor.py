"""Read text, HTML, attributes, lists and tables out of the page."""

from __future__ import annotations

from typing import Any

from playwright.async_api import Page

from webmcp.resolver import DOM_HELPERS_JS, parse_selector


_EXTRACT_JS = """({q, rowsQ, mode, attribute}) => {""" + DOM_HELPERS_JS + """
  if (mode === 'list') return resolveAll(q).map(normalizeText);
  if (mode === 'table') {
    return resolveAll(rowsQ).map(
      (row) => Array.from(row.querySelectorAll('td, th')).map(normalizeText)
    );
  }
  const el = resolveOne(q);
  if (!el) return null;
  if (mode === 'html') return el.innerHTML;
  if (mode === 'attribute') return attribute ? el.getAttribute(attribute) : null;
  return normalizeText(el);
}"""


async def extract_result(
    page: Page,
    selector: str,
    mode: str = "text",
    attribute: str | None = None,
) -> Any:
    """Extract a value without touching the page.

    text/html/attribute return a string, or None when nothing matches.
    list returns one string per match; table returns one list of cell
    strings per `<selector> tr` row.
    """
    q = parse_selector(selector)
    rows_q = parse_selector(f"{selector} tr")
    return await page.evaluate(_EXTRACT_JS, {
        "q": q.to_arg(),
        "rowsQ": rows_q.to_arg(),
        "mode": mode,
        "attribute": attribute,
    })


def format_result(value: Any) -> str | None:
    """Render an extracted value as tool output text."""
    if value is None:
        return None
    if isinstance(value, list):
        return "\n".join(
            ", ".join(str(c) for c in item) if isinstance(item, list) else str(item)
            for item in value
        )
    return str(value)
