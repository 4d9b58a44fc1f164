"""Field writer: puts a value into a resolved element the way a user would.

Frameworks fight plain value assignment. React installs its own `value`
setter on each input instance, so writes go through the prototype setter
instead. Rich-text editors (Lexical, Draft.js) keep their own document model
and only update it from real input, so contenteditable regions get a
synthetic paste first.
"""

from __future__ import annotations

from typing import Any

from playwright.async_api import Page

from webmcp.models import RadioOption, ToolField
from webmcp.resolver import query, to_js_string


_FALSY_STRINGS = {"", "false", "0", "off", "no"}

# Returns the strategy used, for logging and tests.
_FILL_JS = """
(el, {text, checked}) => {
  const editable = el.isContentEditable
    ? el
    : el.querySelector('[contenteditable]:not([contenteditable="false"])');

  if (editable) {
    editable.focus();
    const selection = window.getSelection();
    const all = document.createRange();
    all.selectNodeContents(editable);
    selection.removeAllRanges();
    selection.addRange(all);

    const data = new DataTransfer();
    data.setData('text/plain', text);
    const paste = new ClipboardEvent('paste', {
      bubbles: true, cancelable: true, composed: true, clipboardData: data,
    });
    editable.dispatchEvent(paste);
    if (paste.defaultPrevented) return 'paste';

    // Nothing consumed the paste: plain contenteditable.
    editable.innerHTML = '';
    editable.appendChild(document.createTextNode(text));
    editable.dispatchEvent(new InputEvent('input', {
      bubbles: true, inputType: 'insertText', data: text,
    }));
    const end = document.createRange();
    end.selectNodeContents(editable);
    end.collapse(false);
    selection.removeAllRanges();
    selection.addRange(end);
    return 'contenteditable';
  }

  const change = () => el.dispatchEvent(new Event('change', {bubbles: true}));

  if (el instanceof HTMLSelectElement) {
    el.value = text;
    change();
    return 'select';
  }
  if (el instanceof HTMLInputElement && el.type === 'checkbox') {
    el.checked = checked;
    change();
    return 'checkbox';
  }
  if (el instanceof HTMLInputElement && el.type === 'radio') {
    el.checked = true;
    change();
    return 'radio';
  }
  if (el instanceof HTMLInputElement || el instanceof HTMLTextAreaElement) {
    const proto = el instanceof HTMLTextAreaElement
      ? HTMLTextAreaElement.prototype
      : HTMLInputElement.prototype;
    const setter = Object.getOwnPropertyDescriptor(proto, 'value')?.set;
    if (setter) setter.call(el, text);
    else el.value = text;
    el.dispatchEvent(new Event('input', {bubbles: true}));
    change();
    return 'input';
  }
  return 'unsupported';
}
"""

_CHECK_RADIO_JS = """
(el) => {
  el.checked = true;
  el.dispatchEvent(new Event('change', {bubbles: true}));
}
"""


def is_truthy(value: Any) -> bool:
    """Checkbox coercion: real booleans, non-zero numbers, and strings
    other than "", "false", "0", "off" and "no"."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_STRINGS
    return bool(value)


async def fill_field(page: Page, selector: str, value: Any) -> str | None:
    """Write `value` into the element at `selector`.

    Returns an error message if the element was not found, None on success.
    """
    el = await query(page, selector)
    if el is None:
        return f"Element not found: {selector}"
    strategy = await el.evaluate(
        _FILL_JS, {"text": to_js_string(value), "checked": is_truthy(value)},
    )
    if strategy == "unsupported":
        print(f"[fields] No write strategy for element at {selector}")
    return None


async def fill_tool_field(page: Page, tool_field: ToolField, value: Any) -> str | None:
    """Fill a configured field; radio fields pick the matching option's element."""
    if tool_field.type == "radio" and tool_field.options:
        wanted = to_js_string(value)
        option = next(
            (o for o in tool_field.options if isinstance(o, RadioOption) and o.value == wanted),
            None,
        )
        if option is None:
            return f'No radio option matches value "{wanted}"'
        el = await query(page, option.selector)
        if el is None:
            return f"Radio option element not found: {option.selector}"
        await el.evaluate(_CHECK_RADIO_JS)
        return None
    return await fill_field(page, tool_field.selector, value)
