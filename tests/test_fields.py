"""Tests for fields module."""

from __future__ import annotations

import pytest

from webmcp.fields import _CHECK_RADIO_JS, _FILL_JS, fill_field, fill_tool_field, is_truthy
from webmcp.models import RadioOption, ToolField
from tests.conftest import make_mock_page


class TestIsTruthy:
    @pytest.mark.parametrize("value", [True, 1, "true", "yes", "on", "1", "checked"])
    def test_truthy(self, value):
        assert is_truthy(value) is True

    @pytest.mark.parametrize("value", [False, 0, None, "", "false", "FALSE", "0", "off", "no"])
    def test_falsy(self, value):
        assert is_truthy(value) is False


class TestFillField:
    @pytest.mark.asyncio
    async def test_writes_string_value(self):
        page = make_mock_page()
        page.element.evaluate.return_value = "input"
        assert await fill_field(page, "#q", "rust") is None
        script, arg = page.element.evaluate.call_args.args
        assert script == _FILL_JS
        assert arg == {"text": "rust", "checked": True}

    @pytest.mark.asyncio
    async def test_checkbox_coercion_sent(self):
        page = make_mock_page()
        await fill_field(page, "#agree", False)
        assert page.element.evaluate.call_args.args[1] == {"text": "false", "checked": False}

    @pytest.mark.asyncio
    async def test_missing_element(self):
        page = make_mock_page(element=None)
        assert await fill_field(page, "#nope", "x") == "Element not found: #nope"

    @pytest.mark.asyncio
    async def test_unsupported_element_is_not_an_error(self):
        page = make_mock_page()
        page.element.evaluate.return_value = "unsupported"
        assert await fill_field(page, "div.static", "x") is None


class TestFillToolField:
    def _radio(self) -> ToolField:
        return ToolField(
            type="radio",
            selector="",
            name="size",
            options=[
                RadioOption(value="s", selector="#size-s"),
                RadioOption(value="l", selector="#size-l"),
            ],
        )

    @pytest.mark.asyncio
    async def test_radio_checks_matching_option(self):
        page = make_mock_page()
        assert await fill_tool_field(page, self._radio(), "l") is None
        assert page.evaluate_handle.call_args.args[1]["base"] == "#size-l"
        page.element.evaluate.assert_awaited_with(_CHECK_RADIO_JS)

    @pytest.mark.asyncio
    async def test_radio_no_matching_option(self):
        page = make_mock_page()
        err = await fill_tool_field(page, self._radio(), "xl")
        assert err == 'No radio option matches value "xl"'
        page.evaluate_handle.assert_not_called()

    @pytest.mark.asyncio
    async def test_radio_option_element_missing(self):
        page = make_mock_page(element=None)
        err = await fill_tool_field(page, self._radio(), "s")
        assert err == "Radio option element not found: #size-s"

    @pytest.mark.asyncio
    async def test_plain_field_delegates(self):
        page = make_mock_page()
        f = ToolField(type="text", selector="#email", name="email")
        assert await fill_tool_field(page, f, "a@b.c") is None
        assert page.evaluate_handle.call_args.args[1]["base"] == "#email"
        assert page.element.evaluate.call_args.args[0] == _FILL_JS
