"""Tests for the playwright page adapter."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from budr.browser import BrowserPage


class TestBrowserPageGoto:
    @pytest.mark.asyncio
    async def test_waits_for_full_load(self, item_url):
        page = MagicMock()
        page.goto = AsyncMock(return_value=MagicMock(status=200))
        status = await BrowserPage(page).goto(item_url, 1234)
        assert status == 200
        page.goto.assert_awaited_once_with(item_url, wait_until="load", timeout=1234)

    @pytest.mark.asyncio
    async def test_no_response(self, item_url):
        page = MagicMock()
        page.goto = AsyncMock(return_value=None)
        assert await BrowserPage(page).goto(item_url, 1234) is None
