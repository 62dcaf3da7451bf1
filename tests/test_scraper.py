"""Tests for the scrape runner: result values instead of process exits."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from budr.scraper import scrape, scrape_html


def _session_yielding(page, calls: list):
    @asynccontextmanager
    async def fake_session(settings):
        calls.append("open")
        try:
            yield page
        finally:
            calls.append("close")

    return fake_session


class TestScrape:
    @pytest.mark.asyncio
    async def test_invalid_url_launches_nothing(self, settings):
        calls: list = []
        with patch("budr.scraper.browser_session", _session_yielding(None, calls)):
            result = await scrape("https://www.tradera.com/category/302", settings)
        assert calls == []
        assert result.ok is False
        assert result.error.kind == "invalid_url"

    @pytest.mark.asyncio
    async def test_missing_url(self, settings):
        result = await scrape(None, settings)
        assert result.error.kind == "invalid_url"
        assert result.url == ""

    @pytest.mark.asyncio
    async def test_auction_end_to_end(self, settings, active_html, fake_page, item_url):
        calls: list = []
        page = fake_page(active_html)
        with patch("budr.scraper.browser_session", _session_yielding(page, calls)):
            result = await scrape(item_url, settings)
        assert calls == ["open", "close"]
        assert result.ok is True
        assert result.page.is_auction is True
        assert result.page.number_of_bids == 3
        assert len(result.page.images) == 2

    @pytest.mark.asyncio
    async def test_not_found_closes_browser(
        self, settings, not_found_html, fake_page, item_url
    ):
        calls: list = []
        page = fake_page(not_found_html)
        with patch("budr.scraper.browser_session", _session_yielding(page, calls)):
            result = await scrape(item_url, settings)
        assert calls == ["open", "close"]
        assert result.page is None
        assert result.error.kind == "not_found"

    @pytest.mark.asyncio
    async def test_removed_listing_redirect(
        self, settings, active_html, fake_page, item_url
    ):
        calls: list = []
        page = fake_page(active_html, final_url="https://www.tradera.com/")
        with patch("budr.scraper.browser_session", _session_yielding(page, calls)):
            result = await scrape(item_url, settings)
        assert calls == ["open", "close"]
        assert result.error.kind == "wrong_page_type"

    @pytest.mark.asyncio
    async def test_page_torn_down_during_check(
        self, settings, active_html, fake_page, item_url
    ):
        calls: list = []
        page = fake_page(active_html)
        page.exists = AsyncMock(
            side_effect=PlaywrightError("Execution context was destroyed")
        )
        with patch("budr.scraper.browser_session", _session_yielding(page, calls)):
            result = await scrape(item_url, settings)
        assert calls == ["open", "close"]
        assert result.page is None
        assert result.error.kind == "navigation"
        assert "Execution context was destroyed" in result.error.message

    @pytest.mark.asyncio
    async def test_browser_launch_failure(self, settings, item_url):
        @asynccontextmanager
        async def broken_session(settings):
            raise PlaywrightError("Executable doesn't exist at /ms-playwright/chromium")
            yield

        with patch("budr.scraper.browser_session", broken_session):
            result = await scrape(item_url, settings)
        assert result.page is None
        assert result.error.kind == "navigation"
        assert "Executable doesn't exist" in result.error.message


class TestScrapeHtml:
    @pytest.mark.asyncio
    async def test_product(self, product_html, item_url):
        result = await scrape_html(product_html, item_url)
        assert result.ok is True
        assert result.page.kind == "product"

    @pytest.mark.asyncio
    async def test_soft_404(self, not_found_html, item_url):
        result = await scrape_html(not_found_html, item_url)
        assert result.error.kind == "not_found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url", ["https://www.tradera.com/", "not a url", "ftp://tradera.com/item/1"]
    )
    async def test_bad_url_is_invalid_url(self, active_html, url):
        result = await scrape_html(active_html, url)
        assert result.page is None
        assert result.error.kind == "invalid_url"
