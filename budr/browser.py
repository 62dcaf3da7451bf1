"""
Playwright-backed page context.

``browser_session`` owns the browser for one run: it launches chromium,
yields a single ``BrowserPage`` and closes everything on the way out, also
when the run stops early on a failed precondition.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Page, async_playwright

from budr.settings import Settings

log = logging.getLogger(__name__)

_READ_PROP_JS = "(el, prop) => el[prop]"
_READ_ROWS_JS = (
    "rows => rows.map(r => Array.from(r.children).map(c => c.innerText))"
)


class BrowserPage:
    """PageContext over a live playwright page."""

    def __init__(self, page: Page):
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str, timeout_ms: int) -> Optional[int]:
        """Navigate and return the HTTP status of the main response, if any."""
        response = await self._page.goto(url, wait_until="load", timeout=timeout_ms)
        return response.status if response is not None else None

    async def query(self, selector: str, prop: str = "innerText") -> Optional[str]:
        node = await self._page.query_selector(selector)
        if node is None:
            return None
        value = await node.evaluate(_READ_PROP_JS, prop)
        return None if value is None else str(value)

    async def query_all(self, selector: str, prop: str = "innerText") -> list[str]:
        values = await self._page.eval_on_selector_all(
            selector, "(els, prop) => els.map(el => el[prop])", prop
        )
        return [str(v) for v in values if v is not None]

    async def query_rows(self, selector: str) -> list[list[str]]:
        return await self._page.eval_on_selector_all(selector, _READ_ROWS_JS)

    async def exists(self, selector: str) -> bool:
        return await self._page.query_selector(selector) is not None

    async def click(self, selector: str) -> None:
        await self._page.click(selector)

    async def wait_for(self, selector: str, timeout_ms: int) -> None:
        await self._page.wait_for_selector(selector, timeout=timeout_ms)


@asynccontextmanager
async def browser_session(settings: Settings) -> AsyncIterator[BrowserPage]:
    async with async_playwright() as pw:
        launch_kwargs: dict = {"headless": settings.browser.headless}
        proxy = settings.random_proxy()
        if proxy:
            launch_kwargs["proxy"] = {"server": proxy}

        browser = await pw.chromium.launch(**launch_kwargs)
        log.debug("chromium launched (headless=%s)", settings.browser.headless)
        try:
            context = await browser.new_context(
                user_agent=settings.random_user_agent(),
                locale=settings.browser.locale,
            )
            page = await context.new_page()
            page.set_default_timeout(settings.browser.selector_timeout_ms)
            yield BrowserPage(page)
        finally:
            await browser.close()
            log.debug("chromium closed")
