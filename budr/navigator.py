"""
Opens a Tradera item page and makes sure it is usable before extraction.

Order of work:
  • validate the URL (no browser work on failure)
  • navigate, retrying transient load failures a bounded number of times
  • dismiss cookie consent and locale modal (best effort)
  • check the final URL is still an item page and not a soft-404
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
from typing import Optional, Protocol

from playwright.async_api import Error as PlaywrightError

from budr.core import (
    InvalidUrlError,
    NavigationError,
    NotFoundError,
    OverlayInteractionError,
    PageContext,
    WrongPageTypeError,
)
from budr.settings import Settings

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
#  URL patterns & selectors
# --------------------------------------------------------------------------- #

_URL_RE = re.compile(
    r"^(https?://)?"
    r"((([a-z\d]([a-z\d-]*[a-z\d])?)\.)+[a-z]{2,}|"
    r"((\d{1,3}\.){3}\d{1,3}))"
    r"(:\d+)?(/[-a-z\d%_.~+]*)*"
    r"(\?[;&a-z\d%_.~+=-]*)?"
    r"(#[-a-z\d_]*)?$",
    re.I,
)
_ITEM_URL_RE = re.compile(
    r"^(https?://)?([a-z\d-]+\.)*tradera\.(com|se)(:\d+)?(/[a-z]{2}(-[a-z]{2})?)?/item([/?#]|$)",
    re.I,
)

COOKIE_ACCEPT_SEL = (
    "#qc-cmp2-ui > div.qc-cmp2-footer.qc-cmp2-footer-overlay.qc-cmp2-footer-scrolled"
    " > div > button.css-14ubilm"
)
LOCALE_MODAL_CLOSE_SEL = "#language-preference-modal button.btn-primary"
NOT_FOUND_SEL = ".not-found-container"

_GONE_STATUSES = (404, 410)


class Navigable(PageContext, Protocol):
    async def goto(self, url: str, timeout_ms: int) -> Optional[int]: ...


def validate_url(url: Optional[str]) -> str:
    """Return the stripped URL or raise InvalidUrlError."""
    url = (url or "").strip()
    if not url:
        raise InvalidUrlError("No item url provided")
    if not _URL_RE.match(url):
        raise InvalidUrlError(f"Invalid url: {url}")
    if not _ITEM_URL_RE.match(url):
        raise InvalidUrlError(f"Not a Tradera item url: {url}")
    return url


def is_item_url(url: str) -> bool:
    return bool(_ITEM_URL_RE.match(url or ""))


class Navigator:
    def __init__(self, settings: Settings):
        self.settings = settings

    async def open(self, page: Navigable, url: str) -> PageContext:
        url = validate_url(url)
        await self._goto(page, url)
        await self.dismiss_overlays(page)
        await self.check(page)
        return page

    async def _goto(self, page: Navigable, url: str) -> None:
        net = self.settings.network
        attempts = net.navigation_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                status = await page.goto(url, self.settings.browser.navigation_timeout_ms)
            except PlaywrightError as exc:
                log.warning("navigation %d/%d to %s failed: %s", attempt, attempts, url, exc)
                if attempt == attempts:
                    raise NavigationError(f"Could not load {url}: {exc}") from exc
                back = net.retry_backoff_seconds
                await asyncio.sleep(back + random.uniform(0, back))
                continue

            if status in _GONE_STATUSES:
                raise NotFoundError(f"Page returned {status}: {url}")
            log.info("loaded %s (HTTP %s)", page.url, status)
            return

    async def dismiss_overlays(self, page: PageContext) -> None:
        for name, selector in (
            ("cookie consent", COOKIE_ACCEPT_SEL),
            ("locale modal", LOCALE_MODAL_CLOSE_SEL),
        ):
            try:
                await self._dismiss(page, selector)
            except OverlayInteractionError as exc:
                log.warning("Could not dismiss %s: %s", name, exc)

    async def _dismiss(self, page: PageContext, selector: str) -> None:
        try:
            await page.wait_for(selector, self.settings.browser.overlay_timeout_ms)
            await page.click(selector)
        except Exception as exc:
            raise OverlayInteractionError(str(exc) or type(exc).__name__) from exc

    async def check(self, page: PageContext) -> None:
        if not is_item_url(page.url):
            raise WrongPageTypeError(
                f"Not an item page (listing might have been removed): {page.url}"
            )
        try:
            not_found = await page.exists(NOT_FOUND_SEL)
        except PlaywrightError as exc:
            raise NavigationError(f"Page unusable after load: {exc}") from exc
        if not_found:
            raise NotFoundError(f"Page rendered not-found content: {page.url}")
