import asyncio
import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from budr.browser import browser_session
from budr.core import NavigationError, ScrapeError
from budr.fetchers.tradera import TraderaListing
from budr.models import ScrapeFailure, ScrapeResult
from budr.navigator import Navigator, validate_url
from budr.settings import Settings, load_settings
from budr.snapshot import SnapshotPage

log = logging.getLogger("budr")

# Map site code → listing reader
SITES = {
    "tradera": TraderaListing,
}


def _failure(url: str, exc: ScrapeError) -> ScrapeResult:
    log.warning("%s: %s", exc.kind, exc)
    return ScrapeResult(
        url=url or "", error=ScrapeFailure(kind=exc.kind, message=str(exc))
    )


async def scrape(
    url: str, settings: Optional[Settings] = None, site: str = "tradera"
) -> ScrapeResult:
    """Open one listing in a fresh browser and read it."""
    settings = settings or load_settings()
    reader = SITES[site](settings.browser.selector_timeout_ms)

    try:
        url = validate_url(url)
    except ScrapeError as exc:
        return _failure(url, exc)

    try:
        async with browser_session(settings) as page:
            await Navigator(settings).open(page, url)
            info = await reader.fetch(page)
    except ScrapeError as exc:
        return _failure(url, exc)
    except PlaywrightError as exc:
        return _failure(url, NavigationError(f"Browser failed: {exc}"))

    log.info("%s → %s", url, info.kind)
    return ScrapeResult(url=url, page=info)


async def scrape_html(html: str, url: str, site: str = "tradera") -> ScrapeResult:
    """Read a saved page without a browser. Overlays are not present offline."""
    try:
        url = validate_url(url)
        page = SnapshotPage(html, url)
        await Navigator(Settings()).check(page)
        info = await SITES[site]().fetch(page)
    except ScrapeError as exc:
        return _failure(url, exc)
    return ScrapeResult(url=url, page=info)


def scrape_sync(url: str, settings: Optional[Settings] = None) -> ScrapeResult:
    return asyncio.run(scrape(url, settings))
