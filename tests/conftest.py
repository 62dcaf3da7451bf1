"""Test fixtures: saved Tradera pages and a browser-free page context."""

from pathlib import Path
from typing import Optional

import pytest

from budr.settings import BrowserCfg, NetworkCfg, Settings
from budr.snapshot import SnapshotPage

SAMPLES_DIR = Path(__file__).resolve().parent / "samples"

ITEM_URL = "https://www.tradera.com/item/344630/583933118/miitopia-nintendo-switch-"


class FakeBrowserPage(SnapshotPage):
    """SnapshotPage that also 'navigates', standing in for BrowserPage."""

    def __init__(
        self,
        html: str,
        *,
        status: Optional[int] = 200,
        final_url: Optional[str] = None,
        goto_errors: tuple = (),
    ):
        super().__init__(html, url="about:blank")
        self.status = status
        self.final_url = final_url
        self.goto_errors = list(goto_errors)
        self.visited: list[str] = []

    async def goto(self, url: str, timeout_ms: int) -> Optional[int]:
        self.visited.append(url)
        if self.goto_errors:
            raise self.goto_errors.pop(0)
        self.url = self.final_url or url
        return self.status


def load_sample(name: str) -> str:
    return (SAMPLES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        browser=BrowserCfg(overlay_timeout_ms=10, selector_timeout_ms=10),
        network=NetworkCfg(retry_backoff_seconds=0, navigation_retries=2),
    )


@pytest.fixture()
def active_html() -> str:
    return load_sample("tradera_auction_active.html")


@pytest.fixture()
def ended_html() -> str:
    return load_sample("tradera_auction_ended.html")


@pytest.fixture()
def product_html() -> str:
    return load_sample("tradera_product.html")


@pytest.fixture()
def not_found_html() -> str:
    return load_sample("tradera_not_found.html")


@pytest.fixture()
def active_page(active_html) -> SnapshotPage:
    return SnapshotPage(active_html, ITEM_URL)


@pytest.fixture()
def item_url() -> str:
    return ITEM_URL


@pytest.fixture()
def fake_page():
    return FakeBrowserPage


@pytest.fixture()
def samples_dir() -> Path:
    return SAMPLES_DIR
