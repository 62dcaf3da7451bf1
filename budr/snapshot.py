"""
Offline page context over saved HTML.

Lets the classifier and assembler run against a page saved from the browser
("Save page as..." or ``page.content()``) without launching chromium.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

_URL_PROPS = {"src", "href"}


class SnapshotPage:
    """PageContext over a static DOM snapshot."""

    def __init__(self, html: str, url: str):
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")
        self.clicks: list[str] = []

    def _read(self, node: Tag, prop: str) -> Optional[str]:
        if prop == "innerText":
            return node.get_text(" ", strip=True)
        if prop == "textContent":
            return node.get_text()
        if prop == "innerHTML":
            return node.decode_contents()
        value = node.get(prop)
        if value is None:
            return None
        if isinstance(value, list):
            value = " ".join(value)
        return urljoin(self.url, value) if prop in _URL_PROPS else value

    async def query(self, selector: str, prop: str = "innerText") -> Optional[str]:
        node = self.soup.select_one(selector)
        return None if node is None else self._read(node, prop)

    async def query_all(self, selector: str, prop: str = "innerText") -> list[str]:
        values = (self._read(node, prop) for node in self.soup.select(selector))
        return [v for v in values if v is not None]

    async def query_rows(self, selector: str) -> list[list[str]]:
        return [
            [cell.get_text(" ", strip=True) for cell in row.find_all(recursive=False)]
            for row in self.soup.select(selector)
        ]

    async def exists(self, selector: str) -> bool:
        return self.soup.select_one(selector) is not None

    async def click(self, selector: str) -> None:
        if self.soup.select_one(selector) is None:
            raise LookupError(f"no node matches {selector!r}")
        self.clicks.append(selector)

    async def wait_for(self, selector: str, timeout_ms: int) -> None:
        if self.soup.select_one(selector) is None:
            raise TimeoutError(f"{selector!r} did not appear within {timeout_ms} ms")
