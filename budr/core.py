from abc import ABC, abstractmethod
from typing import Optional, Protocol


class PageContext(Protocol):
    """A rendered page the extractor can query."""

    url: str

    async def query(self, selector: str, prop: str = "innerText") -> Optional[str]: ...

    async def query_all(self, selector: str, prop: str = "innerText") -> list[str]: ...

    async def query_rows(self, selector: str) -> list[list[str]]: ...

    async def exists(self, selector: str) -> bool: ...

    async def click(self, selector: str) -> None: ...

    async def wait_for(self, selector: str, timeout_ms: int) -> None: ...


class ScrapeError(Exception):
    """Terminal failure: the page cannot produce a listing record."""

    kind = "error"


class InvalidUrlError(ScrapeError):
    """Raised before navigation when the URL is malformed or not a Tradera item."""

    kind = "invalid_url"


class NavigationError(ScrapeError):
    """Raised when the page could not be loaded."""

    kind = "navigation"


class NotFoundError(ScrapeError):
    """Raised on a hard 404 or when the page renders the not-found container."""

    kind = "not_found"


class WrongPageTypeError(ScrapeError):
    """Raised when the page we ended up on is not an item page."""

    kind = "wrong_page_type"


class FieldReadError(RuntimeError):
    """Raised when a single selector read or its conversion fails."""


class OverlayInteractionError(RuntimeError):
    """Raised when a cookie banner or locale modal cannot be dismissed."""


class AuctionSite(ABC):
    """A pluggable listing reader."""

    @abstractmethod
    async def fetch(self, page: PageContext): ...
