from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from budr.core import FieldReadError, PageContext

log = logging.getLogger(__name__)

T = TypeVar("T")


class FieldReader:
    """Selector-based field reads that degrade to a default instead of raising."""

    def __init__(self, page: PageContext):
        self.page = page

    async def read(
        self,
        selector: str,
        prop: str = "innerText",
        convert: Optional[Callable[[str], T]] = None,
        default: Any = None,
    ) -> T | Any:
        """
        Read ``prop`` of the first node matching ``selector`` and convert it.

        A missing node yields ``default``. Any failure while reading or
        converting is logged and also yields ``default``, so one broken
        selector only costs one field.
        """
        try:
            return await self._read(selector, prop, convert, default)
        except FieldReadError as exc:
            log.debug("field %s degraded to default: %s", selector, exc)
            return default

    async def _read(self, selector, prop, convert, default):
        try:
            raw = await self.page.query(selector, prop)
        except Exception as exc:
            raise FieldReadError(f"read {prop} of {selector!r} failed: {exc}") from exc
        if raw is None:
            return default
        if convert is None:
            return raw.strip()
        try:
            return convert(raw)
        except Exception as exc:
            raise FieldReadError(f"convert {raw!r} from {selector!r} failed: {exc}") from exc

    async def read_all(self, selector: str, prop: str = "innerText") -> list[str]:
        try:
            return await self.page.query_all(selector, prop)
        except Exception as exc:
            log.debug("list %s degraded to empty: %s", selector, exc)
            return []

    async def exists(self, selector: str) -> bool:
        try:
            return await self.page.exists(selector)
        except Exception as exc:
            log.debug("probe %s failed: %s", selector, exc)
            return False
