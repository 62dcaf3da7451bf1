"""
Tradera item page reader – fully populated AuctionInfo / ProductInfo.

Extracts:
  • seller_name        (e.g. "retrospelbutiken")
  • listing_name       (e.g. "Miitopia Nintendo Switch")
  • all_bids           (bidder / amount / time from the bid history overlay)
  • highest_bid        (float, "1 234 kr" -> 1234.0)
  • time_left          ("2 dagar 4 tim" or 0 once ended)
  • end_time           ("12 jan 14:32", "Avslutas " prefix removed)
  • buy_now_price      (float, 0.0 without a buy-now button)
  • description, images

Fixed-price listings are read with the same selectors; that path has not
been verified against live product pages and is best effort.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from budr import convert
from budr.core import AuctionSite, PageContext
from budr.extract import FieldReader
from budr.models import AuctionInfo, Bid, ListingKind, PageInfo, ProductInfo

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
#  Selectors
# --------------------------------------------------------------------------- #

_SELLER_SEL = ".seller-alias"
_NAME_SEL = "#view-item-main"
_ENDED_SEL = ".my-auto > .heading-london"
_HIGHEST_BID_SEL = ".bid-details-amount > span > span"
_TIME_LEFT_SEL = "div.flex-md-row:nth-child(2) > div:nth-child(2) > p:nth-child(1)"
_END_TIME_SEL = "div.flex-md-row:nth-child(2) > div.mb-1 > p"
_BUY_NOW_SEL = "button.btn-md:nth-child(3)"
_DESCRIPTION_SEL = ".overflow-hidden.text-break.position-relative"
_SOLD_SEL = ".my-auto > .heading-london"

BIDS_TITLE_SEL = ".bid-details-bids-title"
BID_HISTORY_TOGGLE_SEL = ".bid-details-bids-title > span > a"
BID_ROW_SEL = ".table-fixed > tbody > tr"
IMAGE_SEL = ".image-gallery-item__image"

_SOLD_MARKER = "Såld"

# Bid history columns: bidder, amount, (unused), time
_BIDDER_COL, _AMOUNT_COL, _TIME_COL = 0, 1, 3


# --------------------------------------------------------------------------- #
#  Bid history & gallery
# --------------------------------------------------------------------------- #


@asynccontextmanager
async def bid_history(page: PageContext, timeout_ms: int) -> AsyncIterator[None]:
    """Keep the bid history overlay open for the duration of the block."""
    await page.click(BID_HISTORY_TOGGLE_SEL)
    try:
        await page.wait_for(BID_ROW_SEL, timeout_ms)
        yield
    finally:
        try:
            await page.click(BID_HISTORY_TOGGLE_SEL)
        except Exception as exc:
            log.warning("Could not close bid history: %s", exc)


def _row_to_bid(cells: list[str]) -> Bid:
    bidder, amount_text, time_text = (
        cells[_BIDDER_COL], cells[_AMOUNT_COL], cells[_TIME_COL]
    )
    try:
        amount = convert.to_number(amount_text)
    except ValueError as exc:
        log.debug("bid amount %r unreadable: %s", amount_text, exc)
        amount = 0.0
    return Bid(
        bidder=bidder.strip(),
        amount=amount,
        time=convert.parse_bid_time(time_text),
    )


async def read_all_bids(page: PageContext, timeout_ms: int = 5_000) -> list[Bid]:
    try:
        async with bid_history(page, timeout_ms):
            rows = await page.query_rows(BID_ROW_SEL)
    except Exception as exc:
        log.info("Bid history unavailable: %s", exc)
        return []

    bids: list[Bid] = []
    for cells in rows:
        try:
            bids.append(_row_to_bid(cells))
        except IndexError as exc:
            log.debug("skipping short bid row %r: %s", cells, exc)
    return bids


async def read_all_images(page: PageContext) -> list[str]:
    return convert.unique(await FieldReader(page).read_all(IMAGE_SEL, "src"))


# --------------------------------------------------------------------------- #
#  Classification & assembly
# --------------------------------------------------------------------------- #


async def classify(page: PageContext) -> ListingKind:
    if await FieldReader(page).exists(BIDS_TITLE_SEL):
        return ListingKind.AUCTION
    return ListingKind.PRODUCT


async def _assemble_auction(page: PageContext, timeout_ms: int) -> AuctionInfo:
    fields = FieldReader(page)
    return AuctionInfo(
        seller_name=await fields.read(_SELLER_SEL, default=""),
        listing_name=await fields.read(_NAME_SEL, default=""),
        auction_ended=await fields.read(
            _ENDED_SEL, convert=convert.contains(convert.ENDED_MARKER), default=False
        ),
        all_bids=await read_all_bids(page, timeout_ms),
        highest_bid=await fields.read(
            _HIGHEST_BID_SEL, convert=convert.to_number, default=0.0
        ),
        time_left=await fields.read(_TIME_LEFT_SEL, convert=convert.time_left, default=0),
        end_time=await fields.read(
            _END_TIME_SEL,
            convert=convert.strip_prefix(convert.END_TIME_PREFIX),
            default="",
        ),
        buy_now_price=await fields.read(
            _BUY_NOW_SEL, convert=convert.to_number, default=0.0
        ),
        buy_now_available=await fields.exists(_BUY_NOW_SEL),
        description=await fields.read(_DESCRIPTION_SEL, default=""),
        images=await read_all_images(page),
    )


async def _assemble_product(page: PageContext) -> ProductInfo:
    fields = FieldReader(page)
    return ProductInfo(
        seller_name=await fields.read(_SELLER_SEL, default=""),
        product_name=await fields.read(_NAME_SEL, default=""),
        product_sold=await fields.read(
            _SOLD_SEL, convert=convert.contains(_SOLD_MARKER), default=False
        ),
        buy_now_price=await fields.read(
            _BUY_NOW_SEL, convert=convert.to_number, default=0.0
        ),
        description=await fields.read(_DESCRIPTION_SEL, default=""),
        images=await read_all_images(page),
    )


async def assemble(
    kind: ListingKind, page: PageContext, *, timeout_ms: int = 5_000
) -> PageInfo:
    if kind is ListingKind.AUCTION:
        return await _assemble_auction(page, timeout_ms)
    return await _assemble_product(page)


# --------------------------------------------------------------------------- #
#  Site adapter
# --------------------------------------------------------------------------- #


class TraderaListing(AuctionSite):
    """Reads one already-open, already-checked Tradera item page."""

    def __init__(self, selector_timeout_ms: Optional[int] = None):
        self.selector_timeout_ms = selector_timeout_ms or 5_000

    async def fetch(self, page: PageContext) -> PageInfo:
        kind = await classify(page)
        log.info("%s classified as %s", page.url, kind.value)
        return await assemble(kind, page, timeout_ms=self.selector_timeout_ms)
