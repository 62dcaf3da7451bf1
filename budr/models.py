from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ListingKind(str, Enum):
    AUCTION = "auction"
    PRODUCT = "product"


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class Bid(_Record):
    bidder: str = ""
    amount: float = 0.0
    time: Union[datetime, str] = ""


class AuctionInfo(_Record):
    kind: Literal["auction"] = "auction"

    # Auction and seller information
    seller_name: str = ""
    is_auction: Literal[True] = True
    listing_name: str = ""
    auction_ended: bool = False

    # Bid information
    all_bids: list[Bid] = Field(default_factory=list)
    highest_bid: float = 0.0
    latest_bid: Optional[Bid] = None
    number_of_bids: int = 0

    # Time information
    time_left: Union[int, str] = 0
    end_time: str = ""

    # Buy now information
    buy_now_price: float = 0.0
    buy_now_available: bool = False

    # Other information
    description: str = ""
    images: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _derive_bid_fields(cls, data):
        # latest_bid and number_of_bids always follow all_bids
        if isinstance(data, dict):
            bids = data.get("all_bids", data.get("allBids")) or []
            data = {
                k: v
                for k, v in data.items()
                if k not in ("latest_bid", "latestBid", "number_of_bids", "numberOfBids")
            }
            data["latest_bid"] = bids[0] if bids else None
            data["number_of_bids"] = len(bids)
        return data


class ProductInfo(_Record):
    kind: Literal["product"] = "product"

    seller_name: str = ""
    is_auction: Literal[False] = False
    product_name: str = ""
    product_sold: bool = False

    buy_now_price: float = 0.0

    description: str = ""
    images: list[str] = Field(default_factory=list)


PageInfo = Annotated[Union[AuctionInfo, ProductInfo], Field(discriminator="kind")]


FailureKind = Literal["invalid_url", "navigation", "not_found", "wrong_page_type"]


class ScrapeFailure(_Record):
    kind: FailureKind
    message: str


class ScrapeResult(_Record):
    url: str
    page: Optional[PageInfo] = None
    error: Optional[ScrapeFailure] = None

    @property
    def ok(self) -> bool:
        return self.page is not None and self.error is None
