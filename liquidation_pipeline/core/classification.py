"""
Sales classification: reporting marketplace and sales channel.

Both are evaluated top-down; the first matching rule wins.
"""

from typing import Literal

SalesChannel = Literal["B2C Restock", "B2C Resale", "B2B Finished Goods", "B2B Pallet"]

SALES_CHANNELS: tuple[SalesChannel, ...] = (
    "B2C Restock",
    "B2C Resale",
    "B2B Finished Goods",
    "B2B Pallet",
)

MANUAL_SALES = "Manual Sales"
EBAY_AUCTION = "eBay Auction"

# (substring of the lowercased profile, reporting marketplace)
MARKETPLACE_RULES: tuple[tuple[str, str], ...] = (
    ("dl", "DirectLiquidation"),
    ("whatnot", "WhatNot"),
    ("flashfindz", "WhatNot"),
    ("shopify", "VIPOutlet"),
    ("manual", "Local Pickup"),
    ("daily deals", "eBay"),
)

B2C_RESTOCK_MARKETPLACES = ("walmart in store", "walmart marketplace", "walmart dsv")


def map_marketplace(
    sold_on: str | None,
    ebay_auction_sale: bool = False,
    b2c_auction: str | None = None,
) -> str:
    """
    Reporting marketplace for a sale.

    Args:
        sold_on: Raw "Marketplace Profile Sold On" value
        ebay_auction_sale: Auction tag on the unit
        b2c_auction: Raw B2C auction flag ("TRUE" when set)

    Returns:
        Mapped marketplace name, or the raw value when no rule matches
    """
    if not sold_on or not sold_on.strip():
        return MANUAL_SALES

    lowered = sold_on.lower()
    for needle, marketplace in MARKETPLACE_RULES:
        if needle in lowered:
            return marketplace

    if ebay_auction_sale or (b2c_auction == "TRUE" and sold_on == "eBay"):
        return EBAY_AUCTION

    return sold_on


def derive_sales_channel(
    sold_on: str | None,
    order_type_sold_on: str | None,
    sorting_index: str | None,
) -> SalesChannel:
    lowered = (sold_on or "").lower()
    if any(name in lowered for name in B2C_RESTOCK_MARKETPLACES):
        return "B2C Restock"
    if (order_type_sold_on or "") == "B2CMarketplace":
        return "B2C Resale"
    # Pallet sales carry a sorting index
    if not (sorting_index or "").strip():
        return "B2B Finished Goods"
    return "B2B Pallet"
