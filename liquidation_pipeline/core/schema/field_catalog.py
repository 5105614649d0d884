"""
Logical field catalog.

Each logical field an extract can carry has a value kind and an ordered
list of acceptable header spellings. The order is a precedence list: the
first spelling present in a file wins. Lists can be overridden from YAML
without touching code.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

FieldKind = Literal["identifier", "text", "number", "date", "bool"]

IDENTIFIER_FIELD = "unit_id"


class FieldDefinition(BaseModel):
    """
    Attributes:
        name: Logical field name (matches the UnitRecord attribute)
        kind: How cell text is parsed
        candidates: Acceptable header spellings, highest precedence first
    """

    name: str
    kind: FieldKind
    candidates: tuple[str, ...] = Field(..., min_length=1)


def _invoiced(stem: str, spaced: str) -> tuple[str, ...]:
    return (f"Invoiced_{stem}", f"Invoiced{stem}", f"Invoiced {spaced}")


DEFAULT_FIELDS: tuple[FieldDefinition, ...] = (
    FieldDefinition(
        name=IDENTIFIER_FIELD,
        kind="identifier",
        candidates=("TRGID", "trgid", "TrgId", "Trgid", "TRG ID", "TRG_ID"),
    ),
    # descriptive
    FieldDefinition(name="program_name", kind="text", candidates=("ProgramName", "Program Name")),
    FieldDefinition(
        name="master_program_name",
        kind="text",
        candidates=("Master Program Name", "MasterProgramName"),
    ),
    FieldDefinition(name="category_name", kind="text", candidates=("CategoryName", "Category Name")),
    FieldDefinition(name="title", kind="text", candidates=("Title",)),
    FieldDefinition(name="product_status", kind="text", candidates=("ProductStatus", "Product Status")),
    FieldDefinition(name="upc", kind="text", candidates=("UPC",)),
    FieldDefinition(name="facility", kind="text", candidates=("Tag_Facility", "Facility")),
    FieldDefinition(name="location_id", kind="text", candidates=("LocationID", "Location ID")),
    FieldDefinition(name="client_ownership", kind="text", candidates=("Tag_Ownership",)),
    FieldDefinition(
        name="client_source",
        kind="text",
        candidates=("Tag_ClientSource", "ClientSource_Tag", "Tag_Client_Source"),
    ),
    FieldDefinition(
        name="marketplace_sold_on",
        kind="text",
        candidates=("Marketplace Profile Sold On", "MarketplaceProfileSoldOn"),
    ),
    FieldDefinition(
        name="order_type_sold_on",
        kind="text",
        candidates=("Order Type Sold On", "OrderTypeSoldOn", "Order_Type_Sold_On"),
    ),
    FieldDefinition(
        name="sorting_index",
        kind="text",
        candidates=("SortingIndex", "Sorting Index", "sorting_index"),
    ),
    FieldDefinition(name="b2c_auction", kind="text", candidates=("B2C_Auction", "B2CAuction", "B2C Auction")),
    FieldDefinition(
        name="ebay_auction_sale",
        kind="bool",
        candidates=("Tag_EbayAuctionSale", "TagEbayAuctionSale", "Tag Ebay Auction Sale"),
    ),
    # monetary
    FieldDefinition(name="upc_retail", kind="number", candidates=("UPCRetail", "UPC Retail")),
    FieldDefinition(
        name="category_average_retail",
        kind="number",
        candidates=("MR_LMR_UPC_AverageCategoryRetail",),
    ),
    FieldDefinition(
        name="sale_price",
        kind="number",
        candidates=("Sale Price (Discount applied)", "SalePrice", "Sale Price"),
    ),
    FieldDefinition(name="discount_amount", kind="number", candidates=("DiscountAmount", "Discount Amount")),
    FieldDefinition(name="gross_sale", kind="number", candidates=("GrossSale", "Gross Sale")),
    FieldDefinition(name="refund_amount", kind="number", candidates=("RefundedSalePriceCalculated",)),
    # calculated fees
    FieldDefinition(name="check_in_fee", kind="number", candidates=("CheckInFeeCalculated",)),
    FieldDefinition(name="packaging_fee", kind="number", candidates=("PackagingFeeCalculated",)),
    FieldDefinition(
        name="pick_pack_ship_fee",
        kind="number",
        candidates=("ServicePickPackShipFeeCalculated",),
    ),
    FieldDefinition(
        name="refurbishing_fee",
        kind="number",
        candidates=("ServiceRefurbishingFeeCalculated",),
    ),
    FieldDefinition(
        name="marketplace_fee",
        kind="number",
        candidates=("ServiceThirdPartyMarketplaceFeeCalculated",),
    ),
    # invoiced fees
    FieldDefinition(name="invoiced_check_in_fee", kind="number", candidates=_invoiced("CheckInFee", "Check In Fee")),
    FieldDefinition(name="invoiced_refurb_fee", kind="number", candidates=_invoiced("RefurbFee", "Refurb Fee")),
    FieldDefinition(name="invoiced_overbox_fee", kind="number", candidates=_invoiced("OverboxFee", "Overbox Fee")),
    FieldDefinition(
        name="invoiced_packaging_fee",
        kind="number",
        candidates=_invoiced("PackagingFee", "Packaging Fee"),
    ),
    FieldDefinition(name="invoiced_pps_fee", kind="number", candidates=_invoiced("PPSFee", "PPS Fee")),
    FieldDefinition(
        name="invoiced_shipping_fee",
        kind="number",
        candidates=_invoiced("ShippingFee", "Shipping Fee"),
    ),
    FieldDefinition(
        name="invoiced_merchant_fee",
        kind="number",
        candidates=_invoiced("MerchantFee", "Merchant Fee"),
    ),
    FieldDefinition(name="invoiced_3pmp_fee", kind="number", candidates=_invoiced("3PMPFee", "3PMP Fee")),
    FieldDefinition(
        name="invoiced_revshare_fee",
        kind="number",
        candidates=_invoiced("RevshareFee", "Revshare Fee"),
    ),
    FieldDefinition(
        name="invoiced_marketing_fee",
        kind="number",
        candidates=_invoiced("MarketingFee", "Marketing Fee"),
    ),
    FieldDefinition(name="invoiced_refund_fee", kind="number", candidates=_invoiced("RefundFee", "Refund Fee")),
    FieldDefinition(
        name="service_invoice_total",
        kind="number",
        candidates=("ServiceInvoiceTotal", "Service Invoice Total"),
    ),
    FieldDefinition(
        name="vendor_invoice_total",
        kind="number",
        candidates=("VendorInvoiceTotal", "Vendor Invoice Total"),
    ),
    FieldDefinition(
        name="expected_hv_as_is_refurb_fee",
        kind="number",
        candidates=("Expected_HV_AS_IS_RefurbFee", "ExpectedHVASISRefurbFee", "Expected HV AS-IS Refurb Fee"),
    ),
    # milestones
    FieldDefinition(name="received_on", kind="date", candidates=("ReceivedOn", "Received On")),
    FieldDefinition(name="checked_in_on", kind="date", candidates=("CheckedInOn", "Checked In On")),
    FieldDefinition(name="tested_on", kind="date", candidates=("TestedOn", "Tested On")),
    FieldDefinition(
        name="first_listed_on",
        kind="date",
        candidates=("FirstListedOnMarketplaceOn", "FirstListedDate", "First Listed Date"),
    ),
    FieldDefinition(name="order_closed_on", kind="date", candidates=("OrderClosedDate", "Order Closed Date")),
)


class FieldCatalog:
    """
    Ordered set of field definitions the resolver matches headers against.
    """

    def __init__(self, fields: tuple[FieldDefinition, ...] | list[FieldDefinition] = DEFAULT_FIELDS):
        self._fields: dict[str, FieldDefinition] = {}
        for definition in fields:
            if definition.name in self._fields:
                raise ValueError(f"Duplicate logical field '{definition.name}'")
            self._fields[definition.name] = definition

        if IDENTIFIER_FIELD not in self._fields:
            raise ValueError(f"Field catalog must define '{IDENTIFIER_FIELD}'")

    def __iter__(self):
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def get(self, name: str) -> FieldDefinition:
        return self._fields[name]

    def candidates(self, name: str) -> tuple[str, ...]:
        return self._fields[name].candidates

    def names(self, kind: FieldKind | None = None) -> list[str]:
        return [d.name for d in self._fields.values() if kind is None or d.kind == kind]

    def with_overrides(self, overrides: dict[str, list[str] | tuple[str, ...]]) -> "FieldCatalog":
        """
        Copy of this catalog with candidate lists replaced per field.

        Args:
            overrides: Logical field name -> replacement candidate list

        Returns:
            New FieldCatalog; this one is left untouched

        Raises:
            ValueError: If an override names an unknown field or is empty
        """
        updated = []
        unknown = set(overrides) - set(self._fields)
        if unknown:
            raise ValueError(f"Unknown logical field(s) in overrides: {', '.join(sorted(unknown))}")

        for definition in self._fields.values():
            if definition.name in overrides:
                candidates = tuple(str(c) for c in overrides[definition.name])
                if not candidates:
                    raise ValueError(f"Candidate list for '{definition.name}' must not be empty")
                definition = definition.model_copy(update={"candidates": candidates})
            updated.append(definition)
        return FieldCatalog(updated)


class FieldCatalogLoader:
    """
    Loads candidate header overrides from a YAML file.

    Expected YAML format:
    ```yaml
    fields:
      unit_id: ["TRGID", "TRG ID"]
      received_on:
        - ReceivedOn
        - Received Date
    ```
    """

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Field configuration file not found: {config_path}")

    def load_overrides(self) -> dict[str, list[str]]:
        """
        Raises:
            ValueError: If the fields section is malformed
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}
        return parse_field_overrides(config.get("fields"))

    def load_catalog(self, base: FieldCatalog | None = None) -> FieldCatalog:
        return (base or FieldCatalog()).with_overrides(self.load_overrides())


def parse_field_overrides(section: Any) -> dict[str, list[str]]:
    """Validate a raw 'fields' mapping from configuration."""
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError("'fields' section must be a mapping of field name to header list")

    overrides: dict[str, list[str]] = {}
    for field_name, candidates in section.items():
        if isinstance(candidates, str):
            candidates = [candidates]
        if not isinstance(candidates, list):
            raise ValueError(f"Candidates for field '{field_name}' must be a list")
        overrides[str(field_name)] = [str(c) for c in candidates]
    return overrides
