"""
UnitRecord model: the canonical per-unit entity built from one extract row.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from .vocabulary import LifecycleStage

CALCULATED_FEE_FIELDS = (
    "check_in_fee",
    "packaging_fee",
    "pick_pack_ship_fee",
    "refurbishing_fee",
    "marketplace_fee",
)

INVOICED_FEE_FIELDS = (
    "invoiced_check_in_fee",
    "invoiced_refurb_fee",
    "invoiced_overbox_fee",
    "invoiced_packaging_fee",
    "invoiced_pps_fee",
    "invoiced_shipping_fee",
    "invoiced_merchant_fee",
    "invoiced_3pmp_fee",
    "invoiced_revshare_fee",
    "invoiced_marketing_fee",
    "invoiced_refund_fee",
)

# Milestone date attribute for each lifecycle stage
MILESTONE_FIELDS: dict[str, str] = {
    "Received": "received_on",
    "CheckedIn": "checked_in_on",
    "Tested": "tested_on",
    "Listed": "first_listed_on",
    "Sold": "order_closed_on",
}


class UnitRecord(BaseModel):
    """
    Canonical record for one liquidation unit, rebuilt on every run.

    Attributes:
        unit_id: Externally assigned unit identifier (natural key)
        effective_retail: min(upc_retail, category_average_retail), or
            whichever of the two is present
        gross_sale: Explicit gross sale, else the sale price
        total_fees: Sum of the calculated fee components that are present
        received_on .. order_closed_on: Milestone dates, each optional
        fiscal_week / fiscal_day_of_week: Fiscal position of order_closed_on
        current_stage: Highest-priority milestone present
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "unit_id": "100234567",
                "program_name": "BENAR-WM-RECLAIMS-OVERSTOCK",
                "category_name": "Electronics -> Batteries",
                "upc_retail": 49.99,
                "category_average_retail": 40.0,
                "effective_retail": 40.0,
                "sale_price": 24.5,
                "gross_sale": 24.5,
                "received_on": "2025-01-27",
                "order_closed_on": "2025-02-01",
                "fiscal_week": 1,
                "fiscal_day_of_week": 1,
                "current_stage": "Sold",
            }
        },
    )

    unit_id: str = Field(..., min_length=1)

    program_name: str | None = None
    master_program_name: str | None = None
    category_name: str | None = None
    title: str | None = None
    product_status: str | None = None
    upc: str | None = None
    facility: str | None = None
    location_id: str | None = None
    client_ownership: str | None = None
    client_source: str | None = None
    marketplace_sold_on: str | None = None
    order_type_sold_on: str | None = None
    sorting_index: str | None = None
    b2c_auction: str | None = None
    ebay_auction_sale: bool = False

    upc_retail: float | None = None
    category_average_retail: float | None = None
    effective_retail: float | None = None
    sale_price: float | None = None
    discount_amount: float | None = None
    gross_sale: float | None = None
    refund_amount: float | None = None
    is_refunded: bool = False

    check_in_fee: float | None = None
    packaging_fee: float | None = None
    pick_pack_ship_fee: float | None = None
    refurbishing_fee: float | None = None
    marketplace_fee: float | None = None
    total_fees: float | None = None

    invoiced_check_in_fee: float | None = None
    invoiced_refurb_fee: float | None = None
    invoiced_overbox_fee: float | None = None
    invoiced_packaging_fee: float | None = None
    invoiced_pps_fee: float | None = None
    invoiced_shipping_fee: float | None = None
    invoiced_merchant_fee: float | None = None
    invoiced_3pmp_fee: float | None = None
    invoiced_revshare_fee: float | None = None
    invoiced_marketing_fee: float | None = None
    invoiced_refund_fee: float | None = None
    service_invoice_total: float | None = None
    vendor_invoice_total: float | None = None
    expected_hv_as_is_refurb_fee: float | None = None

    received_on: date | None = None
    checked_in_on: date | None = None
    tested_on: date | None = None
    first_listed_on: date | None = None
    order_closed_on: date | None = None

    fiscal_week: int | None = Field(None, ge=1, le=53)
    fiscal_day_of_week: int | None = Field(None, ge=1, le=7)
    current_stage: LifecycleStage | None = None

    def milestone_dates(self) -> dict[str, date | None]:
        """Milestone date per lifecycle stage, including absent ones."""
        return {stage: getattr(self, attr) for stage, attr in MILESTONE_FIELDS.items()}

    def invoiced_fees(self) -> dict[str, float]:
        """Invoiced fee components present on this unit."""
        return {
            name: getattr(self, name)
            for name in INVOICED_FEE_FIELDS
            if getattr(self, name) is not None
        }

    def calculated_fees(self) -> dict[str, float]:
        """Calculated fee components present on this unit."""
        return {
            name: getattr(self, name)
            for name in CALCULATED_FEE_FIELDS
            if getattr(self, name) is not None
        }

    @property
    def has_fees(self) -> bool:
        return bool(self.calculated_fees() or self.invoiced_fees())
