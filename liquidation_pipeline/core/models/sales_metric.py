"""
SalesMetricRecord model: sale-side view of a unit with a closed order.
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SalesMetricRecord(BaseModel):
    """
    One row per sold unit, replaced wholesale by later runs.

    Classification attributes (marketplace, sales_channel) are derived at
    ingestion time so reporting reads never re-derive them.
    """

    model_config = ConfigDict(frozen=True)

    unit_id: str = Field(..., min_length=1)
    file_run_id: UUID | None = None
    order_closed_on: date

    sale_price: float = 0.0
    discount_amount: float | None = None
    gross_sale: float = 0.0
    effective_retail: float | None = None
    refund_amount: float | None = None
    is_refunded: bool = False

    program_name: str | None = None
    master_program_name: str | None = None
    category_name: str | None = None
    marketplace_sold_on: str | None = None
    marketplace: str
    sales_channel: str
    facility: str | None = None
    client_source: str | None = None
    order_type_sold_on: str | None = None
    sorting_index: str | None = None
    b2c_auction: str | None = None
    ebay_auction_sale: bool = False

    fiscal_week: int | None = Field(None, ge=1, le=53)
    fiscal_day_of_week: int | None = Field(None, ge=1, le=7)

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

    calculated_check_in_fee: float | None = None
    calculated_packaging_fee: float | None = None
    calculated_pps_fee: float | None = None
    calculated_refurb_fee: float | None = None
    calculated_marketplace_fee: float | None = None
