"""
Secondary-store records derived from a UnitRecord.
"""

from uuid import UUID

from liquidation_pipeline.core.classification import derive_sales_channel, map_marketplace
from liquidation_pipeline.core.models import (
    INVOICED_FEE_FIELDS,
    FeeMetricRecord,
    SalesMetricRecord,
    UnitRecord,
)

# Calculated fee on the unit -> column on the sales metric
_SALES_CALCULATED_FEES = {
    "check_in_fee": "calculated_check_in_fee",
    "packaging_fee": "calculated_packaging_fee",
    "pick_pack_ship_fee": "calculated_pps_fee",
    "refurbishing_fee": "calculated_refurb_fee",
    "marketplace_fee": "calculated_marketplace_fee",
}

_SALES_INVOICE_FIELDS = INVOICED_FEE_FIELDS + (
    "service_invoice_total",
    "vendor_invoice_total",
    "expected_hv_as_is_refurb_fee",
)


def to_sales_metric(unit: UnitRecord, file_run_id: UUID | None = None) -> SalesMetricRecord | None:
    """
    Sales view of a unit; None unless the unit has an order closed date.
    """
    if unit.order_closed_on is None:
        return None

    values = {
        "unit_id": unit.unit_id,
        "file_run_id": file_run_id,
        "order_closed_on": unit.order_closed_on,
        "sale_price": unit.sale_price or 0.0,
        "discount_amount": unit.discount_amount,
        "gross_sale": unit.gross_sale or 0.0,
        "effective_retail": unit.effective_retail,
        "refund_amount": unit.refund_amount,
        "is_refunded": unit.is_refunded,
        "program_name": unit.program_name,
        "master_program_name": unit.master_program_name,
        "category_name": unit.category_name,
        "marketplace_sold_on": unit.marketplace_sold_on,
        "marketplace": map_marketplace(unit.marketplace_sold_on, unit.ebay_auction_sale, unit.b2c_auction),
        "sales_channel": derive_sales_channel(
            unit.marketplace_sold_on, unit.order_type_sold_on, unit.sorting_index
        ),
        "facility": unit.facility,
        "client_source": unit.client_source,
        "order_type_sold_on": unit.order_type_sold_on,
        "sorting_index": unit.sorting_index,
        "b2c_auction": unit.b2c_auction,
        "ebay_auction_sale": unit.ebay_auction_sale,
        "fiscal_week": unit.fiscal_week,
        "fiscal_day_of_week": unit.fiscal_day_of_week,
    }
    for name in _SALES_INVOICE_FIELDS:
        values[name] = getattr(unit, name)
    for unit_field, metric_field in _SALES_CALCULATED_FEES.items():
        values[metric_field] = getattr(unit, unit_field)

    return SalesMetricRecord(**values)


def to_fee_metric(unit: UnitRecord, file_run_id: UUID | None = None) -> FeeMetricRecord | None:
    """
    Fee view of a unit; None unless at least one calculated or invoiced
    fee is present.
    """
    if not unit.has_fees:
        return None

    invoiced = unit.invoiced_fees()
    return FeeMetricRecord(
        unit_id=unit.unit_id,
        file_run_id=file_run_id,
        check_in_fee=unit.check_in_fee,
        packaging_fee=unit.packaging_fee,
        pick_pack_ship_fee=unit.pick_pack_ship_fee,
        refurbishing_fee=unit.refurbishing_fee,
        marketplace_fee=unit.marketplace_fee,
        total_fees=unit.total_fees,
        invoiced_total_fees=sum(invoiced.values()) if invoiced else None,
        program_name=unit.program_name,
        category_name=unit.category_name,
        facility=unit.facility,
        fiscal_week=unit.fiscal_week,
    )
