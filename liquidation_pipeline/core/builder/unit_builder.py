"""
Unit record building: one resolved extract row to one UnitRecord.
"""

from collections.abc import Mapping
from typing import Any

from liquidation_pipeline.core import fiscal_calendar
from liquidation_pipeline.core.fees import FeeLookupTable
from liquidation_pipeline.core.lifecycle import derive_stage
from liquidation_pipeline.core.models import CALCULATED_FEE_FIELDS, MILESTONE_FIELDS, UnitRecord
from liquidation_pipeline.core.parsing import clean_text, parse_bool, parse_date, parse_number
from liquidation_pipeline.core.schema import FieldCatalog


def effective_retail(upc_retail: float | None, category_average_retail: float | None) -> float | None:
    """Lower of the two retail figures, or whichever one is present."""
    present = [value for value in (upc_retail, category_average_retail) if value is not None]
    if not present:
        return None
    return min(present)


class UnitRecordBuilder:
    """
    Builds UnitRecords from rows keyed by logical field.

    Cell text is parsed according to each field's kind in the catalog;
    derived values (effective retail, gross sale, refund flag, fee total,
    fiscal position, current stage) are computed from the parsed values.
    Unparseable cells read as absent.
    """

    def __init__(self, fee_lookup: FeeLookupTable | None = None, catalog: FieldCatalog | None = None):
        self.fee_lookup = fee_lookup or FeeLookupTable()
        self.catalog = catalog or FieldCatalog()

    def build(self, fields: Mapping[str, str]) -> UnitRecord:
        """
        Args:
            fields: Logical field -> cell text; must carry a unit_id

        Returns:
            Frozen UnitRecord
        """
        values = self._parse_fields(fields)

        upc = values.get("upc")
        if upc:
            values["upc"] = upc.lstrip("'") or None

        values["effective_retail"] = effective_retail(
            values.get("upc_retail"), values.get("category_average_retail")
        )

        if values.get("gross_sale") is None:
            values["gross_sale"] = values.get("sale_price")

        refund = values.get("refund_amount")
        values["is_refunded"] = refund is not None and refund > 0

        self._apply_check_in_fallback(values)

        present_fees = [values[name] for name in CALCULATED_FEE_FIELDS if values.get(name) is not None]
        values["total_fees"] = sum(present_fees) if present_fees else None

        closed_on = values.get("order_closed_on")
        if closed_on is not None:
            values["fiscal_week"] = fiscal_calendar.week_number(closed_on)
            values["fiscal_day_of_week"] = fiscal_calendar.day_of_week(closed_on)

        values["current_stage"] = derive_stage(
            {stage: values.get(attr) for stage, attr in MILESTONE_FIELDS.items()}
        )
        return UnitRecord(**values)

    def _parse_fields(self, fields: Mapping[str, str]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for definition in self.catalog:
            if definition.name not in UnitRecord.model_fields:
                continue
            raw = fields.get(definition.name)
            if definition.kind == "identifier":
                values[definition.name] = (raw or "").strip()
            elif definition.kind == "number":
                values[definition.name] = parse_number(raw)
            elif definition.kind == "date":
                values[definition.name] = parse_date(raw)
            elif definition.kind == "bool":
                values[definition.name] = parse_bool(raw)
            else:
                values[definition.name] = clean_text(raw)
        return values

    def _apply_check_in_fallback(self, values: dict[str, Any]) -> None:
        # Invoiced fees are never overwritten; the lookup only fills a
        # missing calculated check-in fee.
        if values.get("check_in_fee") is not None or values.get("invoiced_check_in_fee") is not None:
            return
        category = values.get("category_name")
        program = values.get("program_name")
        if not category or not program:
            return
        fee = self.fee_lookup.lookup(category, program)
        if fee > 0:
            values["check_in_fee"] = fee
