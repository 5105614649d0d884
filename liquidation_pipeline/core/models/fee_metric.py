"""
FeeMetricRecord model: fee-side view of a unit that carries any fee.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FeeMetricRecord(BaseModel):
    """
    Attributes:
        unit_id: Natural key, replaced wholesale by later runs
        check_in_fee .. marketplace_fee: Calculated fee components
        total_fees: Sum of present calculated components
        invoiced_total_fees: Sum of present invoiced components
    """

    model_config = ConfigDict(frozen=True)

    unit_id: str = Field(..., min_length=1)
    file_run_id: UUID | None = None

    check_in_fee: float | None = None
    packaging_fee: float | None = None
    pick_pack_ship_fee: float | None = None
    refurbishing_fee: float | None = None
    marketplace_fee: float | None = None
    total_fees: float | None = None
    invoiced_total_fees: float | None = None

    program_name: str | None = None
    category_name: str | None = None
    facility: str | None = None
    fiscal_week: int | None = Field(None, ge=1, le=53)
