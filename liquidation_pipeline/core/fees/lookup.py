"""
Check-in fee lookup table.

Maps category + program to a flat base check-in fee. The table is read on
every unit build and replaced wholesale when a new fee sheet arrives.
"""

import threading
from collections.abc import Iterable, Mapping

from liquidation_pipeline.core.fees.defaults import DEFAULT_CHECKIN_FEES
from liquidation_pipeline.core.parsing import parse_number, split_table
from liquidation_pipeline.core.schema import normalize_header
from liquidation_pipeline.observability.logger import get_logger
from liquidation_pipeline.warehouse.store import CHECKIN_FEE_LOOKUP, UnitStore

logger = get_logger(__name__)

# Normalized column names of a fee sheet
_CATEGORY = "category"
_PROGRAM = "program"
_KEY = "key"
_PRICE = "price"


def fee_key(category: str, program: str) -> str:
    return f"{category}{program}"


class FeeLookupTable:
    """
    Category/program to base check-in fee, safe to share between runs.

    Readers always see one complete table: reloads build a new dict and
    swap it in under a lock.
    """

    def __init__(self, entries: Mapping[str, float] | None = None):
        self._lock = threading.Lock()
        self._fees: dict[str, float] = dict(DEFAULT_CHECKIN_FEES if entries is None else entries)

    def __len__(self) -> int:
        return len(self._fees)

    def lookup(self, category: str | None, program: str | None) -> float:
        """
        Base fee for a category/program pair.

        Returns:
            The fee, or 0.0 when either part is blank or the pair is unknown
        """
        if not category or not program:
            return 0.0
        return self._fees.get(fee_key(category, program), 0.0)

    def contains(self, category: str | None, program: str | None) -> bool:
        if not category or not program:
            return False
        return fee_key(category, program) in self._fees

    def snapshot(self) -> dict[str, float]:
        return dict(self._fees)

    def reload(self, entries: Mapping[str, float]) -> None:
        """Replace the whole table."""
        fresh = {str(key): float(price) for key, price in entries.items()}
        with self._lock:
            self._fees = fresh
        logger.info(f"Fee lookup reloaded with {len(fresh)} entries")

    def reload_from_rows(self, rows: Iterable[Mapping[str, object]]) -> int:
        """
        Replace the table from fee-sheet rows.

        Rows carry Category, Program, BasePriceType, Key and Price columns
        (any header spelling that normalizes to those names). The Key column
        is used when present, else category + program. Rows whose price is
        missing, unparseable or not positive are dropped.

        Args:
            rows: Mappings of column name to value

        Returns:
            Number of entries loaded
        """
        fresh: dict[str, float] = {}
        dropped = 0
        for row in rows:
            fields = {normalize_header(str(name)): value for name, value in row.items()}

            price_value = fields.get(_PRICE)
            price = parse_number(None if price_value is None else str(price_value))
            key = str(fields.get(_KEY) or "").strip()
            if not key:
                category = str(fields.get(_CATEGORY) or "").strip()
                program = str(fields.get(_PROGRAM) or "").strip()
                if category and program:
                    key = fee_key(category, program)

            if not key or price is None or price <= 0:
                dropped += 1
                continue
            fresh[key] = price

        self.reload(fresh)
        if dropped:
            logger.warning(f"Dropped {dropped} fee rows without a usable key or price")
        return len(fresh)

    def load_csv(self, text: str) -> int:
        """Replace the table from fee-sheet CSV text."""
        table = split_table(text)
        rows = (
            {header: table.cell(raw, index) for index, header in enumerate(table.headers)}
            for raw in table.rows
        )
        return self.reload_from_rows(rows)

    def load_from_store(self, store: UnitStore) -> int:
        """Replace the table from the store's fee lookup rows."""
        return self.reload_from_rows(store.read_rows(CHECKIN_FEE_LOOKUP))
