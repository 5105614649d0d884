"""
Header resolution: maps logical fields onto the columns of one file.
"""

import re

from pydantic import BaseModel, Field

from liquidation_pipeline.core.schema.field_catalog import FieldCatalog
from liquidation_pipeline.observability.logger import get_logger

logger = get_logger(__name__)

_IGNORED_HEADER_CHARS = re.compile(r"[\s_-]")


def normalize_header(header: str) -> str:
    """Lowercase with whitespace, underscores and hyphens removed."""
    return _IGNORED_HEADER_CHARS.sub("", header.lower())


class ResolvedSchema(BaseModel):
    """
    Column index per logical field for one file.

    Attributes:
        columns: Logical field -> column index; absent fields are omitted
        matched_headers: Logical field -> literal header that matched
    """

    columns: dict[str, int] = Field(default_factory=dict)
    matched_headers: dict[str, str] = Field(default_factory=dict)

    def has(self, field_name: str) -> bool:
        return field_name in self.columns

    def index_of(self, field_name: str) -> int | None:
        return self.columns.get(field_name)


class FieldResolver:
    """
    Resolves a header row against a FieldCatalog.

    For each logical field, candidates are first tried as exact literal
    headers in precedence order, then as normalized headers in the same
    order. The first hit wins. When a file repeats a header, the leftmost
    column is used.
    """

    def __init__(self, catalog: FieldCatalog | None = None):
        self.catalog = catalog or FieldCatalog()

    def resolve(self, headers: list[str]) -> ResolvedSchema:
        exact: dict[str, int] = {}
        normalized: dict[str, int] = {}
        for index, header in enumerate(headers):
            exact.setdefault(header, index)
            normalized.setdefault(normalize_header(header), index)

        schema = ResolvedSchema()
        for definition in self.catalog:
            index = self._match(definition.candidates, exact, normalized)
            if index is not None:
                schema.columns[definition.name] = index
                schema.matched_headers[definition.name] = headers[index]

        absent = [name for name in self.catalog.names() if name not in schema.columns]
        logger.debug(
            f"Resolved {len(schema.columns)} of {len(self.catalog)} logical fields",
            extra={"resolved": schema.matched_headers, "absent": absent},
        )
        return schema

    @staticmethod
    def _match(
        candidates: tuple[str, ...],
        exact: dict[str, int],
        normalized: dict[str, int],
    ) -> int | None:
        for candidate in candidates:
            if candidate in exact:
                return exact[candidate]
        for candidate in candidates:
            key = normalize_header(candidate)
            if key in normalized:
                return normalized[key]
        return None
