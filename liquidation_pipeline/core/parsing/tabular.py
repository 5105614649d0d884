"""
Tabular field resolution: delimited text to logical-field rows.
"""

from datetime import date

from pydantic import BaseModel, Field

from liquidation_pipeline.core.models import FileCategory
from liquidation_pipeline.core.parsing.delimited import DelimitedTable, split_table
from liquidation_pipeline.core.parsing.filename import detect_file_category, parse_business_date
from liquidation_pipeline.core.rules import RuleEngine, identifier_rules
from liquidation_pipeline.core.schema import FieldCatalog, FieldResolver, ResolvedSchema
from liquidation_pipeline.observability.logger import get_logger

logger = get_logger(__name__)


class ParsedExtract(BaseModel):
    """
    Result of resolving one extract.

    Attributes:
        file_name: Name the extract was uploaded under
        file_category: Category detected from the file name
        business_date: Date embedded in the file name, if any
        rows: Accepted rows as logical field -> cell text
        total_rows: Data rows in the file (blank lines excluded)
        skipped_rows: Rows rejected by row-level rules
        skip_reasons: Skip count per reason
        matched_headers: Logical field -> literal header used
    """

    file_name: str
    file_category: FileCategory = "Unknown"
    business_date: date | None = None
    rows: list[dict[str, str]] = Field(default_factory=list)
    total_rows: int = 0
    skipped_rows: int = 0
    skip_reasons: dict[str, int] = Field(default_factory=dict)
    matched_headers: dict[str, str] = Field(default_factory=dict)


class TabularFieldResolver:
    """
    Turns a delimited table into rows keyed by logical field.

    Rows that fail the identifier rules are skipped and counted, never
    raised.
    """

    def __init__(
        self,
        catalog: FieldCatalog | None = None,
        strict: bool = False,
        delimiter: str | None = None,
        rules: RuleEngine | None = None,
    ):
        self.resolver = FieldResolver(catalog)
        self.rules = rules or identifier_rules(strict=strict)
        self.delimiter = delimiter

    def split(self, text: str) -> DelimitedTable:
        return split_table(text, delimiter=self.delimiter)

    def parse(self, text: str, file_name: str) -> ParsedExtract:
        return self.resolve(self.split(text), file_name)

    def resolve(self, table: DelimitedTable, file_name: str) -> ParsedExtract:
        """
        Resolve headers and extract accepted rows.

        Args:
            table: Split extract
            file_name: Original file name (category and business date)

        Returns:
            ParsedExtract with accepted rows and skip counts
        """
        schema = self.resolver.resolve(table.headers)
        extract = ParsedExtract(
            file_name=file_name,
            file_category=detect_file_category(file_name),
            business_date=parse_business_date(file_name),
            total_rows=table.row_count,
            matched_headers=dict(schema.matched_headers),
        )

        for raw in table.rows:
            row = self._row_fields(table, schema, raw)
            reason = self.rules.check(row)
            if reason is not None:
                extract.skipped_rows += 1
                extract.skip_reasons[reason] = extract.skip_reasons.get(reason, 0) + 1
                continue
            extract.rows.append(row)

        if extract.skipped_rows:
            logger.warning(
                f"Skipped {extract.skipped_rows} of {extract.total_rows} rows in {file_name}",
                extra={"file_name": file_name, "skip_reasons": extract.skip_reasons},
            )
        return extract

    @staticmethod
    def _row_fields(table: DelimitedTable, schema: ResolvedSchema, raw: list[str]) -> dict[str, str]:
        return {name: table.cell(raw, index) for name, index in schema.columns.items()}
