"""
Unit tests for the field catalog, header resolution and tabular field resolution.
"""

import pytest

from liquidation_pipeline.core.parsing import TabularFieldResolver
from liquidation_pipeline.core.schema import (
    IDENTIFIER_FIELD,
    FieldCatalog,
    FieldCatalogLoader,
    FieldDefinition,
    FieldResolver,
    normalize_header,
)
from liquidation_pipeline.core.models import UnitRecord


class TestFieldCatalog:
    """Tests for the logical field catalog"""

    def test_default_catalog_covers_unit_inputs(self):
        catalog = FieldCatalog()

        assert IDENTIFIER_FIELD in catalog
        for name in catalog.names():
            assert name in UnitRecord.model_fields

    def test_identifier_candidates_in_precedence_order(self):
        assert FieldCatalog().candidates(IDENTIFIER_FIELD)[0] == "TRGID"

    def test_names_by_kind(self):
        catalog = FieldCatalog()

        assert "order_closed_on" in catalog.names("date")
        assert "sale_price" in catalog.names("number")
        assert catalog.names("identifier") == [IDENTIFIER_FIELD]

    def test_with_overrides_returns_new_catalog(self):
        base = FieldCatalog()
        updated = base.with_overrides({"facility": ["Warehouse", "Facility"]})

        assert updated.candidates("facility") == ("Warehouse", "Facility")
        assert base.candidates("facility") == ("Tag_Facility", "Facility")

    def test_unknown_override_rejected(self):
        with pytest.raises(ValueError) as exc_info:
            FieldCatalog().with_overrides({"colour": ["Color"]})
        assert "colour" in str(exc_info.value)

    def test_empty_override_rejected(self):
        with pytest.raises(ValueError):
            FieldCatalog().with_overrides({"facility": []})

    def test_catalog_requires_identifier(self):
        with pytest.raises(ValueError):
            FieldCatalog([FieldDefinition(name="title", kind="text", candidates=("Title",))])

    def test_duplicate_definitions_rejected(self):
        fields = [
            FieldDefinition(name=IDENTIFIER_FIELD, kind="identifier", candidates=("TRGID",)),
            FieldDefinition(name=IDENTIFIER_FIELD, kind="identifier", candidates=("ID",)),
        ]
        with pytest.raises(ValueError):
            FieldCatalog(fields)


class TestFieldCatalogLoader:
    """Tests for YAML header overrides"""

    def test_load_catalog_from_yaml(self, tmp_path):
        config = tmp_path / "fields.yaml"
        config.write_text(
            "fields:\n"
            "  unit_id: [TRGID, Unit Number]\n"
            "  received_on:\n"
            "    - Received Date\n"
        )

        catalog = FieldCatalogLoader(config).load_catalog()

        assert catalog.candidates(IDENTIFIER_FIELD) == ("TRGID", "Unit Number")
        assert catalog.candidates("received_on") == ("Received Date",)

    def test_single_string_is_one_candidate(self, tmp_path):
        config = tmp_path / "fields.yaml"
        config.write_text("fields:\n  facility: Warehouse\n")

        assert FieldCatalogLoader(config).load_overrides() == {"facility": ["Warehouse"]}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FieldCatalogLoader(tmp_path / "absent.yaml")

    def test_malformed_section(self, tmp_path):
        config = tmp_path / "fields.yaml"
        config.write_text("fields:\n  - unit_id\n")

        with pytest.raises(ValueError):
            FieldCatalogLoader(config).load_overrides()


class TestFieldResolver:
    """Tests for header resolution"""

    def test_normalize_header(self):
        assert normalize_header("Tag_Facility") == "tagfacility"
        assert normalize_header("TRG-ID") == "trgid"
        assert normalize_header("  Sale Price ") == "saleprice"

    def test_first_candidate_wins(self):
        schema = FieldResolver().resolve(["Program Name", "ProgramName"])

        assert schema.index_of("program_name") == 1
        assert schema.matched_headers["program_name"] == "ProgramName"

    def test_normalized_match(self):
        schema = FieldResolver().resolve(["trg id", "tag facility"])

        assert schema.index_of(IDENTIFIER_FIELD) == 0
        assert schema.index_of("facility") == 1

    def test_exact_match_beats_earlier_normalized_candidate(self):
        """Test an exact later candidate is preferred over a normalized earlier one"""
        schema = FieldResolver().resolve(["Sale_Price", "Sale Price"])

        assert schema.index_of("sale_price") == 1

    def test_duplicate_header_uses_leftmost_column(self):
        schema = FieldResolver().resolve(["TRGID", "Title", "TRGID"])
        assert schema.index_of(IDENTIFIER_FIELD) == 0

    def test_absent_fields_are_omitted(self):
        schema = FieldResolver().resolve(["TRGID"])

        assert schema.has(IDENTIFIER_FIELD)
        assert not schema.has("order_closed_on")
        assert schema.index_of("order_closed_on") is None

    def test_unknown_headers_ignored(self):
        schema = FieldResolver().resolve(["Whatever", "TRGID"])
        assert schema.columns == {IDENTIFIER_FIELD: 1}


class TestTabularFieldResolver:
    """Tests for turning delimited text into logical-field rows"""

    def test_parse_extract(self):
        text = "TRGID,Title,OrderClosedDate\n1001,Lamp,02/01/2025\n,Chair,\n1002,Desk,\n"

        extract = TabularFieldResolver().parse(text, "Sales 02.01.25.csv")

        assert extract.file_category == "Sales"
        assert extract.business_date.isoformat() == "2025-02-01"
        assert extract.total_rows == 3
        assert extract.skipped_rows == 1
        assert extract.skip_reasons == {"missing_identifier": 1}
        assert [row[IDENTIFIER_FIELD] for row in extract.rows] == ["1001", "1002"]
        assert extract.rows[0]["order_closed_on"] == "02/01/2025"
        assert extract.matched_headers[IDENTIFIER_FIELD] == "TRGID"

    def test_strict_mode_skips_non_numeric_identifiers(self):
        text = "TRGID,Title\n1001,Lamp\nABC-1,Chair\n  ,Desk\n"

        extract = TabularFieldResolver(strict=True).parse(text, "Inbound.csv")

        assert [row[IDENTIFIER_FIELD] for row in extract.rows] == ["1001"]
        assert extract.skip_reasons == {"malformed_identifier": 1, "missing_identifier": 1}

    def test_lenient_mode_keeps_any_identifier(self):
        extract = TabularFieldResolver().parse("TRGID\nABC-1\n", "Inbound.csv")
        assert extract.rows == [{IDENTIFIER_FIELD: "ABC-1"}]

    def test_missing_identifier_column_skips_every_row(self):
        extract = TabularFieldResolver().parse("Title\nLamp\nChair\n", "Inbound.csv")

        assert extract.rows == []
        assert extract.skip_reasons == {"missing_identifier": 2}
        assert IDENTIFIER_FIELD not in extract.matched_headers

    def test_custom_catalog(self):
        catalog = FieldCatalog().with_overrides({IDENTIFIER_FIELD: ["Unit Number"]})

        extract = TabularFieldResolver(catalog).parse("Unit Number;Title\n77;Lamp\n", "Inbound.csv")

        assert extract.rows[0][IDENTIFIER_FIELD] == "77"
        assert extract.rows[0]["title"] == "Lamp"
