"""Tests for configuration schemas."""

import pytest

from sirf_table_reader.schemas.config import DEFAULT_HEADER_KEYWORDS, ExtractionConfig
from sirf_table_reader.schemas.document import ColumnDefinition, LabelPattern
from sirf_table_reader.schemas.sirf import SIRF_COLUMNS, SIRF_METADATA_FIELDS


class TestExtractionConfig:
    """Test suite for ExtractionConfig."""

    def test_defaults(self):
        config = ExtractionConfig()

        assert config.row_tolerance == 0.6
        assert config.column_margin == 2.0
        assert config.column_sentinel == 1000.0
        assert config.projection_resolution == 10
        assert config.header_keywords == DEFAULT_HEADER_KEYWORDS
        assert config.strategy == "auto"

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            ExtractionConfig(strategy="magic")

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            ExtractionConfig(projection_resolution=0)

    def test_with_overrides_returns_new_config(self):
        base = ExtractionConfig()
        tuned = base.with_overrides(row_tolerance=0.8)

        assert tuned.row_tolerance == 0.8
        assert base.row_tolerance == 0.6


class TestFromEnv:
    """Test suite for ExtractionConfig.from_env."""

    def test_empty_environment(self):
        assert ExtractionConfig.from_env({}) == ExtractionConfig()

    def test_typed_values(self):
        config = ExtractionConfig.from_env({
            "SIRF_ROW_TOLERANCE": "0.8",
            "SIRF_MIN_ACTIVE_COLUMNS": "4",
            "SIRF_NEAREST_LABEL_CANDIDATE": "yes",
            "SIRF_DYNAMIC_FALLBACK": "false",
            "SIRF_HEADER_KEYWORDS": "Code, Qty ,,Item",
            "SIRF_STRATEGY": "dynamic",
        })

        assert config.row_tolerance == 0.8
        assert config.min_active_columns == 4
        assert config.nearest_label_candidate is True
        assert config.dynamic_fallback is False
        assert config.header_keywords == ("code", "qty", "item")
        assert config.strategy == "dynamic"

    def test_blank_values_are_ignored(self):
        assert ExtractionConfig.from_env({"SIRF_ROW_TOLERANCE": "  "}).row_tolerance == 0.6

    def test_overrides_win_over_environment(self):
        config = ExtractionConfig.from_env({"SIRF_STRATEGY": "dynamic"}, strategy="fixed")
        assert config.strategy == "fixed"

    @pytest.mark.parametrize(
        "key,value",
        [
            ("SIRF_ROW_TOLERANCE", "wide"),
            ("SIRF_PROJECTION_RESOLUTION", "1.5"),
            ("SIRF_DYNAMIC_FALLBACK", "maybe"),
        ],
    )
    def test_invalid_values_name_the_variable(self, key, value):
        with pytest.raises(ValueError, match=key):
            ExtractionConfig.from_env({key: value})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("SIRF_HEADER_SKIP", "3")
        assert ExtractionConfig.from_env().header_skip == 3.0


class TestSirfLayout:
    """Test suite for the SIRF layout definitions."""

    def test_metadata_field_names(self):
        assert [f.name for f in SIRF_METADATA_FIELDS] == [
            "Request Date", "Need by Date", "Req. No", "Project Code", "Project Name",
            "Site ID", "Site Name", "Requesting Dept", "REG", "Project Mgr",
        ]

    def test_single_table_start_column(self):
        assert [c.id for c in SIRF_COLUMNS if c.table_start] == ["item_code"]

    @pytest.mark.parametrize(
        "text,column",
        [
            ("Item Code", "item_code"),
            ("CODE", "item_code"),
            ("S. No.", "s_no"),
            ("U.O.M", "uom"),
            ("Qty Req.", "qty_requested"),
            ("Quantity Requested", "qty_requested"),
            ("Qty Issued", "qty_issued"),
            ("Remark", "remarks"),
        ],
    )
    def test_header_variants(self, text, column):
        matched = [c.id for c in SIRF_COLUMNS if c.label.matches(text)]
        assert matched == [column]

    def test_column_header_defaults_to_id(self):
        definition = ColumnDefinition("batch", LabelPattern.of("Batch"))
        assert definition.header == "batch"
