"""Tests for label-anchored metadata lookup."""

from sirf_table_reader.core.labels import extract_metadata, find_value
from sirf_table_reader.schemas.config import ExtractionConfig
from sirf_table_reader.schemas.document import LabelPattern, MetadataField
from sirf_table_reader.schemas.fragment import TextFragment
from sirf_table_reader.schemas.sirf import SIRF_METADATA_FIELDS

REQUEST_DATE = LabelPattern.of(r"Request\s*Date")
PROJECT_NAME = LabelPattern.of(r"Project\s*Name", right_only=False)


class TestFindValue:
    """Test suite for find_value."""

    def test_value_right_of_label(self) -> None:
        """The value on the label's line, to its right, is returned."""
        fragments = [
            TextFragment(2, 4.0, "Request Date"),
            TextFragment(8, 4.1, "2024-01-01"),
        ]

        assert find_value(fragments, REQUEST_DATE) == "2024-01-01"

    def test_label_not_found(self) -> None:
        """A missing label yields an empty string."""
        assert find_value([TextFragment(8, 4, "2024-01-01")], REQUEST_DATE) == ""

    def test_no_value_on_line(self) -> None:
        """A label with nothing to its right yields an empty string."""
        fragments = [
            TextFragment(8, 4.0, "Request Date"),
            TextFragment(2, 4.0, "left of label"),
            TextFragment(8.5, 4.0, "too close"),
        ]

        assert find_value(fragments, REQUEST_DATE) == ""

    def test_other_lines_ignored_for_right_search(self) -> None:
        """Fragments a full line away are not same-line candidates."""
        fragments = [
            TextFragment(2, 4.0, "Request Date"),
            TextFragment(8, 5.0, "next line"),
        ]

        assert find_value(fragments, REQUEST_DATE) == ""

    def test_first_matching_label_wins(self) -> None:
        """Only the first fragment matching the label pattern is used."""
        fragments = [
            TextFragment(2, 4.0, "Request Date"),
            TextFragment(8, 4.0, "first"),
            TextFragment(2, 20.0, "Request Date"),
            TextFragment(8, 20.0, "second"),
        ]

        assert find_value(fragments, REQUEST_DATE) == "first"

    def test_below_search(self) -> None:
        """Right-or-below labels fall back to the fragment under them."""
        fragments = [
            TextFragment(5, 10.0, "Project Name"),
            TextFragment(6, 12.0, "Tower Upgrade"),
        ]

        assert find_value(fragments, PROJECT_NAME) == "Tower Upgrade"

    def test_right_only_skips_below_search(self) -> None:
        """Right-only labels never look below."""
        fragments = [
            TextFragment(5, 10.0, "Project Name"),
            TextFragment(6, 12.0, "Tower Upgrade"),
        ]

        assert find_value(fragments, PROJECT_NAME, right_only=True) == ""

    def test_right_preferred_over_below(self) -> None:
        """A same-line value wins over one below."""
        fragments = [
            TextFragment(5, 10.0, "Project Name"),
            TextFragment(6, 12.0, "below"),
            TextFragment(15, 10.0, "right"),
        ]

        assert find_value(fragments, PROJECT_NAME) == "right"

    def test_below_window_limits(self) -> None:
        """Candidates below must be within the vertical and horizontal window."""
        fragments = [
            TextFragment(5, 10.0, "Project Name"),
            TextFragment(6, 14.0, "too low"),
            TextFragment(20, 12.0, "too far right"),
        ]

        assert find_value(fragments, PROJECT_NAME) == ""

    def test_first_candidate_in_enumeration_order(self) -> None:
        """By default the first candidate in enumeration order is returned."""
        fragments = [
            TextFragment(5, 10.0, "Request Date"),
            TextFragment(30, 10.0, "far"),
            TextFragment(12, 10.0, "near"),
        ]

        assert find_value(fragments, REQUEST_DATE) == "far"

    def test_nearest_candidate_option(self) -> None:
        """nearest_label_candidate picks the closest candidate instead."""
        fragments = [
            TextFragment(5, 10.0, "Request Date"),
            TextFragment(30, 10.0, "far"),
            TextFragment(12, 10.0, "near"),
        ]
        config = ExtractionConfig(nearest_label_candidate=True)

        assert find_value(fragments, REQUEST_DATE, config=config) == "near"

    def test_deterministic(self) -> None:
        """Repeated lookups over the same input give the same value."""
        fragments = [
            TextFragment(2, 4.0, "Request Date"),
            TextFragment(8, 4.0, "2024-01-01"),
            TextFragment(20, 4.2, "other"),
        ]

        results = {find_value(fragments, REQUEST_DATE) for _ in range(5)}

        assert results == {"2024-01-01"}

    def test_case_insensitive_label(self) -> None:
        """Label patterns match regardless of case."""
        fragments = [
            TextFragment(2, 4.0, "REQUEST DATE:"),
            TextFragment(8, 4.0, "2024-01-01"),
        ]

        assert find_value(fragments, REQUEST_DATE) == "2024-01-01"


class TestExtractMetadata:
    """Test suite for extract_metadata."""

    def test_sirf_fields(self, sirf_pages, expected_sirf_metadata) -> None:
        """All SIRF fields are found on the sample form."""
        metadata = extract_metadata(sirf_pages, SIRF_METADATA_FIELDS)

        assert metadata == expected_sirf_metadata

    def test_pools_all_pages(self) -> None:
        """Labels on later pages are found too."""
        pages = [
            [TextFragment(1, 1, "unrelated")],
            [TextFragment(2, 4, "Request Date"), TextFragment(8, 4, "2024-01-01")],
        ]
        fields = [MetadataField("Request Date", REQUEST_DATE)]

        assert extract_metadata(pages, fields) == {"Request Date": "2024-01-01"}

    def test_empty_document(self) -> None:
        """Every field maps to an empty string when there is no text."""
        metadata = extract_metadata([], SIRF_METADATA_FIELDS)

        assert list(metadata) == [f.name for f in SIRF_METADATA_FIELDS]
        assert set(metadata.values()) == {""}
