"""Unit tests for the deterministic extraction strategies."""

from jobsheet_extraction.extraction.strategies import (
    DETERMINISTIC_STRATEGIES,
    PRESENT_VALUE,
    extract_with_context,
    extract_with_fuzzy,
    extract_with_pattern,
)
from jobsheet_extraction.schemas.extraction_result import StrategyName


class TestPatternStrategy:
    """Tests for ordered regex patterns."""

    def test_generic_pattern_confidence(self, job_sheet_spec):
        result = extract_with_pattern("Job No: 4821", job_sheet_spec.get_field("job_no"))
        assert result.value == "4821"
        assert result.confidence == 75.0
        assert result.strategy == StrategyName.REGEX
        assert result.evidence.startswith("Pattern matched: ")
        assert result.evidence.endswith("...")

    def test_specific_pattern_confidence(self, job_sheet_spec):
        # Asset pattern source is longer than 50 characters
        result = extract_with_pattern("Asset No: AB-1234", job_sheet_spec.get_field("asset_no"))
        assert result.value == "AB-1234"
        assert result.confidence == 85.0

    def test_case_insensitive(self, job_sheet_spec):
        result = extract_with_pattern("JOB NO: 77", job_sheet_spec.get_field("job_no"))
        assert result.value == "77"

    def test_first_matching_pattern_wins(self, job_sheet_spec):
        text = "Work Order: 555\nJob No: 4821"
        result = extract_with_pattern(text, job_sheet_spec.get_field("job_no"))
        assert result.value == "4821"

    def test_later_pattern_used_when_earlier_miss(self, job_sheet_spec):
        result = extract_with_pattern("Work Order: 555", job_sheet_spec.get_field("job_no"))
        assert result.value == "555"

    def test_value_is_raw(self, job_sheet_spec):
        result = extract_with_pattern("Date: 15/01/2024", job_sheet_spec.get_field("date"))
        assert result.value == "15/01/2024"

    def test_no_match_is_null(self, job_sheet_spec):
        result = extract_with_pattern("nothing here", job_sheet_spec.get_field("job_no"))
        assert result.value is None
        assert result.confidence == 0.0

    def test_signature_label_yields_present(self, job_sheet_spec):
        result = extract_with_pattern(
            "Technician Signature", job_sheet_spec.get_field("technician_signature")
        )
        assert result.value == PRESENT_VALUE
        assert result.confidence == 75.0

    def test_signed_by_captures_value(self, job_sheet_spec):
        result = extract_with_pattern(
            "Signed By: J Smith", job_sheet_spec.get_field("technician_signature")
        )
        assert result.value == "J Smith"


class TestFuzzyStrategy:
    """Tests for fuzzy label matching on 'label: value' lines."""

    def test_exact_label_capped_at_80(self, job_sheet_spec):
        result = extract_with_fuzzy("Job No: 4821", job_sheet_spec.get_field("job_no"))
        assert result.value == "4821"
        assert result.confidence == 80.0
        assert result.strategy == StrategyName.FUZZY

    def test_misspelled_label(self, job_sheet_spec):
        # "Custmer Name" is one deletion away from "Customer Name"
        result = extract_with_fuzzy("Custmer Name: Acme", job_sheet_spec.get_field("customer_name"))
        assert result.value == "Acme"
        assert 70.0 <= result.confidence <= 80.0

    def test_dissimilar_label_ignored(self, job_sheet_spec):
        result = extract_with_fuzzy("Weather: sunny", job_sheet_spec.get_field("job_no"))
        assert result.value is None

    def test_empty_value_ignored(self, job_sheet_spec):
        result = extract_with_fuzzy("Job No:   ", job_sheet_spec.get_field("job_no"))
        assert result.value is None

    def test_multi_colon_line_keeps_second_segment(self, make_spec):
        spec = make_spec({"name": "time", "display_name": "Time", "fuzzy_labels": ["Time"]})
        result = extract_with_fuzzy("Time: 10:30", spec.get_field("time"))
        assert result.value == "10"

    def test_lines_without_colon_skipped(self, job_sheet_spec):
        result = extract_with_fuzzy("Job No 4821", job_sheet_spec.get_field("job_no"))
        assert result.value is None


class TestContextStrategy:
    """Tests for label-in-line context extraction."""

    def test_same_line_value(self, job_sheet_spec):
        result = extract_with_context("The Job No: 4821", job_sheet_spec.get_field("job_no"))
        assert result.value == "4821"
        assert result.confidence == 70.0
        assert result.strategy == StrategyName.CONTEXT

    def test_next_line_value(self, make_spec):
        spec = make_spec({"name": "ref", "display_name": "Reference", "fuzzy_labels": ["Reference"]})
        result = extract_with_context("Reference\nABC123", spec.get_field("ref"))
        assert result.value == "ABC123"
        assert result.confidence == 60.0

    def test_next_line_with_colon_rejected(self, make_spec):
        spec = make_spec({"name": "ref", "display_name": "Reference", "fuzzy_labels": ["Reference"]})
        result = extract_with_context("Reference\nOther: thing", spec.get_field("ref"))
        assert result.value is None

    def test_label_on_last_line(self, make_spec):
        spec = make_spec({"name": "ref", "display_name": "Reference", "fuzzy_labels": ["Reference"]})
        result = extract_with_context("Reference", spec.get_field("ref"))
        assert result.value is None


class TestStrategyRegistry:

    def test_priority_order(self):
        assert DETERMINISTIC_STRATEGIES == (
            extract_with_pattern,
            extract_with_fuzzy,
            extract_with_context,
        )

    def test_strategies_never_raise_on_empty_text(self, job_sheet_spec):
        for field in job_sheet_spec.fields:
            for strategy in DETERMINISTIC_STRATEGIES:
                assert strategy("", field).value is None
