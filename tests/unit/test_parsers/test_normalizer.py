"""
Unit tests for the holdings normalizer.

Tests:
1. Lenient numeric coercion
2. Header row detection
3. Row extraction and column mapping
4. Row acceptance (scheme name required)
"""

import pytest
from decimal import Decimal

from mfpa.parsers.models import Holding
from mfpa.parsers.normalizer import (
    HoldingsNormalizer,
    clean_text,
    find_header_row,
    normalize,
    parse_lenient_number,
)


# ============================================================================
# Test 1: Lenient numeric coercion
# ============================================================================

class TestParseLenientNumber:
    """Test parse_lenient_number zero-fallback policy."""

    @pytest.mark.parametrize("raw, expected", [
        ("1,25,000.50", Decimal("125000.50")),
        ("  -1,000 ", Decimal("-1000")),
        ('"2,500"', Decimal("2500")),
        ("12.5abc", Decimal("12.5")),
        (".5", Decimal("0.5")),
        (4500, Decimal("4500")),
        (22.1, Decimal("22.1")),
    ])
    def test_parses_numbers(self, raw, expected):
        assert parse_lenient_number(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "   ", "n/a", "Rs. 100", "Infinity", "1e400",
        float("nan"), float("inf"), Decimal("NaN"), True,
    ])
    def test_unparseable_becomes_zero(self, raw):
        assert parse_lenient_number(raw) == Decimal("0")

    def test_percent_stripped_when_requested(self):
        assert parse_lenient_number("15.5%", strip_percent=True) == Decimal("15.5")
        assert parse_lenient_number("%", strip_percent=True) == Decimal("0")

    def test_result_is_always_finite(self):
        for raw in ["abc", "1,2,3", "-", "+.", "NaN", "-inf"]:
            assert parse_lenient_number(raw).is_finite()


class TestCleanText:
    """Test cell text cleanup."""

    def test_trims_and_unquotes(self):
        assert clean_text('  "Scheme Name"  ') == "Scheme Name"

    def test_strips_only_one_layer(self):
        assert clean_text('""x""') == '"x"'

    def test_integral_float_has_no_decimal_suffix(self):
        assert clean_text(12345.0) == "12345"

    def test_missing_values(self):
        assert clean_text(None) == ""
        assert clean_text(float("nan")) == ""


# ============================================================================
# Test 2: Header detection
# ============================================================================

class TestHeaderDetection:
    """Test header row detection."""

    def test_header_after_preamble(self, statement_grid):
        assert find_header_row(statement_grid) == 2

    def test_case_insensitive_markers(self):
        grid = [["SCHEME NAME", "CURRENT VALUE"]]
        assert find_header_row(grid) == 0

    def test_both_markers_required(self):
        grid = [["Scheme Name", "Units"], ["Current Value"]]
        assert find_header_row(grid) is None

    def test_no_header_yields_empty(self):
        grid = [["Fund", "Value"], ["X", "100"]]
        assert normalize(grid) == []

    def test_empty_grid(self):
        assert normalize([]) == []


# ============================================================================
# Test 3: Row extraction and mapping
# ============================================================================

class TestRowExtraction:
    """Test conversion of data rows to holdings."""

    def test_statement_grid(self, statement_grid):
        holdings = normalize(statement_grid)

        assert [h.scheme_name for h in holdings] == [
            "HDFC Top 100 Fund",
            "SBI Small Cap Fund",
            "Nippon India Small Cap",
        ]

        hdfc = holdings[0]
        assert hdfc.category == "Equity"
        assert hdfc.sub_category == "Large Cap"
        assert hdfc.amc == "HDFC Mutual Fund"
        assert hdfc.units == Decimal("500")
        assert hdfc.invested_value == Decimal("50000")
        assert hdfc.current_value == Decimal("75000")
        assert hdfc.returns == Decimal("25000")
        assert hdfc.xirr == Decimal("15.5")

    def test_numeric_cells_pass_through(self, statement_grid):
        sbi = normalize(statement_grid)[1]
        assert sbi.units == Decimal("200")
        assert sbi.xirr == Decimal("22.1")

    def test_missing_text_fields_default_to_other(self, statement_grid):
        nippon = normalize(statement_grid)[2]
        assert nippon.amc == "Other"
        assert nippon.xirr == Decimal("0")

    def test_unknown_columns_kept_in_extra(self, statement_grid):
        hdfc = normalize(statement_grid)[0]
        assert hdfc.extra == {"Folio": "1234/56"}

    def test_minimal_header(self):
        grid = [["Scheme Name", "Current Value"], ["X", "4,500"]]
        holdings = normalize(grid)

        assert len(holdings) == 1
        h = holdings[0]
        assert h.scheme_name == "X"
        assert h.current_value == Decimal("4500")
        assert h.invested_value == Decimal("0")
        assert h.units == Decimal("0")
        assert h.category == "Other"

    def test_quoted_headers(self):
        grid = [['"Scheme Name"', '"Current Value"'], ["Y", "1000"]]
        holdings = normalize(grid)
        assert holdings[0].current_value == Decimal("1000")

    def test_short_rows_skipped(self):
        grid = [
            ["Scheme Name", "Current Value"],
            ["Grand Total"],
            [],
            ["Z", "100"],
        ]
        holdings = normalize(grid)
        assert [h.scheme_name for h in holdings] == ["Z"]

    def test_row_shorter_than_header(self):
        grid = [["Scheme Name", "Units", "Current Value", "XIRR"], ["Q", "10"]]
        h = normalize(grid)[0]
        assert h.units == Decimal("10")
        assert h.current_value == Decimal("0")
        assert h.xirr == Decimal("0")

    def test_holdings_are_immutable(self):
        h = normalize([["Scheme Name", "Current Value"], ["X", "1"]])[0]
        with pytest.raises(AttributeError):
            h.current_value = Decimal("2")

    def test_extra_columns_are_read_only(self, statement_grid):
        hdfc = normalize(statement_grid)[0]
        with pytest.raises(TypeError):
            hdfc.extra["Folio"] = "changed"
        assert hdfc.extra["Folio"] == "1234/56"

    def test_extra_detached_from_caller_dict(self):
        source = {"Folio": "1"}
        h = Holding(scheme_name="X", extra=source)
        source["Folio"] = "2"
        assert h.extra == {"Folio": "1"}


# ============================================================================
# Test 4: Row acceptance
# ============================================================================

class TestRowAcceptance:
    """Test that rows without a scheme name are dropped."""

    def test_blank_scheme_dropped(self):
        grid = [
            ["Scheme Name", "Current Value"],
            ["", "5000"],
            ["  ", "6000"],
            ["Kept", "7000"],
        ]
        holdings = normalize(grid)
        assert [h.scheme_name for h in holdings] == ["Kept"]

    def test_header_names_are_case_sensitive(self):
        """Lower-case header is detected but 'scheme name' is not the canonical column."""
        grid = [["scheme name", "current value"], ["X", "100"]]
        assert normalize(grid) == []

    def test_normalizer_class_matches_function(self, statement_grid):
        assert HoldingsNormalizer().normalize(statement_grid) == normalize(statement_grid)

    def test_never_raises_on_odd_cells(self):
        grid = [
            ["Scheme Name", "Current Value", "XIRR"],
            [object(), {"a": 1}, ["x"]],
            [123, None, float("nan")],
        ]
        holdings = normalize(grid)
        assert all(isinstance(h, Holding) for h in holdings)
        assert holdings[-1].scheme_name == "123"
        assert holdings[-1].current_value == Decimal("0")
