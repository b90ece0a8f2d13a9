"""Tests for the tabular reader (CSV tokenizer and spreadsheet decoding)."""

import pytest
from decimal import Decimal

from openpyxl import Workbook

from mfpa.core.exceptions import TabularReadError, UnsupportedFormatError
from mfpa.parsers.normalizer import normalize
from mfpa.parsers.tabular import TabularReader, parse_csv_text, split_csv_line


class TestSplitCSVLine:
    """Tests for quote-aware CSV field splitting."""

    def test_plain_fields(self):
        assert split_csv_line("a,b,c") == ["a", "b", "c"]

    def test_comma_inside_quotes(self):
        assert split_csv_line('X,"4,500",Equity') == ["X", "4,500", "Equity"]

    def test_doubled_quote_is_literal(self):
        assert split_csv_line('"say ""hi""",x') == ['say "hi"', "x"]

    def test_doubled_quotes_inside_quoted_field(self):
        assert split_csv_line('"a ""b"" c",x') == ['a "b" c', "x"]

    def test_quote_toggles_mid_field(self):
        assert split_csv_line('a"b,c"d,e') == ["ab,cd", "e"]

    def test_empty_fields(self):
        assert split_csv_line(",,") == ["", "", ""]
        assert split_csv_line("") == [""]

    def test_unterminated_quote_keeps_commas(self):
        assert split_csv_line('a,"b,c') == ["a", "b,c"]


class TestParseCSVText:
    """Tests for CSV text to grid conversion."""

    def test_rows_per_line(self):
        grid = parse_csv_text("Scheme Name,Current Value\nX,\"4,500\"\n")
        assert grid == [["Scheme Name", "Current Value"], ["X", "4,500"], [""]]

    def test_crlf_lines_normalize_cleanly(self):
        text = 'Scheme Name,Current Value\r\nX,"4,500"\r\n'
        holdings = normalize(parse_csv_text(text))
        assert len(holdings) == 1
        assert holdings[0].current_value == Decimal("4500")


class TestTabularReader:
    """Tests for TabularReader file decoding."""

    @pytest.fixture
    def reader(self):
        return TabularReader()

    def test_decode_csv_with_bom(self, reader):
        data = "\ufeffScheme Name,Current Value\nA,100".encode("utf-8")
        grid = reader.decode(data, "text/csv")
        assert grid[0] == ["Scheme Name", "Current Value"]

    def test_decode_rejects_unknown_hint(self, reader):
        with pytest.raises(UnsupportedFormatError):
            reader.decode(b"", "application/pdf")

    def test_decode_invalid_utf8(self, reader):
        with pytest.raises(TabularReadError):
            reader.decode(b"\xff\xfe\xfa", ".csv")

    def test_read_missing_file(self, reader, tmp_path):
        with pytest.raises(TabularReadError):
            reader.read_path(tmp_path / "missing.csv")

    def test_read_unsupported_extension(self, reader, tmp_path):
        path = tmp_path / "holdings.pdf"
        path.write_bytes(b"%PDF")
        with pytest.raises(UnsupportedFormatError):
            reader.read_path(path)

    def test_read_csv_file(self, reader, tmp_path):
        path = tmp_path / "holdings.csv"
        path.write_text(
            "Report,Generated\n"
            "Scheme Name,Sub-category,Current Value,XIRR\n"
            '"Axis Midcap Fund",Mid Cap,"55,000",14.2%\n',
            encoding="utf-8",
        )
        holdings = normalize(reader.read_path(path))

        assert len(holdings) == 1
        assert holdings[0].scheme_name == "Axis Midcap Fund"
        assert holdings[0].current_value == Decimal("55000")
        assert holdings[0].xirr == Decimal("14.2")

    def test_read_xlsx_file(self, reader, tmp_path):
        path = tmp_path / "holdings.xlsx"
        wb = Workbook()
        ws = wb.active
        ws.append(["Holdings as on 31-Mar-2024"])
        ws.append(["Scheme Name", "Category", "Units", "Invested Value", "Current Value", "XIRR"])
        ws.append(["HDFC Top 100 Fund", "Equity", 500, 50000, 75000, 15.5])
        ws.append(["Tiny Fund", "Equity", 10, 1000, 900.5, None])
        wb.save(path)

        grid = reader.read_path(path)
        assert grid[0] == ["Holdings as on 31-Mar-2024"]

        holdings = normalize(grid)
        assert [h.scheme_name for h in holdings] == ["HDFC Top 100 Fund", "Tiny Fund"]
        assert holdings[0].units == Decimal("500")
        assert holdings[0].current_value == Decimal("75000")
        assert holdings[0].xirr == Decimal("15.5")
        assert holdings[1].current_value == Decimal("900.5")
        assert holdings[1].xirr == Decimal("0")

    def test_xls_without_xlrd_names_the_extra(self, reader, monkeypatch):
        def missing_engine(*args, **kwargs):
            assert kwargs["engine"] == "xlrd"
            raise ImportError("Missing optional dependency 'xlrd'.")

        monkeypatch.setattr("mfpa.parsers.tabular.pd.read_excel", missing_engine)
        with pytest.raises(TabularReadError, match=r"mfpa\[xls\]"):
            reader.decode(b"\xd0\xcf\x11\xe0", ".xls")

    def test_corrupt_xlsx(self, reader):
        with pytest.raises(TabularReadError):
            reader.decode(b"not a zip file", ".xlsx")
