"""
Tabular reader - decodes CSV and spreadsheet exports into a grid of cells.

The grid is row-major; each cell is a str, a number, or None. No header
position is assumed here - header detection belongs to the normalizer.

Usage:
    reader = TabularReader()
    grid = reader.read_path(Path("holdings.xlsx"))
    grid = reader.decode(raw_bytes, "text/csv")
"""

import io
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

import pandas as pd

from mfpa.core.exceptions import TabularReadError, UnsupportedFormatError

logger = logging.getLogger(__name__)

Cell = Union[str, int, float, None]
Grid = List[List[Cell]]

CSV_HINTS = {".csv", "csv", "text/csv", "text/plain", "application/csv"}
EXCEL_HINTS = {
    ".xlsx", "xlsx",
    ".xls", "xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
}
XLS_HINTS = {".xls", "xls", "application/vnd.ms-excel"}


def split_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into fields.

    A quote toggles quote state and is not emitted; inside quotes a doubled
    quote yields a literal quote. Commas separate fields only outside quotes.

    Examples:
        >>> split_csv_line('a,"b, c",d')
        ['a', 'b, c', 'd']
        >>> split_csv_line('"a ""b"" c",x')
        ['a "b" c', 'x']
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


def parse_csv_text(text: str) -> Grid:
    """Tokenize CSV text into a grid, one row per line."""
    return [split_csv_line(line) for line in text.split("\n")]


class TabularReader:
    """
    Decodes holdings exports (CSV, XLSX, XLS) into a rectangular grid.

    Spreadsheets are read from the first sheet without a header so that the
    normalizer sees every row, including preamble rows above the header.
    """

    def __init__(self, encoding: str = "utf-8-sig"):
        self.encoding = encoding

    def read_path(self, file_path: Union[str, Path]) -> Grid:
        """
        Read a file from disk.

        Raises:
            TabularReadError: If the file is missing or cannot be decoded
            UnsupportedFormatError: If the extension is not CSV or Excel
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise TabularReadError(f"File not found: {file_path}", file_path=str(file_path))

        suffix = file_path.suffix.lower()
        if suffix not in CSV_HINTS and suffix not in EXCEL_HINTS:
            raise UnsupportedFormatError(suffix or file_path.name, file_path=str(file_path))

        logger.info(f"Reading holdings file: {file_path.name}")
        return self.decode(file_path.read_bytes(), suffix, source=str(file_path))

    def decode(self, file_bytes: bytes, mime_hint: str, source: Optional[str] = None) -> Grid:
        """
        Decode raw file content.

        Args:
            file_bytes: File content
            mime_hint: Extension (".csv", "xlsx") or MIME type
            source: File name for error messages

        Returns:
            Grid of cells
        """
        hint = (mime_hint or "").lower().strip()

        if hint in CSV_HINTS:
            return self._decode_csv(file_bytes, source)
        if hint in EXCEL_HINTS:
            return self._decode_excel(file_bytes, hint in XLS_HINTS, source)

        raise UnsupportedFormatError(hint or "unknown", file_path=source)

    def _decode_csv(self, file_bytes: bytes, source: Optional[str]) -> Grid:
        try:
            text = file_bytes.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise TabularReadError(f"Cannot decode CSV as {self.encoding}: {e}", file_path=source) from e

        grid = parse_csv_text(text)
        logger.debug(f"Decoded CSV: {len(grid)} lines")
        return grid

    def _decode_excel(self, file_bytes: bytes, legacy: bool, source: Optional[str]) -> Grid:
        engine = "xlrd" if legacy else "openpyxl"
        try:
            df = pd.read_excel(
                io.BytesIO(file_bytes),
                sheet_name=0,
                header=None,
                dtype=object,
                engine=engine,
            )
        except ImportError as e:
            raise TabularReadError(
                f"Reading .xls files needs xlrd (pip install mfpa[xls]): {e}", file_path=source
            ) from e
        except Exception as e:
            raise TabularReadError(f"Cannot read spreadsheet: {e}", file_path=source) from e

        grid = [self._trim_row(row) for row in df.itertuples(index=False, name=None)]
        logger.debug(f"Decoded spreadsheet: {len(grid)} rows x {len(df.columns)} columns")
        return grid

    @staticmethod
    def _trim_row(row: tuple) -> List[Cell]:
        """Convert NaN cells to None and drop trailing empty cells."""
        cells: List[Any] = [None if _is_missing(v) else v for v in row]
        while cells and cells[-1] is None:
            cells.pop()
        return cells


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
