"""Parsers for mutual fund holdings exports (CSV and spreadsheets)."""

from .models import Holding, absolute_return_pct
from .tabular import TabularReader, split_csv_line, parse_csv_text
from .normalizer import (
    HoldingsNormalizer,
    normalize,
    parse_lenient_number,
    clean_text,
    find_header_row,
)
from .sample import sample_holdings

__all__ = [
    "Holding",
    "absolute_return_pct",
    "TabularReader",
    "split_csv_line",
    "parse_csv_text",
    "HoldingsNormalizer",
    "normalize",
    "parse_lenient_number",
    "clean_text",
    "find_header_row",
    "sample_holdings",
]
