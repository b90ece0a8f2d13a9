"""
Holdings normalizer - turns a raw grid into canonical Holding records.

Handles:
- Header row detection anywhere in the grid (preamble rows are skipped)
- Column mapping by header text, with quote and whitespace cleanup
- Lenient numeric coercion (commas, percent sign, junk -> 0)
- Dropping rows without a scheme name

Never raises for malformed input; a grid without a usable header yields
an empty list.
"""

import logging
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence

from mfpa.core import constants as C
from mfpa.parsers.models import Holding, ZERO

logger = logging.getLogger(__name__)

# Longest leading decimal literal, as a lenient float parser accepts it
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
MAX_EXPONENT = 308


def parse_lenient_number(value: Any, strip_percent: bool = False) -> Decimal:
    """
    Parse a cell as a Decimal, falling back to 0.

    Text has surrounding whitespace and one layer of straight quotes removed,
    thousands-separator commas stripped (and a percent sign when
    strip_percent is set), then the leading decimal literal is parsed.
    Empty, unparseable and non-finite values all become 0.

    Examples:
        >>> parse_lenient_number("1,25,000.50")
        Decimal('125000.50')
        >>> parse_lenient_number("15.5%", strip_percent=True)
        Decimal('15.5')
        >>> parse_lenient_number("n/a")
        Decimal('0')
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return ZERO
        return Decimal(str(value))

    text = clean_text(value).replace(",", "")
    if strip_percent:
        text = text.replace("%", "")

    match = _NUMBER_PREFIX.match(text.lstrip())
    if not match:
        return ZERO

    try:
        number = Decimal(match.group(0))
    except InvalidOperation:
        return ZERO
    # Beyond double range the value is treated as infinite
    if not number.is_finite() or number.adjusted() > MAX_EXPONENT:
        return ZERO
    return number


def clean_text(value: Any) -> str:
    """Trim a cell and strip one leading and one trailing straight quote."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            value = int(value)

    text = str(value).strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def find_header_row(grid: Sequence[Sequence[Any]]) -> Optional[int]:
    """
    Find the header row index.

    The header is the first row whose lower-cased cell text contains every
    marker in HEADER_MARKERS.
    """
    for idx, row in enumerate(grid):
        if not row:
            continue
        row_text = ",".join(clean_text(cell) for cell in row).lower()
        if all(marker in row_text for marker in C.HEADER_MARKERS):
            return idx
    return None


class HoldingsNormalizer:
    """
    Normalizes holdings statement grids to Holding records.

    Recognized columns are matched verbatim (case-sensitive) against
    CANONICAL_FIELDS. Any other column is kept as text in Holding.extra.

    Usage:
        normalizer = HoldingsNormalizer()
        holdings = normalizer.normalize(grid)
    """

    def normalize(self, grid: Sequence[Sequence[Any]]) -> List[Holding]:
        """
        Normalize a raw grid.

        Args:
            grid: Row-major cells from the tabular reader

        Returns:
            List of Holding objects (empty if no header row is found)
        """
        if not grid:
            return []

        header_idx = find_header_row(grid)
        if header_idx is None:
            logger.warning("No header row with 'Scheme Name' and 'Current Value' found")
            return []

        headers = [clean_text(cell) for cell in grid[header_idx]]
        logger.debug(f"Header row at index {header_idx}: {headers}")

        holdings = []
        dropped = 0
        for row in grid[header_idx + 1:]:
            if not row or len(row) < 2:
                continue

            record = self._map_row(headers, row)
            holding = self._to_holding(record)
            if holding is None:
                dropped += 1
                continue
            holdings.append(holding)

        logger.debug(f"Normalized {len(holdings)} holdings, dropped {dropped} rows without scheme name")
        return holdings

    def _map_row(self, headers: List[str], row: Sequence[Any]) -> Dict[str, Any]:
        """Map cells to header names by position, coercing by column name."""
        record = {}
        for index, header in enumerate(headers):
            value = row[index] if index < len(row) else None
            if header in C.AMOUNT_FIELDS:
                record[header] = parse_lenient_number(value)
            elif header in C.PERCENT_FIELDS:
                record[header] = parse_lenient_number(value, strip_percent=True)
            else:
                record[header] = clean_text(value)
        return record

    def _to_holding(self, record: Dict[str, Any]) -> Optional[Holding]:
        scheme_name = record.get(C.SCHEME_NAME)
        if not scheme_name:
            return None

        extra = {
            key: value for key, value in record.items()
            if key not in C.CANONICAL_FIELDS and key
        }

        return Holding(
            scheme_name=scheme_name,
            category=record.get(C.CATEGORY) or C.OTHER,
            sub_category=record.get(C.SUB_CATEGORY) or C.OTHER,
            amc=record.get(C.AMC) or C.OTHER,
            units=record.get(C.UNITS, ZERO),
            invested_value=record.get(C.INVESTED_VALUE, ZERO),
            current_value=record.get(C.CURRENT_VALUE, ZERO),
            returns=record.get(C.RETURNS, ZERO),
            xirr=record.get(C.XIRR, ZERO),
            extra=extra,
        )


def normalize(grid: Sequence[Sequence[Any]]) -> List[Holding]:
    """Normalize a raw grid with the default normalizer."""
    return HoldingsNormalizer().normalize(grid)
