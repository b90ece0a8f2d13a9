"""
Benchmark table for sub-category performance comparison.

Returns are long-run annual index returns in percent. The table is fixed
and not user-editable.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Tuple


@dataclass(frozen=True)
class Benchmark:
    """Reference index for a sub-category."""
    key: str
    name: str
    annual_return: Decimal


BENCHMARKS: Dict[str, Benchmark] = {
    "Large Cap": Benchmark("Large Cap", "Nifty 50", Decimal("13.5")),
    "Mid Cap": Benchmark("Mid Cap", "Nifty Midcap 150", Decimal("16.5")),
    "Small Cap": Benchmark("Small Cap", "Nifty Smallcap 250", Decimal("19.0")),
    "Flexi Cap": Benchmark("Flexi Cap", "Nifty 500", Decimal("15.0")),
    "ELSS": Benchmark("ELSS", "Nifty 500", Decimal("15.0")),
    "Debt": Benchmark("Debt", "FD / Debt Index", Decimal("7.0")),
    "Liquid": Benchmark("Liquid", "Liquid Index", Decimal("6.0")),
    "Sectoral": Benchmark("Sectoral", "Nifty 500", Decimal("15.0")),
    "Other": Benchmark("Other", "Inflation", Decimal("6.0")),
}

# Substring fallbacks, tested in order
SUBSTRING_RULES: Tuple[Tuple[str, str], ...] = (
    ("Large", "Large Cap"),
    ("Small", "Small Cap"),
    ("Mid", "Mid Cap"),
    ("Flexi", "Flexi Cap"),
    ("Debt", "Debt"),
)

FALLBACK_KEY = "Other"


def resolve_benchmark(sub_category: str) -> Benchmark:
    """
    Resolve the benchmark for a sub-category.

    Exact key match first, then the first matching substring rule
    (case-sensitive), then the inflation fallback.

    Examples:
        >>> resolve_benchmark("Large Cap").name
        'Nifty 50'
        >>> resolve_benchmark("Large & Mid Cap").key
        'Large Cap'
        >>> resolve_benchmark("Gilt").key
        'Other'
    """
    if sub_category in BENCHMARKS:
        return BENCHMARKS[sub_category]

    for needle, key in SUBSTRING_RULES:
        if needle in sub_category:
            return BENCHMARKS[key]

    return BENCHMARKS[FALLBACK_KEY]
