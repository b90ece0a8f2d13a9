"""Mutual fund holding models."""

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Dict, Mapping

from mfpa.core.constants import OTHER

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Holding:
    """
    Canonical holding record, one per accepted statement row.

    Numeric fields are always finite Decimals; missing source data is 0.
    The derived fields (current_nav, avg_buy_nav, abs_return_pct) stay 0
    until the analyzer calls with_derived_metrics().
    """
    scheme_name: str
    category: str = OTHER
    sub_category: str = OTHER
    amc: str = OTHER
    units: Decimal = ZERO
    invested_value: Decimal = ZERO
    current_value: Decimal = ZERO
    returns: Decimal = ZERO
    xirr: Decimal = ZERO
    extra: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    current_nav: Decimal = ZERO
    avg_buy_nav: Decimal = ZERO
    abs_return_pct: Decimal = ZERO

    def __post_init__(self):
        # Numbers passed as int/float/str are stored as Decimal; non-finite -> 0
        for name in NUMERIC_FIELDS:
            object.__setattr__(self, name, _finite_decimal(getattr(self, name)))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra or {})))

    def with_derived_metrics(self) -> "Holding":
        """Return a copy with NAVs and absolute return computed."""
        return replace(
            self,
            current_nav=self.current_value / self.units if self.units > ZERO else ZERO,
            avg_buy_nav=self.invested_value / self.units if self.units > ZERO else ZERO,
            abs_return_pct=absolute_return_pct(self.invested_value, self.current_value),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary keyed by the statement column names."""
        return {
            "Scheme Name": self.scheme_name,
            "Category": self.category,
            "Sub-category": self.sub_category,
            "AMC": self.amc,
            "Units": str(self.units),
            "Invested Value": str(self.invested_value),
            "Current Value": str(self.current_value),
            "Returns": str(self.returns),
            "XIRR": str(self.xirr),
            "Current NAV": str(self.current_nav),
            "Avg Buy NAV": str(self.avg_buy_nav),
            "Abs Return %": str(self.abs_return_pct),
        }


NUMERIC_FIELDS = (
    "units", "invested_value", "current_value", "returns", "xirr",
    "current_nav", "avg_buy_nav", "abs_return_pct",
)


def _finite_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except InvalidOperation:
            return ZERO
    return value if value.is_finite() else ZERO


def absolute_return_pct(invested_value: Decimal, current_value: Decimal) -> Decimal:
    """Absolute return in percent; 0 when nothing was invested."""
    if invested_value <= ZERO:
        return ZERO
    return (current_value - invested_value) / invested_value * HUNDRED
