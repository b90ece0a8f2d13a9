"""Portfolio analysis result models."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from mfpa.parsers.models import Holding, ZERO


def _num(value: Decimal) -> str:
    return str(value)


@dataclass(frozen=True)
class MergedFund:
    """All rows of one scheme within a category / sub-category, summed."""
    scheme_name: str
    category: str
    sub_category: str
    amc: str
    units: Decimal
    invested_value: Decimal
    current_value: Decimal
    returns: Decimal
    xirr: Decimal
    current_nav: Decimal
    avg_buy_nav: Decimal
    abs_return_pct: Decimal
    row_count: int = 1

    @property
    def rank_key(self) -> Decimal:
        """XIRR when present and non-zero, else absolute return."""
        return self.xirr if self.xirr else self.abs_return_pct

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheme_name": self.scheme_name,
            "category": self.category,
            "sub_category": self.sub_category,
            "amc": self.amc,
            "units": _num(self.units),
            "invested_value": _num(self.invested_value),
            "current_value": _num(self.current_value),
            "returns": _num(self.returns),
            "xirr": _num(self.xirr),
            "current_nav": _num(self.current_nav),
            "avg_buy_nav": _num(self.avg_buy_nav),
            "abs_return_pct": _num(self.abs_return_pct),
            "row_count": self.row_count,
        }


@dataclass(frozen=True)
class SubCategoryGroup:
    """Merged funds of one sub-category."""
    name: str
    total_invested: Decimal
    total_current: Decimal
    funds: Tuple[MergedFund, ...]

    @property
    def fund_count(self) -> int:
        return len(self.funds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total_invested": _num(self.total_invested),
            "total_current": _num(self.total_current),
            "fund_count": self.fund_count,
            "funds": [f.to_dict() for f in self.funds],
        }


@dataclass(frozen=True)
class CategoryGroup:
    """Sub-category groups of one category."""
    name: str
    total_invested: Decimal
    total_current: Decimal
    sub_categories: Tuple[SubCategoryGroup, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total_invested": _num(self.total_invested),
            "total_current": _num(self.total_current),
            "sub_categories": [s.to_dict() for s in self.sub_categories],
        }


@dataclass(frozen=True)
class BenchmarkComparison:
    """Weighted XIRR of a sub-category against its benchmark."""
    category: str
    my_xirr: Decimal
    bench_xirr: Decimal
    bench_name: str
    alpha: Decimal
    weight: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "my_xirr": _num(self.my_xirr),
            "bench_xirr": _num(self.bench_xirr),
            "bench_name": self.bench_name,
            "alpha": _num(self.alpha),
            "weight": _num(self.weight),
        }


@dataclass(frozen=True)
class ConsolidationEntry:
    """Keep-one recommendation for a crowded sub-category."""
    category: str
    winner: MergedFund
    others: Tuple[MergedFund, ...]
    potential_move_value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "winner": self.winner.to_dict(),
            "others": [f.to_dict() for f in self.others],
            "potential_move_value": _num(self.potential_move_value),
        }


@dataclass(frozen=True)
class HealthScore:
    """Composite portfolio health score (0-100) and label."""
    score: int = 100
    label: str = "Excellent"

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "label": self.label}


@dataclass(frozen=True)
class SimulationStats:
    """Clutter statistics of the original, unfiltered holdings."""
    original_count: int = 0
    original_total_value: Decimal = ZERO
    clutter_count: int = 0
    clutter_value: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_count": self.original_count,
            "original_total_value": _num(self.original_total_value),
            "clutter_count": self.clutter_count,
            "clutter_value": _num(self.clutter_value),
        }


@dataclass
class AnalysisResult:
    """
    Result of a portfolio analysis pass.

    Built in full by PortfolioAnalyzer.analyze(); never updated afterwards.
    `holdings` is the working set (after the optional cleanup simulation)
    with derived metrics filled in.
    """
    simulate_cleanup: bool = False
    holdings: List[Holding] = field(default_factory=list)

    total_invested: Decimal = ZERO
    total_current: Decimal = ZERO
    total_returns: Decimal = ZERO
    absolute_return_pct: Decimal = ZERO

    category_totals: Dict[str, Decimal] = field(default_factory=dict)
    amc_totals: Dict[str, Decimal] = field(default_factory=dict)
    sub_category_counts: Dict[str, int] = field(default_factory=dict)

    loss_makers: List[Holding] = field(default_factory=list)
    clutter_items: List[Holding] = field(default_factory=list)

    category_tree: List[CategoryGroup] = field(default_factory=list)
    benchmark_comparison: List[BenchmarkComparison] = field(default_factory=list)
    consolidation_plan: List[ConsolidationEntry] = field(default_factory=list)

    health_score: HealthScore = field(default_factory=HealthScore)
    simulation_stats: SimulationStats = field(default_factory=SimulationStats)

    categories: List[str] = field(default_factory=list)
    top_gainers: List[Holding] = field(default_factory=list)
    bottom_laggards: List[Holding] = field(default_factory=list)

    @property
    def category_breakdown(self) -> List[Tuple[str, Decimal]]:
        """Category totals, largest first."""
        return sorted(self.category_totals.items(), key=lambda kv: kv[1], reverse=True)

    def top_amcs(self, limit: int = 7) -> List[Tuple[str, Decimal]]:
        """AMC totals, largest first, limited to `limit` entries."""
        ranked = sorted(self.amc_totals.items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:limit]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-safe primitives (Decimals as strings)."""
        return {
            "simulate_cleanup": self.simulate_cleanup,
            "total_invested": _num(self.total_invested),
            "total_current": _num(self.total_current),
            "total_returns": _num(self.total_returns),
            "absolute_return_pct": _num(self.absolute_return_pct),
            "category_totals": {k: _num(v) for k, v in self.category_totals.items()},
            "amc_totals": {k: _num(v) for k, v in self.amc_totals.items()},
            "sub_category_counts": dict(self.sub_category_counts),
            "loss_makers": [h.to_dict() for h in self.loss_makers],
            "clutter_items": [h.to_dict() for h in self.clutter_items],
            "category_tree": [c.to_dict() for c in self.category_tree],
            "benchmark_comparison": [b.to_dict() for b in self.benchmark_comparison],
            "consolidation_plan": [p.to_dict() for p in self.consolidation_plan],
            "health_score": self.health_score.to_dict(),
            "simulation_stats": self.simulation_stats.to_dict(),
            "categories": list(self.categories),
            "top_gainers": [h.to_dict() for h in self.top_gainers],
            "bottom_laggards": [h.to_dict() for h in self.bottom_laggards],
            "holdings": [h.to_dict() for h in self.holdings],
        }
