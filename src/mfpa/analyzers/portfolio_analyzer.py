"""
Mutual Fund Portfolio Analyzer.

Turns canonical holdings into portfolio analytics:
- Totals and absolute return
- Category / AMC allocation
- Loss makers and clutter (tiny holdings)
- Category -> sub-category -> scheme tree with duplicate schemes merged
- Weighted XIRR per sub-category against a benchmark
- Consolidation plan for crowded sub-categories
- Composite health score

The analysis is a pure function of (holdings, simulate_cleanup). Nothing is
cached between calls and the result is fully built before it is returned.

Usage:
    from mfpa.analyzers import PortfolioAnalyzer

    result = PortfolioAnalyzer().analyze(holdings, simulate_cleanup=True)
    print(result.health_score.score, result.health_score.label)
"""

import logging
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Callable, Dict, Hashable, List, Sequence, Tuple, TypeVar

from mfpa.core import constants as C
from mfpa.analyzers.benchmarks import resolve_benchmark
from mfpa.analyzers.models import (
    AnalysisResult,
    BenchmarkComparison,
    CategoryGroup,
    ConsolidationEntry,
    HealthScore,
    MergedFund,
    SimulationStats,
    SubCategoryGroup,
)
from mfpa.parsers.models import Holding, ZERO, absolute_return_pct

logger = logging.getLogger(__name__)

T = TypeVar("T")


def group_by(items: Sequence[T], key: Callable[[T], Hashable]) -> Dict[Hashable, List[T]]:
    """Group items by key, keeping first-seen key order and item order."""
    groups: Dict[Hashable, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def round2(value: Decimal) -> Decimal:
    """Round half-up to 2 places, widening precision to fit the integer digits."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(C.TWO_PLACES, rounding=ROUND_HALF_UP)


def _category(h: Holding) -> str:
    return h.category or C.OTHER


def _sub_category(h: Holding) -> str:
    return h.sub_category or C.OTHER


def _amc(h: Holding) -> str:
    return h.amc or C.OTHER


def _is_clutter(h: Holding) -> bool:
    return h.current_value < C.CLUTTER_THRESHOLD


class PortfolioAnalyzer:
    """
    Portfolio analytics engine.

    Stateless: one instance can analyze any number of portfolios, including
    concurrently from different threads.
    """

    def __init__(self, top_movers: int = 3):
        self.top_movers = top_movers

    def analyze(self, holdings: Sequence[Holding], simulate_cleanup: bool = False) -> AnalysisResult:
        """
        Analyze holdings.

        Args:
            holdings: Canonical holdings from the normalizer
            simulate_cleanup: Drop clutter holdings before analysis

        Returns:
            AnalysisResult
        """
        enriched = [h.with_derived_metrics() for h in holdings]

        # Clutter of the full portfolio, independent of the simulation toggle
        all_clutter = [h for h in enriched if _is_clutter(h)]
        simulation_stats = SimulationStats(
            original_count=len(enriched),
            original_total_value=sum((h.current_value for h in enriched), ZERO),
            clutter_count=len(all_clutter),
            clutter_value=sum((h.current_value for h in all_clutter), ZERO),
        )

        working = [h for h in enriched if not _is_clutter(h)] if simulate_cleanup else enriched

        total_invested = sum((h.invested_value for h in working), ZERO)
        total_current = sum((h.current_value for h in working), ZERO)
        total_returns = total_current - total_invested

        category_totals: Dict[str, Decimal] = {}
        amc_totals: Dict[str, Decimal] = {}
        sub_category_counts: Dict[str, int] = {}
        xirr_weights: Dict[str, Tuple[Decimal, Decimal]] = {}
        loss_makers = []
        clutter_items = []

        for h in working:
            category = _category(h)
            sub_category = _sub_category(h)
            amc = _amc(h)

            category_totals[category] = category_totals.get(category, ZERO) + h.current_value
            amc_totals[amc] = amc_totals.get(amc, ZERO) + h.current_value
            sub_category_counts[sub_category] = sub_category_counts.get(sub_category, 0) + 1

            sum_product, sum_weight = xirr_weights.get(sub_category, (ZERO, ZERO))
            if h.xirr.is_finite() and h.xirr != ZERO:
                sum_product += h.xirr * h.current_value
                sum_weight += h.current_value
            xirr_weights[sub_category] = (sum_product, sum_weight)

            if h.returns < ZERO:
                loss_makers.append(h)
            if _is_clutter(h):
                clutter_items.append(h)

        category_tree = self._build_category_tree(working)
        loss_count = len(loss_makers)

        result = AnalysisResult(
            simulate_cleanup=simulate_cleanup,
            holdings=working,
            total_invested=total_invested,
            total_current=total_current,
            total_returns=total_returns,
            absolute_return_pct=absolute_return_pct(total_invested, total_current),
            category_totals=category_totals,
            amc_totals=amc_totals,
            sub_category_counts=sub_category_counts,
            loss_makers=loss_makers,
            clutter_items=clutter_items,
            category_tree=category_tree,
            benchmark_comparison=self._compare_benchmarks(xirr_weights),
            consolidation_plan=self._plan_consolidation(category_tree),
            health_score=self.health_score(simulation_stats.clutter_count, loss_count, len(working)),
            simulation_stats=simulation_stats,
            categories=list(dict.fromkeys(h.category for h in working if h.category)),
            top_gainers=sorted(working, key=lambda h: h.abs_return_pct, reverse=True)[:self.top_movers],
            bottom_laggards=sorted(working, key=lambda h: h.abs_return_pct)[:self.top_movers],
        )

        logger.info(
            f"Analyzed {len(working)} holdings "
            f"({simulation_stats.clutter_count} clutter, {loss_count} loss makers, "
            f"simulate_cleanup={simulate_cleanup}): health {result.health_score.score}"
        )
        return result

    # ------------------------------------------------------------------
    # Category tree
    # ------------------------------------------------------------------

    def _build_category_tree(self, holdings: Sequence[Holding]) -> List[CategoryGroup]:
        """Group category -> sub-category -> scheme, merging duplicate schemes."""
        tree = []
        for category, cat_rows in group_by(holdings, _category).items():
            sub_groups = []
            for sub_category, sub_rows in group_by(cat_rows, _sub_category).items():
                funds = [
                    self._merge_rows(rows)
                    for rows in group_by(sub_rows, lambda h: h.scheme_name).values()
                ]
                funds.sort(key=lambda f: f.current_value, reverse=True)
                sub_groups.append(SubCategoryGroup(
                    name=sub_category,
                    total_invested=sum((h.invested_value for h in sub_rows), ZERO),
                    total_current=sum((h.current_value for h in sub_rows), ZERO),
                    funds=tuple(funds),
                ))

            sub_groups.sort(key=lambda s: s.total_current, reverse=True)
            tree.append(CategoryGroup(
                name=category,
                total_invested=sum((s.total_invested for s in sub_groups), ZERO),
                total_current=sum((s.total_current for s in sub_groups), ZERO),
                sub_categories=tuple(sub_groups),
            ))

        tree.sort(key=lambda c: c.total_current, reverse=True)
        return tree

    @staticmethod
    def _merge_rows(rows: Sequence[Holding]) -> MergedFund:
        """
        Merge rows of one scheme. Amounts and units are summed and the
        derived metrics recomputed from the sums; descriptive fields and
        XIRR come from the first row.
        """
        first = rows[0]
        units = sum((h.units for h in rows), ZERO)
        invested = sum((h.invested_value for h in rows), ZERO)
        current = sum((h.current_value for h in rows), ZERO)

        return MergedFund(
            scheme_name=first.scheme_name,
            category=_category(first),
            sub_category=_sub_category(first),
            amc=_amc(first),
            units=units,
            invested_value=invested,
            current_value=current,
            returns=sum((h.returns for h in rows), ZERO),
            xirr=first.xirr,
            current_nav=current / units if units > ZERO else ZERO,
            avg_buy_nav=invested / units if units > ZERO else ZERO,
            abs_return_pct=absolute_return_pct(invested, current),
            row_count=len(rows),
        )

    # ------------------------------------------------------------------
    # Benchmarks and consolidation
    # ------------------------------------------------------------------

    @staticmethod
    def _compare_benchmarks(xirr_weights: Dict[str, Tuple[Decimal, Decimal]]) -> List[BenchmarkComparison]:
        comparisons = []
        for sub_category, (sum_product, sum_weight) in xirr_weights.items():
            if sum_weight <= ZERO:
                continue

            my_xirr = round2(sum_product / sum_weight)
            benchmark = resolve_benchmark(sub_category)
            bench_xirr = round2(benchmark.annual_return)

            comparisons.append(BenchmarkComparison(
                category=sub_category,
                my_xirr=my_xirr,
                bench_xirr=bench_xirr,
                bench_name=benchmark.name,
                alpha=my_xirr - bench_xirr,
                weight=sum_weight,
            ))

        comparisons.sort(key=lambda c: c.weight, reverse=True)
        return comparisons

    @staticmethod
    def _plan_consolidation(category_tree: Sequence[CategoryGroup]) -> List[ConsolidationEntry]:
        plan = []
        for category in category_tree:
            for sub in category.sub_categories:
                if sub.fund_count <= C.CONSOLIDATION_MIN_SCHEMES:
                    continue

                # sorted() is stable: equal keys keep tree order
                ranked = sorted(sub.funds, key=lambda f: f.rank_key, reverse=True)
                winner, others = ranked[0], tuple(ranked[1:])
                plan.append(ConsolidationEntry(
                    category=sub.name,
                    winner=winner,
                    others=others,
                    potential_move_value=sum((f.current_value for f in others), ZERO),
                ))

                logger.debug(
                    f"Consolidate {sub.name}: keep {winner.scheme_name}, "
                    f"merge {len(others)} schemes"
                )
        return plan

    # ------------------------------------------------------------------
    # Health score
    # ------------------------------------------------------------------

    @staticmethod
    def health_score(clutter_count: int, loss_maker_count: int, holding_count: int) -> HealthScore:
        """
        Composite health score.

        Starts at 100; clutter costs 2 points each (max 20), loss makers 1.5
        each (max 15), and each holding-count threshold crossed costs a flat
        10. Clamped to 0-100 and rounded half up.
        """
        score = C.HEALTH_BASE_SCORE
        score -= min(C.HEALTH_CLUTTER_CAP, clutter_count * C.HEALTH_CLUTTER_PENALTY)
        score -= min(C.HEALTH_LOSS_CAP, loss_maker_count * C.HEALTH_LOSS_PENALTY)
        for threshold, penalty in C.HEALTH_SIZE_PENALTIES:
            if holding_count > threshold:
                score -= penalty

        score = max(Decimal("0"), min(C.HEALTH_BASE_SCORE, score))
        value = int(score.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        label = C.HEALTH_TOP_LABEL
        for upper, name in C.HEALTH_LABELS:
            if value < upper:
                label = name
                break

        return HealthScore(score=value, label=label)


def analyze(holdings: Sequence[Holding], simulate_cleanup: bool = False) -> AnalysisResult:
    """Analyze holdings with the default analyzer."""
    return PortfolioAnalyzer().analyze(holdings, simulate_cleanup)
