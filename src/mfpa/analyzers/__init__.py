"""MFPA Analyzers - portfolio analytics over normalized holdings."""

from .benchmarks import Benchmark, BENCHMARKS, resolve_benchmark
from .models import (
    AnalysisResult,
    BenchmarkComparison,
    CategoryGroup,
    ConsolidationEntry,
    HealthScore,
    MergedFund,
    SimulationStats,
    SubCategoryGroup,
)
from .portfolio_analyzer import PortfolioAnalyzer, analyze, group_by

__all__ = [
    "Benchmark",
    "BENCHMARKS",
    "resolve_benchmark",
    "AnalysisResult",
    "BenchmarkComparison",
    "CategoryGroup",
    "ConsolidationEntry",
    "HealthScore",
    "MergedFund",
    "SimulationStats",
    "SubCategoryGroup",
    "PortfolioAnalyzer",
    "analyze",
    "group_by",
]
