#!/usr/bin/env python3
"""
MFPA CLI - Mutual Fund Portfolio Analyzer.

Reads a holdings export (CSV or Excel), normalizes it, analyzes the
portfolio and prints a summary. Reports are written to the configured
output directory.

Usage:
    mfpa holdings.csv
    mfpa holdings.xlsx --simulate-cleanup --format xlsx json
    mfpa --sample --json-output --no-report
    mfpa --help
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mfpa.analyzers import AnalysisResult, PortfolioAnalyzer
from mfpa.core.config import AnalyzerConfig, DisplayConfig, SUPPORTED_FORMATS
from mfpa.core.exceptions import MFPAError
from mfpa.parsers import HoldingsNormalizer, TabularReader, sample_holdings
from mfpa.reports import PortfolioReportGenerator, decimal_serializer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_DATA = 2


def print_result(result: AnalysisResult, display: DisplayConfig, source: str):
    """Print analysis result to console."""
    fmt = display.format_currency

    print("\n" + "=" * 60)
    print(f"MF PORTFOLIO ANALYSIS - {source}")
    print("=" * 60)

    if result.simulate_cleanup:
        print("(Cleanup simulated: holdings below Rs. 5,000 excluded)")

    print(f"\nHoldings:               {len(result.holdings)}")
    print(f"Total Invested:         {fmt(result.total_invested)}")
    print(f"Total Current Value:    {fmt(result.total_current)}")
    print(f"Total Returns:          {fmt(result.total_returns)}")
    print(f"Absolute Return:        {result.absolute_return_pct:.2f}%")
    print(f"Health Score:           {result.health_score.score} ({result.health_score.label})")

    total = result.total_current
    if result.category_totals and total > 0:
        print("\n" + "-" * 40)
        print("ALLOCATION")
        print("-" * 40)
        for name, value in result.category_breakdown:
            print(f"{name:<24} {fmt(value)} ({value / total * 100:.1f}%)")

        print("\nTop AMCs:")
        for name, value in result.top_amcs(display.top_amc_limit):
            print(f"  {name:<30} {fmt(value)}")

    if result.benchmark_comparison:
        print("\n" + "-" * 40)
        print("BENCHMARK COMPARISON")
        print("-" * 40)
        for c in result.benchmark_comparison:
            print(
                f"{c.category:<26} {c.my_xirr:>7}% vs {c.bench_name} {c.bench_xirr}%"
                f"  alpha {c.alpha:+}%"
            )

    if result.consolidation_plan:
        print("\n" + "-" * 40)
        print("CONSOLIDATION PLAN")
        print("-" * 40)
        for entry in result.consolidation_plan:
            print(f"{entry.category}: keep {entry.winner.scheme_name}")
            for fund in entry.others:
                print(f"  - merge {fund.scheme_name} ({fmt(fund.current_value)})")
            print(f"  Value to move: {fmt(entry.potential_move_value)}")

    stats = result.simulation_stats
    if stats.clutter_count:
        print("\n" + "-" * 40)
        print("CLUTTER")
        print("-" * 40)
        print(f"{stats.clutter_count} of {stats.original_count} holdings below Rs. 5,000 "
              f"({fmt(stats.clutter_value)})")

    if result.loss_makers:
        print(f"\nLoss makers: {', '.join(h.scheme_name for h in result.loss_makers)}")

    print("\n" + "=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mfpa",
        description="Mutual Fund Portfolio Analyzer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s holdings.csv
  %(prog)s holdings.xlsx --simulate-cleanup
  %(prog)s holdings.csv --format xlsx csv json --output-dir out/
  %(prog)s --sample --json-output --no-report

Input:
  Any CSV/Excel export with a header row containing "Scheme Name" and
  "Current Value". Rows above the header are ignored.
        """
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Holdings export (.csv, .xlsx, .xls)"
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Analyze the built-in sample portfolio instead of a file"
    )
    parser.add_argument(
        "--simulate-cleanup",
        action="store_true",
        help="Exclude holdings below Rs. 5,000 from the analysis"
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to JSON config file (optional)"
    )
    parser.add_argument(
        "--output-dir",
        help="Custom output directory for reports"
    )
    parser.add_argument(
        "--format",
        nargs="+",
        choices=sorted(SUPPORTED_FORMATS),
        help="Report formats (default: from config)"
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Skip report generation"
    )
    parser.add_argument(
        "--json-output",
        action="store_true",
        help="Output result as JSON"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging (more verbose than -v)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.file and not args.sample:
        parser.error("a holdings file or --sample is required")

    # Setup logging
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        config = AnalyzerConfig.load(Path(args.config) if args.config else None)

        if args.sample:
            source = "sample portfolio"
            holdings = sample_holdings()
        else:
            source = Path(args.file).name
            grid = TabularReader().read_path(args.file)
            holdings = HoldingsNormalizer().normalize(grid)

        if not holdings:
            print(f"No data found in {source}: expected a header row with "
                  f"'Scheme Name' and 'Current Value'", file=sys.stderr)
            return EXIT_NO_DATA

        analyzer = PortfolioAnalyzer(top_movers=config.display.top_movers)
        result = analyzer.analyze(holdings, simulate_cleanup=args.simulate_cleanup)

        if args.json_output:
            print(json.dumps(result.to_dict(), indent=2, default=decimal_serializer))
        else:
            print_result(result, config.display, source)

        if not args.no_report:
            output_dir = Path(args.output_dir) if args.output_dir else config.reports.output_dir
            formats = args.format or config.reports.formats
            generator = PortfolioReportGenerator(
                result, output_dir, filename_prefix=config.reports.filename_prefix
            )
            for path in generator.generate(formats):
                if not args.json_output:
                    print(f"Report: {path}")

    except MFPAError as e:
        logger.debug("Analysis failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
