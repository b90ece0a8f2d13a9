"""
Portfolio Report Generator - export an AnalysisResult.

Outputs:
1. Excel workbook - Summary, By Category, By AMC, Holdings, Benchmarks,
   Consolidation sheets
2. Holdings CSV - working-set holdings, one row per holding
3. JSON export - full structured result
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from mfpa.analyzers.models import AnalysisResult

logger = logging.getLogger(__name__)


def decimal_serializer(obj):
    """JSON serializer for Decimal and date objects."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (date, datetime)):
        return obj.strftime("%d-%b-%Y")
    raise TypeError(f"Type {type(obj)} not serializable")


class PortfolioReportGenerator:
    """
    Generates reports for a portfolio analysis.

    Usage:
        generator = PortfolioReportGenerator(result, Path("reports"))
        generator.generate_excel()
        generator.export_holdings_csv()
        generator.export_json()
    """

    def __init__(
        self,
        result: AnalysisResult,
        output_dir: Path,
        filename_prefix: str = "MF_Portfolio",
        as_of_date: Optional[date] = None,
    ):
        self.result = result
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.filename_prefix = filename_prefix
        self.as_of_date = as_of_date or date.today()

    def _output_path(self, suffix: str, extension: str) -> Path:
        name = f"{self.filename_prefix}_{suffix}_{self.as_of_date.isoformat()}.{extension}"
        return self.output_dir / name

    # ------------------------------------------------------------------
    # Excel
    # ------------------------------------------------------------------

    def generate_excel(self, output_path: Optional[Path] = None) -> Path:
        """
        Write the analysis workbook.

        Returns:
            Path to generated Excel file
        """
        output_file = Path(output_path) if output_path else self._output_path("Report", "xlsx")

        with pd.ExcelWriter(output_file, engine="openpyxl") as writer:
            self._write_summary_sheet(writer)
            self._write_totals_sheet(writer, "By Category", "Category", self.result.category_breakdown)
            self._write_totals_sheet(writer, "By AMC", "AMC", self.result.top_amcs(len(self.result.amc_totals)))
            self._write_holdings_sheet(writer)
            self._write_benchmark_sheet(writer)
            self._write_consolidation_sheet(writer)

        logger.info(f"Generated portfolio report: {output_file}")
        return output_file

    def _write_summary_sheet(self, writer: pd.ExcelWriter):
        r = self.result
        stats = r.simulation_stats
        summary_data = {
            "Metric": [
                "Report Date",
                "Cleanup Simulated",
                "",
                "Total Invested",
                "Total Current Value",
                "Total Returns",
                "Absolute Return %",
                "",
                "Health Score",
                "Health Label",
                "",
                "Holdings Analyzed",
                "Loss Makers",
                "Clutter Holdings (all)",
                "Clutter Value (all)",
            ],
            "Value": [
                self.as_of_date.strftime("%d-%b-%Y"),
                "Yes" if r.simulate_cleanup else "No",
                "",
                f"Rs. {r.total_invested:,.2f}",
                f"Rs. {r.total_current:,.2f}",
                f"Rs. {r.total_returns:,.2f}",
                f"{r.absolute_return_pct:.2f}%",
                "",
                r.health_score.score,
                r.health_score.label,
                "",
                len(r.holdings),
                len(r.loss_makers),
                stats.clutter_count,
                f"Rs. {stats.clutter_value:,.2f}",
            ],
        }
        pd.DataFrame(summary_data).to_excel(writer, sheet_name="Summary", index=False)

    def _write_totals_sheet(self, writer: pd.ExcelWriter, sheet_name: str, label: str, rows):
        if not rows:
            pd.DataFrame({"Message": ["No data"]}).to_excel(writer, sheet_name=sheet_name, index=False)
            return

        df = pd.DataFrame(
            [(name, float(value)) for name, value in rows],
            columns=[label, "Current Value"],
        )
        total = df["Current Value"].sum()
        df["Share %"] = (df["Current Value"] / total * 100).round(2) if total else 0.0
        df.to_excel(writer, sheet_name=sheet_name, index=False)

    def _write_holdings_sheet(self, writer: pd.ExcelWriter):
        rows = self.holding_rows()
        if not rows:
            pd.DataFrame({"Message": ["No data"]}).to_excel(writer, sheet_name="Holdings", index=False)
            return

        df = pd.DataFrame(rows)
        df = df.sort_values("Current Value", ascending=False)
        df.to_excel(writer, sheet_name="Holdings", index=False)

    def _write_benchmark_sheet(self, writer: pd.ExcelWriter):
        if not self.result.benchmark_comparison:
            pd.DataFrame({"Message": ["No XIRR data"]}).to_excel(writer, sheet_name="Benchmarks", index=False)
            return

        df = pd.DataFrame([
            {
                "Sub-category": c.category,
                "My XIRR %": float(c.my_xirr),
                "Benchmark": c.bench_name,
                "Benchmark %": float(c.bench_xirr),
                "Alpha %": float(c.alpha),
                "Weight": float(c.weight),
            }
            for c in self.result.benchmark_comparison
        ])
        df.to_excel(writer, sheet_name="Benchmarks", index=False)

    def _write_consolidation_sheet(self, writer: pd.ExcelWriter):
        rows = []
        for entry in self.result.consolidation_plan:
            rows.append({
                "Sub-category": entry.category,
                "Action": "Keep",
                "Scheme": entry.winner.scheme_name,
                "Current Value": float(entry.winner.current_value),
                "XIRR %": float(entry.winner.xirr),
                "Abs Return %": round(float(entry.winner.abs_return_pct), 2),
            })
            for fund in entry.others:
                rows.append({
                    "Sub-category": entry.category,
                    "Action": "Merge",
                    "Scheme": fund.scheme_name,
                    "Current Value": float(fund.current_value),
                    "XIRR %": float(fund.xirr),
                    "Abs Return %": round(float(fund.abs_return_pct), 2),
                })

        if not rows:
            pd.DataFrame({"Message": ["Nothing to consolidate"]}).to_excel(
                writer, sheet_name="Consolidation", index=False
            )
            return
        pd.DataFrame(rows).to_excel(writer, sheet_name="Consolidation", index=False)

    # ------------------------------------------------------------------
    # CSV / JSON
    # ------------------------------------------------------------------

    def holding_rows(self) -> List[Dict[str, Any]]:
        """Working-set holdings as flat rows with float amounts."""
        rows = []
        for h in self.result.holdings:
            rows.append({
                "Scheme Name": h.scheme_name,
                "Category": h.category,
                "Sub-category": h.sub_category,
                "AMC": h.amc,
                "Units": float(h.units),
                "Invested Value": float(h.invested_value),
                "Current Value": float(h.current_value),
                "Returns": float(h.returns),
                "XIRR": float(h.xirr),
                "Current NAV": round(float(h.current_nav), 4),
                "Avg Buy NAV": round(float(h.avg_buy_nav), 4),
                "Abs Return %": round(float(h.abs_return_pct), 2),
            })
        return rows

    def export_holdings_csv(self, output_path: Optional[Path] = None) -> Optional[Path]:
        """
        Export working-set holdings to CSV.

        Returns:
            Path to the CSV, or None when there are no holdings
        """
        rows = self.holding_rows()
        if not rows:
            logger.warning("No holdings to export")
            return None

        output_file = Path(output_path) if output_path else self._output_path("Holdings", "csv")
        pd.DataFrame(rows, columns=list(rows[0].keys())).to_csv(output_file, index=False)

        logger.info(f"Exported {len(rows)} holdings to {output_file}")
        return output_file

    def export_json(self, output_path: Optional[Path] = None) -> Path:
        """Export the full result to JSON."""
        output_file = Path(output_path) if output_path else self._output_path("Analysis", "json")

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(self.result.to_dict(), f, indent=2, default=decimal_serializer)

        logger.info(f"Exported analysis JSON to {output_file}")
        return output_file

    def generate(self, formats: List[str]) -> List[Path]:
        """Write every requested format (xlsx, csv, json)."""
        writers = {
            "xlsx": self.generate_excel,
            "csv": self.export_holdings_csv,
            "json": self.export_json,
        }
        paths = []
        for fmt in formats:
            path = writers[fmt]()
            if path is not None:
                paths.append(path)
        return paths
