"""Analyzer configuration for MFPA.

Provides data-driven configuration for report output and console display,
with sensible defaults. Business constants (clutter threshold, benchmark
table, health policy) live in mfpa.core.constants and are not configurable.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from mfpa.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Supported report output formats
SUPPORTED_FORMATS = {"xlsx", "csv", "json"}

DEFAULT_CONFIG = {
    "$schema": "mfpa_config_v1",
    "version": "1.0",

    "reports": {
        "output_dir": "reports",
        "formats": ["xlsx"],
        "filename_prefix": "MF_Portfolio",
    },

    "display": {
        "currency_symbol": "Rs.",
        "decimal_places": 2,
        "top_amc_limit": 7,
        "top_movers": 3,
    },
}


@dataclass
class ReportConfig:
    """Configuration for report generation."""
    output_dir: Path = Path("reports")
    formats: List[str] = field(default_factory=lambda: ["xlsx"])
    filename_prefix: str = "MF_Portfolio"


@dataclass
class DisplayConfig:
    """Configuration for display formatting."""
    currency_symbol: str = "Rs."
    decimal_places: int = 2
    top_amc_limit: int = 7
    top_movers: int = 3

    def format_currency(self, amount: Decimal) -> str:
        """Format amount with currency symbol."""
        return f"{self.currency_symbol} {amount:,.{self.decimal_places}f}"


class AnalyzerConfig:
    """
    MFPA configuration.

    Loads from a JSON file with fallback to defaults.

    Usage:
        config = AnalyzerConfig.load(Path("mfpa.json"))
        config.reports.formats
        config.display.format_currency(Decimal("1234.5"))
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._raw = data if data is not None else copy.deepcopy(DEFAULT_CONFIG)

        reports = self._raw.get("reports", {})
        formats = list(reports.get("formats", ["xlsx"]))
        unknown = [f for f in formats if f not in SUPPORTED_FORMATS]
        if unknown:
            raise ConfigError(f"Unsupported report formats: {unknown}", key="reports.formats")

        self.reports = ReportConfig(
            output_dir=Path(reports.get("output_dir", "reports")),
            formats=formats,
            filename_prefix=reports.get("filename_prefix", "MF_Portfolio"),
        )

        display = self._raw.get("display", {})
        try:
            self.display = DisplayConfig(
                currency_symbol=display.get("currency_symbol", "Rs."),
                decimal_places=int(display.get("decimal_places", 2)),
                top_amc_limit=int(display.get("top_amc_limit", 7)),
                top_movers=int(display.get("top_movers", 3)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid display setting: {e}", key="display") from e

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AnalyzerConfig":
        """
        Load configuration with fallback to defaults.

        Args:
            path: JSON config file (optional)

        Returns:
            AnalyzerConfig instance

        Raises:
            ConfigError: If the file is missing or is not valid JSON
        """
        data = copy.deepcopy(DEFAULT_CONFIG)

        if path is not None:
            path = Path(path)
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            try:
                with open(path, encoding="utf-8") as f:
                    user_data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid JSON in {path}: {e}") from e
            if not isinstance(user_data, dict):
                raise ConfigError(f"Config root must be an object: {path}")
            data = cls._deep_merge(data, user_data)
            logger.debug(f"Loaded config from {path}")

        return cls(data)

    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """Deep merge two dictionaries, override takes precedence."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = AnalyzerConfig._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._raw)
