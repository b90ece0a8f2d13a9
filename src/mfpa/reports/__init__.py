"""
MFPA Reports Module.

Exports portfolio analysis results to Excel, CSV and JSON.
"""

from .portfolio_report import PortfolioReportGenerator, decimal_serializer

__all__ = [
    "PortfolioReportGenerator",
    "decimal_serializer",
]
