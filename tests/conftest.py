"""
Shared pytest fixtures for MFPA tests.

Provides holdings builders, sample grids and the sample portfolio.
"""

import pytest
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mfpa.parsers.models import Holding
from mfpa.parsers.sample import sample_holdings


def make_holding(
    scheme="Fund A",
    category="Equity",
    sub_category="Large Cap",
    amc="Test AMC",
    units="100",
    invested="10000",
    current="12000",
    returns=None,
    xirr="10",
) -> Holding:
    """Build a Holding from string amounts; returns default to current - invested."""
    invested_d = Decimal(invested)
    current_d = Decimal(current)
    return Holding(
        scheme_name=scheme,
        category=category,
        sub_category=sub_category,
        amc=amc,
        units=Decimal(units),
        invested_value=invested_d,
        current_value=current_d,
        returns=Decimal(returns) if returns is not None else current_d - invested_d,
        xirr=Decimal(xirr),
    )


@pytest.fixture
def holding_factory():
    """Provide the make_holding builder."""
    return make_holding


@pytest.fixture
def sample_portfolio():
    """The built-in nine-holding sample portfolio."""
    return sample_holdings()


@pytest.fixture
def statement_grid():
    """Broker export with two preamble rows above the header."""
    return [
        ["Holdings Statement as on 31-Mar-2024"],
        ["Investor: Test Investor", "PAN: XXXXX1234X"],
        ["Scheme Name", "Category", "Sub-category", "AMC", "Units",
         "Invested Value", "Current Value", "Returns", "XIRR", "Folio"],
        ["HDFC Top 100 Fund", "Equity", "Large Cap", "HDFC Mutual Fund", "500",
         "50,000", "75,000", "25,000", "15.5%", "1234/56"],
        ["SBI Small Cap Fund", "Equity", "Small Cap", "SBI Mutual Fund", 200,
         40000, 65000, 25000, 22.1, "9988"],
        ["", "", "", "", "", "", "", "", "", ""],
        ["Nippon India Small Cap", "Equity", "Small Cap", "", "50",
         "4,000", "4,500", "500", "", ""],
    ]
