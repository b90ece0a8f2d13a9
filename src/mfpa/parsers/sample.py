"""Built-in sample portfolio for demos and smoke tests."""

from decimal import Decimal
from typing import List

from mfpa.parsers.models import Holding


def _h(scheme, category, sub_category, amc, units, invested, current, returns, xirr):
    return Holding(
        scheme_name=scheme,
        category=category,
        sub_category=sub_category,
        amc=amc,
        units=Decimal(units),
        invested_value=Decimal(invested),
        current_value=Decimal(current),
        returns=Decimal(returns),
        xirr=Decimal(xirr),
    )


def sample_holdings() -> List[Holding]:
    """
    Nine holdings covering a clutter fund (< Rs. 5,000), a loss maker, and a
    Large Cap sub-category with four schemes to consolidate.
    """
    return [
        _h("HDFC Top 100 Fund", "Equity", "Large Cap", "HDFC Mutual Fund", "500", "50000", "75000", "25000", "15.5"),
        _h("SBI Small Cap Fund", "Equity", "Small Cap", "SBI Mutual Fund", "200", "40000", "65000", "25000", "22.1"),
        _h("Axis Midcap Fund", "Equity", "Mid Cap", "Axis Mutual Fund", "300", "45000", "55000", "10000", "14.2"),
        _h("Parag Parikh Flexi Cap", "Equity", "Flexi Cap", "PPFAS Mutual Fund", "400", "80000", "110000", "30000", "18.5"),
        _h("HDFC Balanced Advantage", "Hybrid", "Dynamic Asset Allocation", "HDFC Mutual Fund", "100", "10000", "12000", "2000", "9.5"),
        _h("Nippon India Small Cap", "Equity", "Small Cap", "Nippon India Mutual Fund", "50", "4000", "4500", "500", "12.0"),
        _h("UTI Nifty 50 Index", "Equity", "Large Cap", "UTI Mutual Fund", "100", "15000", "14000", "-1000", "-5.0"),
        _h("ICICI Prudential Bluechip", "Equity", "Large Cap", "ICICI Prudential", "150", "30000", "38000", "8000", "13.0"),
        _h("SBI Bluechip Fund", "Equity", "Large Cap", "SBI Mutual Fund", "120", "25000", "29000", "4000", "11.0"),
    ]
