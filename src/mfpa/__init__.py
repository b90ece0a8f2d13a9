"""MFPA - Mutual Fund Portfolio Analyzer."""

__version__ = "0.1.0"
