"""
Core module - Foundation components for MFPA.

Provides:
- Business constants (canonical columns, clutter and consolidation thresholds,
  health score policy)
- AnalyzerConfig: JSON configuration with defaults
- Exception hierarchy rooted at MFPAError
"""

from mfpa.core.config import AnalyzerConfig, DEFAULT_CONFIG, SUPPORTED_FORMATS
from mfpa.core.exceptions import (
    MFPAError,
    TabularReadError,
    UnsupportedFormatError,
    ConfigError,
)

__all__ = [
    "AnalyzerConfig",
    "DEFAULT_CONFIG",
    "SUPPORTED_FORMATS",
    "MFPAError",
    "TabularReadError",
    "UnsupportedFormatError",
    "ConfigError",
]
