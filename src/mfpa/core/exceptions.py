"""
Custom exceptions for MFPA.

All MFPA-specific exceptions inherit from MFPAError for easy catching.
The normalizer and analyzer never raise for malformed data; these are
raised only at the file and configuration boundary.
"""


class MFPAError(Exception):
    """Base exception for all MFPA errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code


class TabularReadError(MFPAError):
    """File could not be decoded into a grid of cells."""

    def __init__(self, message: str, file_path: str = None, code: str = "READ_ERROR"):
        super().__init__(message, code)
        self.file_path = file_path


class UnsupportedFormatError(MFPAError):
    """File format is not CSV or a spreadsheet."""

    def __init__(self, format_type: str, file_path: str = None, code: str = "UNSUPPORTED_FORMAT"):
        super().__init__(f"Unsupported file format: {format_type}", code)
        self.format_type = format_type
        self.file_path = file_path


class ConfigError(MFPAError):
    """Invalid configuration file or value."""

    def __init__(self, message: str, key: str = None, code: str = "CONFIG_ERROR"):
        super().__init__(message, code)
        self.key = key
