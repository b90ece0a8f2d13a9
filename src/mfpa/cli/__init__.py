"""MFPA command line interface."""
