"""Custom exceptions for homefit.

Domain math never raises; these cover the I/O seams (catalog files,
persisted session state) and explicit collection edits.
"""

from __future__ import annotations

from typing import Any


class HomefitError(Exception):
    """Base exception for all homefit errors."""
    pass


# --- Data Errors ---

class DataLoadError(HomefitError):
    """Failed to load or parse a data file (catalog JSON, session state)."""
    pass


class CatalogError(DataLoadError):
    """Market data feed is missing required columns or rows."""
    pass


# --- Collection Errors ---

class UnknownPropertyError(HomefitError):
    """No property with the given zipcode/name key exists in the collection."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No property with key '{key}'")


class InvalidParameterError(HomefitError):
    """Invalid parameter value provided."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Configuration Errors ---

class ConfigurationError(HomefitError):
    """Error in application configuration."""
    pass
