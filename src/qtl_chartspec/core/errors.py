"""Custom exceptions for chart spec building."""


from __future__ import annotations


class ChartSpecError(Exception):
    """Base exception for the project."""


class ConfigError(ChartSpecError):
    """Raised when option preset files are missing/invalid."""


class InvalidInput(ChartSpecError):
    """Raised when a result table breaks the caller contract (e.g. missing columns)."""
