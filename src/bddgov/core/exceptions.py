"""bddgov exception hierarchy."""

from __future__ import annotations


class BddGovError(Exception):
    """Base exception for all bddgov errors."""


class ConfigError(BddGovError):
    """Raised when the configuration is invalid or cannot be read."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""


class FeatureReadError(BddGovError):
    """Raised when a discovered feature file cannot be read or is out of bounds."""
