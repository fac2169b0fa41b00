"""Exceptions shared across the engine."""

from __future__ import annotations


class ConfigError(ValueError):
    """Raised once, at construction, for a structurally invalid configuration."""
