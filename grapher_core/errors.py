from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when an axis configuration violates its invariants."""
