from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when host-side plot inputs are unusable."""
