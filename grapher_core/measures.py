from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Measures:
    """Setup-time override of an axis; ``None`` keeps the current value."""

    min_log: int | None = None
    max_log: int | None = None
    min_value: float | None = None
    max_value: float | None = None
    min_value_limit: float | None = None
    max_value_limit: float | None = None
