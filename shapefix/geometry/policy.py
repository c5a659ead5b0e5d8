from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RepairPolicy:
    """Knobs for the repair pipeline. Defaults give the standard behavior."""

    # Keep scanning later intersecting pairs when the first one cannot be resolved.
    scan_all_intersections: bool = False
    # Escalate to removing two vertices when no single removal works.
    allow_pair_removal: bool = True
    # Fall back to the convex hull of the distinct points.
    hull_fallback: bool = True
    # Extra cap on resolution passes; None relies on the shrinking point count.
    max_iterations: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_iterations is not None and self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")


DEFAULT_REPAIR_POLICY = RepairPolicy()
