from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ---------------------------------------------------------------------
# Interval partitioning
# ---------------------------------------------------------------------

DAY_MS = 24 * 60 * 60 * 1000
WEEK_MS = 7 * DAY_MS

# 1970-01-04T00:00:00Z, the first Sunday after the Unix epoch.
SUNDAY_ANCHOR_MS = 3 * DAY_MS


@dataclass(frozen=True)
class IntervalConfig:
    """
    Controls how timestamped activity is sliced into intervals.

    With ``calendar="fixed"`` boundaries sit at ``anchor_ms + k * width_ms``.
    With ``calendar="month"`` boundaries are UTC month starts and
    ``width_ms`` is ignored.
    """

    width_ms: int = WEEK_MS
    anchor_ms: int = SUNDAY_ANCHOR_MS
    calendar: Literal["fixed", "month"] = "fixed"

    def __post_init__(self) -> None:
        if self.width_ms <= 0:
            raise ValueError(f"interval width must be positive: {self.width_ms}")
        if self.calendar not in ("fixed", "month"):
            raise ValueError(f"unknown interval calendar: {self.calendar!r}")


# ---------------------------------------------------------------------
# Power iteration
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class SolverConfig:
    """
    Convergence policy for the per-interval PageRank solve.
    """

    tolerance: float = 1e-7
    max_iterations: int = 1000

    def __post_init__(self) -> None:
        if not self.tolerance > 0:
            raise ValueError(f"solver tolerance must be positive: {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(
                f"solver max_iterations must be at least 1: {self.max_iterations}"
            )


# ---------------------------------------------------------------------
# Root configuration object
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class CredConfig:
    """
    Root configuration object for credgraph.

    Holds the policy knobs that are not user-facing parameters:
    interval shape and solver convergence. Alpha and interval decay
    travel separately as ``TimelineCredParameters``.
    """

    intervals: IntervalConfig = field(default_factory=IntervalConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
