"""
Configuration layer for credgraph.

Configuration in credgraph is:
- Explicit (passed, not global)
- Typed (validated at construction time)
- Immutable (frozen dataclasses)
"""

from credgraph.config.settings import (
    DAY_MS,
    WEEK_MS,
    SUNDAY_ANCHOR_MS,
    IntervalConfig,
    SolverConfig,
    CredConfig,
)

__all__ = [
    "DAY_MS",
    "WEEK_MS",
    "SUNDAY_ANCHOR_MS",
    "IntervalConfig",
    "SolverConfig",
    "CredConfig",
]
