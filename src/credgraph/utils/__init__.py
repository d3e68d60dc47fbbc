"""
Utility functions for credgraph.

Low-level helpers used across the system.
No domain logic should live here.
"""

from credgraph.utils.time import (
    ms_to_datetime,
    datetime_to_ms,
    month_start,
    next_month,
    iso_timestamp,
)

__all__ = [
    "ms_to_datetime",
    "datetime_to_ms",
    "month_start",
    "next_month",
    "iso_timestamp",
]
