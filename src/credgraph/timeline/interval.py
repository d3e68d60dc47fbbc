from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from credgraph.config.settings import IntervalConfig
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.utils.time import datetime_to_ms, month_start, ms_to_datetime, next_month


@dataclass(frozen=True)
class Interval:
    """
    Half-open time range ``[start_ms, end_ms)``.
    """

    start_ms: int
    end_ms: int

    def __post_init__(self) -> None:
        if self.end_ms <= self.start_ms:
            raise ValueError(f"empty interval: [{self.start_ms}, {self.end_ms})")

    @property
    def width_ms(self) -> int:
        return self.end_ms - self.start_ms

    def contains(self, timestamp_ms: int) -> bool:
        return self.start_ms <= timestamp_ms < self.end_ms


@dataclass(frozen=True)
class IntervalPartition:
    """
    Ordered, contiguous, non-overlapping sequence of intervals.
    """

    intervals: Tuple[Interval, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "intervals", tuple(self.intervals))
        for prev, cur in zip(self.intervals, self.intervals[1:]):
            if prev.end_ms != cur.start_ms:
                raise ValueError(
                    f"intervals must be contiguous: {prev} is followed by {cur}"
                )
        object.__setattr__(
            self, "_starts", tuple(interval.start_ms for interval in self.intervals)
        )

    def __len__(self) -> int:
        return len(self.intervals)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self.intervals)

    def __getitem__(self, index: int) -> Interval:
        return self.intervals[index]

    @property
    def start_ms(self) -> int:
        return self.intervals[0].start_ms

    @property
    def end_ms(self) -> int:
        return self.intervals[-1].end_ms

    def index_of(self, timestamp_ms: int) -> int:
        """
        Index of the interval containing ``timestamp_ms``.
        """
        if not self.intervals or not self.start_ms <= timestamp_ms < self.end_ms:
            raise ValueError(f"timestamp {timestamp_ms} is outside the partition")
        return bisect_right(self._starts, timestamp_ms) - 1


# ---------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------


def _fixed_boundaries(lo: int, hi: int, config: IntervalConfig) -> List[int]:
    width = config.width_ms
    start = config.anchor_ms + ((lo - config.anchor_ms) // width) * width
    count = (hi - start) // width + 1
    return [start + k * width for k in range(count + 1)]


def _month_boundaries(lo: int, hi: int) -> List[int]:
    cursor = month_start(ms_to_datetime(lo))
    boundaries = [datetime_to_ms(cursor)]
    while boundaries[-1] <= hi:
        cursor = next_month(cursor)
        boundaries.append(datetime_to_ms(cursor))
    return boundaries


def partition(
    timestamps: Iterable[int],
    config: IntervalConfig = IntervalConfig(),
) -> IntervalPartition:
    """
    Slice the activity range into aligned intervals.

    Boundaries depend only on the configured anchor and width, never on
    the data, so re-partitioning the same timestamps is always identical.
    With no timestamps, a single interval at the anchor is returned.
    """
    values = list(timestamps)
    if values:
        lo, hi = min(values), max(values)
    else:
        lo = hi = config.anchor_ms

    if config.calendar == "month":
        boundaries = _month_boundaries(lo, hi)
    else:
        boundaries = _fixed_boundaries(lo, hi, config)

    return IntervalPartition(
        tuple(
            Interval(start, end)
            for start, end in zip(boundaries, boundaries[1:])
        )
    )


def partition_graph(
    graph: WeightedGraph,
    config: IntervalConfig = IntervalConfig(),
) -> IntervalPartition:
    """
    Partition over node timestamps and explicit edge timestamps.
    """
    timestamps = graph.timestamps()
    timestamps.extend(
        edge.timestamp_ms for edge in graph.edges() if edge.timestamp_ms is not None
    )
    return partition(timestamps, config)
