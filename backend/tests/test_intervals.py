from datetime import datetime, timezone

import pytest

from credgraph.config.settings import DAY_MS, SUNDAY_ANCHOR_MS, WEEK_MS, IntervalConfig
from credgraph.graph.graph_schema import Node
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.timeline.interval import Interval, IntervalPartition, partition, partition_graph
from credgraph.utils.time import datetime_to_ms, ms_to_datetime

from conftest import WEEK0, WEEK1, WEEK2


def _ms(*args) -> int:
    return datetime_to_ms(datetime(*args, tzinfo=timezone.utc))


def test_intervals_are_contiguous_ascending_and_cover_the_range():
    timestamps = [WEEK2 + 7 * DAY_MS, WEEK0, WEEK1 - 3, WEEK0 + 1]
    result = partition(timestamps)

    assert result.start_ms <= min(timestamps)
    assert result.end_ms > max(timestamps)
    for prev, cur in zip(result, list(result)[1:]):
        assert prev.end_ms == cur.start_ms
        assert prev.start_ms < cur.start_ms
    assert all(interval.width_ms == WEEK_MS for interval in result)
    assert len(result) == 4


def test_weekly_boundaries_fall_on_sunday_midnight():
    result = partition([WEEK0, WEEK1])

    for interval in result:
        start = ms_to_datetime(interval.start_ms)
        assert start.weekday() == 6
        assert (start.hour, start.minute, start.second) == (0, 0, 0)
    assert result[0].start_ms == _ms(2024, 1, 7)


def test_partitioning_is_stable():
    first = partition([WEEK0, WEEK2])
    second = partition([WEEK2, WEEK0, WEEK1])

    assert first == second


def test_single_timestamp_gives_one_interval():
    result = partition([WEEK1])

    assert len(result) == 1
    assert result[0].contains(WEEK1)
    assert result[0].width_ms == WEEK_MS


def test_no_timestamps_gives_one_interval_at_the_anchor():
    result = partition([])

    assert result.intervals == (Interval(SUNDAY_ANCHOR_MS, SUNDAY_ANCHOR_MS + WEEK_MS),)


def test_timestamp_on_a_boundary_starts_a_new_interval():
    boundary = _ms(2024, 1, 14)
    result = partition([boundary - 1, boundary])

    assert len(result) == 2
    assert result.index_of(boundary - 1) == 0
    assert result.index_of(boundary) == 1


def test_custom_width_and_anchor():
    config = IntervalConfig(width_ms=DAY_MS, anchor_ms=6 * 60 * 60 * 1000)
    result = partition([_ms(2024, 3, 1, 5), _ms(2024, 3, 1, 7)], config)

    assert [ms_to_datetime(i.start_ms).hour for i in result] == [6, 6]
    assert ms_to_datetime(result[0].start_ms).day == 29


def test_monthly_calendar():
    config = IntervalConfig(calendar="month")
    result = partition([_ms(2024, 1, 15), _ms(2024, 3, 3)], config)

    assert [ms_to_datetime(i.start_ms).month for i in result] == [1, 2, 3]
    assert result[0].start_ms == _ms(2024, 1, 1)
    assert result.end_ms == _ms(2024, 4, 1)
    assert result[1].width_ms == 29 * DAY_MS


def test_monthly_calendar_wraps_the_year():
    config = IntervalConfig(calendar="month")
    result = partition([_ms(2023, 12, 31), _ms(2024, 1, 1)], config)

    assert len(result) == 2
    assert result[1].start_ms == _ms(2024, 1, 1)


def test_index_of_outside_the_partition_raises():
    result = partition([WEEK0])

    with pytest.raises(ValueError):
        result.index_of(WEEK1)


def test_non_contiguous_partition_is_rejected():
    with pytest.raises(ValueError):
        IntervalPartition((Interval(0, 10), Interval(11, 20)))


def test_invalid_interval_config():
    with pytest.raises(ValueError):
        IntervalConfig(width_ms=0)
    with pytest.raises(ValueError):
        IntervalConfig(calendar="fortnight")


def test_timeless_nodes_do_not_affect_partitioning():
    graph = WeightedGraph()
    graph.add_node(Node.create(["user", "alice"], None))
    graph.add_node(Node.create(["post", "1"], WEEK1))

    result = partition_graph(graph)

    assert len(result) == 1
    assert result[0].contains(WEEK1)


def test_index_of_across_a_long_partition():
    result = partition([WEEK0, WEEK0 + 51 * WEEK_MS])

    assert len(result) == 52
    for i, interval in enumerate(result):
        assert result.index_of(interval.start_ms) == i
        assert result.index_of(interval.end_ms - 1) == i
