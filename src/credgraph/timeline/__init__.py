"""
Timeline cred engine.

Partitions graph activity into intervals, builds one random-walk chain
per interval, solves them in order with carryover between consecutive
intervals, and collects the results into an immutable score table.
"""

from credgraph.timeline.interval import (
    Interval,
    IntervalPartition,
    partition,
    partition_graph,
)
from credgraph.timeline.params import TimelineCredParameters, coerce_params
from credgraph.timeline.markov import IntervalChain, MarkovChainBuilder, carryover
from credgraph.timeline.pagerank import PageRankResult, PageRankSolver
from credgraph.timeline.timeline_cred import (
    NodeCred,
    SolveReport,
    TimelineCred,
    compute,
    reanalyze,
)
from credgraph.timeline.session import CredSession

__all__ = [
    "Interval",
    "IntervalPartition",
    "partition",
    "partition_graph",
    "TimelineCredParameters",
    "coerce_params",
    "IntervalChain",
    "MarkovChainBuilder",
    "carryover",
    "PageRankResult",
    "PageRankSolver",
    "NodeCred",
    "SolveReport",
    "TimelineCred",
    "compute",
    "reanalyze",
    "CredSession",
]
