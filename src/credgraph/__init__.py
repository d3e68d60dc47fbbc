"""
credgraph
=========

Time-aware contribution scoring over typed, weighted graphs.

Activity is sliced into intervals; each interval is scored with a
personalized PageRank whose seed and edges decay over time, and the
converged distribution of one interval seeds the next.

Public API:
- WeightedGraph
- Weights
- compute / reanalyze
- TimelineCred
- CredSession
"""

from credgraph.errors import (
    CredGraphError,
    DuplicateAddressError,
    DanglingReferenceError,
    InvalidParameterError,
    ConvergenceWarning,
)
from credgraph.graph.graph_schema import Node, Edge
from credgraph.graph.weights import EdgeWeight, Weights
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.timeline.params import TimelineCredParameters
from credgraph.timeline.timeline_cred import TimelineCred, compute, reanalyze
from credgraph.timeline.session import CredSession

__all__ = [
    "CredGraphError",
    "DuplicateAddressError",
    "DanglingReferenceError",
    "InvalidParameterError",
    "ConvergenceWarning",
    "Node",
    "Edge",
    "EdgeWeight",
    "Weights",
    "WeightedGraph",
    "TimelineCredParameters",
    "TimelineCred",
    "compute",
    "reanalyze",
    "CredSession",
]

__version__ = "0.1.0"
