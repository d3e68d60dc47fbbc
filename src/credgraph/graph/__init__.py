"""
Graph subsystem for credgraph.

Defines the contribution graph abstractions consumed by the cred engine:
- typed nodes and edges keyed by structured addresses
- prefix-keyed weight tables with longest-prefix resolution
- plugin declarations that supply default weights
"""

from credgraph.graph.graph_schema import (
    Node,
    Edge,
    NodeAddress,
    EdgeAddress,
    node_address,
    edge_address,
    format_address,
)
from credgraph.graph.weights import EdgeWeight, Weights, PrefixTable
from credgraph.graph.declarations import (
    NodeType,
    EdgeType,
    PluginDeclaration,
    weights_from_declarations,
    user_prefixes,
)
from credgraph.graph.weighted_graph import WeightedGraph

__all__ = [
    "Node",
    "Edge",
    "NodeAddress",
    "EdgeAddress",
    "node_address",
    "edge_address",
    "format_address",
    "EdgeWeight",
    "Weights",
    "PrefixTable",
    "NodeType",
    "EdgeType",
    "PluginDeclaration",
    "weights_from_declarations",
    "user_prefixes",
    "WeightedGraph",
]
